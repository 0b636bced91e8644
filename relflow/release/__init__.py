"""Release workflow.

- refs / negotiator: which version and dev branch a run works on
- guard: stash, conflict and pending-change checks
- branches: checkout, pull, push, first-time bootstrap
- pipeline: build, tag, merge to stable, branch cleanup
- workflow: the commit cycle and publish composed from the above
- prepare / state: hosted repository setup and remembered choices
"""

from __future__ import annotations
