"""Workspace checks run before any checkout, merge or push.

Each check reads a fresh status and is a no-op on a clean workspace.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from relflow.core.result import Err, Ok, Result
from relflow.git.protocol import VersionControl
from relflow.output.console import ConsoleProtocol
from relflow.release.errors import ReleaseError
from relflow.release.steps import CONFLICT_HINT, echo_git, git_failure

type MessagePrompt = Callable[[], str]


def recover_stash(vcs: VersionControl, console: ConsoleProtocol) -> Result[bool, ReleaseError]:
    """Pop the latest stash entry, if any. Ok(True) when something was restored."""
    stashes = vcs.stash_list()
    if isinstance(stashes, Err):
        return Err(git_failure(stashes.error))
    if not stashes.value:
        return Ok(False)

    echo_git(console, "stash", "pop")
    popped = vcs.stash_pop()
    if isinstance(popped, Err):
        return Err(git_failure(popped.error))
    console.success("stashed changes restored")
    return Ok(True)


def ensure_no_conflicts(
    vcs: VersionControl, console: ConsoleProtocol
) -> Result[None, ReleaseError]:
    status = vcs.status()
    if isinstance(status, Err):
        return Err(git_failure(status.error))
    if status.value.has_conflicts:
        return Err(_conflicts(status.value.conflicted))
    console.verbose("no conflicts")
    return Ok(None)


def commit_pending(
    vcs: VersionControl, ask_message: MessagePrompt, console: ConsoleProtocol
) -> Result[bool, ReleaseError]:
    """Stage and commit every pending path. Ok(True) when a commit was made.

    A conflicted workspace is refused before anything is staged.
    """
    status = vcs.status()
    if isinstance(status, Err):
        return Err(git_failure(status.error))
    if status.value.has_conflicts:
        return Err(_conflicts(status.value.conflicted))

    paths = status.value.pending_paths
    if not paths:
        return Ok(False)

    console.verbose(f"pending: {', '.join(paths)}")
    echo_git(console, "add", "-A", "--", *paths)
    staged = vcs.stage(paths)
    if isinstance(staged, Err):
        return Err(git_failure(staged.error))

    message = ""
    while not message:
        message = ask_message().strip()

    echo_git(console, "commit", "-m", message)
    committed = vcs.commit(message)
    if isinstance(committed, Err):
        return Err(git_failure(committed.error))
    console.success(f"committed {len(paths)} path(s)")
    return Ok(True)


def guard_workspace(
    vcs: VersionControl, ask_message: MessagePrompt, console: ConsoleProtocol
) -> Result[None, ReleaseError]:
    """Stash recovery, then conflict detection, then commit-before-proceed."""
    stash = recover_stash(vcs, console)
    if isinstance(stash, Err):
        return stash

    conflicts = ensure_no_conflicts(vcs, console)
    if isinstance(conflicts, Err):
        return conflicts

    committed = commit_pending(vcs, ask_message, console)
    if isinstance(committed, Err):
        return committed
    return Ok(None)


def _conflicts(paths: Iterable[str]) -> ReleaseError:
    return ReleaseError(
        kind="conflict",
        message=f"unresolved conflicts in: {', '.join(sorted(paths))}",
        hint=CONFLICT_HINT,
    )
