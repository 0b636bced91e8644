"""Version-control layer.

- VersionControl: the capability protocol the release workflow consumes
- Repository: implementation backed by the git executable
- MockRepository: in-memory implementation for tests

Usage:
    from relflow.git import Repository

    repo = Repository(Path("/path/to/project"))
    status = repo.status()
    if status.is_ok() and status.unwrap().has_conflicts:
        ...
"""

from relflow.git.mock import MockRepository
from relflow.git.models import GitError, WorkspaceStatus, parse_porcelain_status
from relflow.git.protocol import VersionControl
from relflow.git.repository import Repository

__all__ = [
    "GitError",
    "MockRepository",
    "Repository",
    "VersionControl",
    "WorkspaceStatus",
    "parse_porcelain_status",
]
