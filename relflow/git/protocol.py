"""Version-control capability consumed by the release workflow.

The workflow only sequences these primitives; it never shells out to git
itself. Repository implements this protocol with the git executable and
MockRepository implements it in memory for tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from relflow.core.result import Result
from relflow.git.models import GitError, WorkspaceStatus

__all__ = ["VersionControl"]


@runtime_checkable
class VersionControl(Protocol):
    def exists(self) -> bool:
        """True if the working directory already holds repository metadata."""
        ...

    def init(self) -> Result[None, GitError]: ...

    def status(self) -> Result[WorkspaceStatus, GitError]: ...

    def stage(self, paths: Sequence[str]) -> Result[None, GitError]: ...

    def commit(self, message: str) -> Result[None, GitError]: ...

    def list_remotes(self) -> Result[tuple[str, ...], GitError]: ...

    def add_remote(self, name: str, url: str) -> Result[None, GitError]: ...

    def list_remote_refs(self, remote: str) -> Result[str, GitError]:
        """Raw `<sha>\\t<ref>` listing of the remote, one reference per line."""
        ...

    def list_local_branches(self) -> Result[tuple[str, ...], GitError]: ...

    def current_branch(self) -> str | None: ...

    def checkout(self, branch: str) -> Result[None, GitError]: ...

    def checkout_new(self, branch: str) -> Result[None, GitError]: ...

    def stash_list(self) -> Result[tuple[str, ...], GitError]: ...

    def stash_pop(self) -> Result[None, GitError]: ...

    def merge(self, source: str, target: str) -> Result[None, GitError]:
        """Merge ``source`` into ``target`` (``target`` ends up checked out)."""
        ...

    def pull(
        self, remote: str, branch: str, *, allow_unrelated: bool = False
    ) -> Result[None, GitError]: ...

    def push(self, remote: str, branch: str) -> Result[None, GitError]: ...

    def push_tags(self, remote: str) -> Result[None, GitError]: ...

    def list_tags(self) -> Result[tuple[str, ...], GitError]: ...

    def add_tag(self, name: str) -> Result[None, GitError]: ...

    def delete_local_tag(self, name: str) -> Result[None, GitError]: ...

    def delete_remote_tag(self, remote: str, name: str) -> Result[None, GitError]: ...

    def delete_local_branch(self, name: str) -> Result[None, GitError]: ...

    def delete_remote_branch(self, remote: str, name: str) -> Result[None, GitError]: ...
