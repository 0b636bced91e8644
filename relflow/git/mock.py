"""In-memory VersionControl implementation for tests.

MockRepository models just enough of git to exercise the workflow: local and
remote branches with head commits, local and remote tags pointing at commits,
a stash, a working-copy status, and injectable failures.

Usage:
    repo = MockRepository.with_history(remote_branches={"master"})
    repo.remote_tags["release/1.2.0"] = "c0"
    repo.fail_on("push", "remote rejected")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from relflow.core.result import Err, Ok, Result
from relflow.git.models import GitError, WorkspaceStatus

__all__ = ["MockRepository"]

_FAKE_SHA = "0" * 40


def _str_dict() -> dict[str, str]:
    return {}


def _calls() -> list[tuple[str, ...]]:
    return []


@dataclass
class MockRepository:
    initialized: bool = True
    current: str | None = "master"
    local_heads: dict[str, str] = field(default_factory=_str_dict)
    remote_heads: dict[str, str] = field(default_factory=_str_dict)
    local_tags: dict[str, str] = field(default_factory=_str_dict)
    remote_tags: dict[str, str] = field(default_factory=_str_dict)
    remotes: dict[str, str] = field(default_factory=_str_dict)
    stashes: list[str] = field(default_factory=list)
    workspace: WorkspaceStatus = field(default_factory=WorkspaceStatus)
    staged: set[str] = field(default_factory=set)
    commits: list[str] = field(default_factory=list)
    pull_conflicts: dict[str, frozenset[str]] = field(default_factory=dict)
    calls: list[tuple[str, ...]] = field(default_factory=_calls)
    failures: dict[str, GitError] = field(default_factory=dict)
    _counter: int = 0

    @classmethod
    def with_history(
        cls,
        *,
        local_branches: Sequence[str] = ("master",),
        remote_branches: Sequence[str] = (),
        current: str = "master",
    ) -> MockRepository:
        """Repository with an initial commit on every listed branch."""
        repo = cls(current=current, remotes={"origin": "git@example.com:me/project.git"})
        for name in local_branches:
            repo.local_heads[name] = "c0"
        for name in remote_branches:
            repo.remote_heads[name] = "c0"
        return repo

    # Test helpers

    def fail_on(self, op: str, message: str, *, conflict: bool = False) -> None:
        """Make every later call of ``op`` fail with ``message``."""
        self.failures[op] = GitError(command=op, message=message, conflict=conflict)

    def clear_failure(self, op: str) -> None:
        self.failures.pop(op, None)

    def ops(self) -> list[str]:
        """Names of the operations called so far, in order."""
        return [c[0] for c in self.calls]

    def _record(self, op: str, *args: str) -> GitError | None:
        self.calls.append((op, *args))
        return self.failures.get(op)

    def _next_commit(self) -> str:
        self._counter += 1
        return f"c{self._counter}"

    def _head(self) -> str:
        if self.current is None:
            return "c0"
        return self.local_heads.get(self.current, "c0")

    # VersionControl

    def exists(self) -> bool:
        return self.initialized

    def init(self) -> Result[None, GitError]:
        if (err := self._record("init")) is not None:
            return Err(err)
        self.initialized = True
        return Ok(None)

    def status(self) -> Result[WorkspaceStatus, GitError]:
        if (err := self._record("status")) is not None:
            return Err(err)
        return Ok(self.workspace)

    def stage(self, paths: Sequence[str]) -> Result[None, GitError]:
        if (err := self._record("stage", *paths)) is not None:
            return Err(err)
        self.staged.update(paths)
        return Ok(None)

    def commit(self, message: str) -> Result[None, GitError]:
        if (err := self._record("commit", message)) is not None:
            return Err(err)
        pending = set(self.workspace.pending_paths)
        if not pending and not self.staged:
            return Err(GitError(command="commit", message="nothing to commit"))
        if not pending <= self.staged:
            return Err(GitError(command="commit", message="changes not staged for commit"))
        self.workspace = WorkspaceStatus(conflicted=self.workspace.conflicted)
        self.staged.clear()
        self.commits.append(message)
        if self.current is not None:
            self.local_heads[self.current] = self._next_commit()
        return Ok(None)

    def list_remotes(self) -> Result[tuple[str, ...], GitError]:
        if (err := self._record("list_remotes")) is not None:
            return Err(err)
        return Ok(tuple(self.remotes))

    def add_remote(self, name: str, url: str) -> Result[None, GitError]:
        if (err := self._record("add_remote", name, url)) is not None:
            return Err(err)
        if name in self.remotes:
            return Err(GitError(command="remote add", message=f"remote {name} already exists"))
        self.remotes[name] = url
        return Ok(None)

    def list_remote_refs(self, remote: str) -> Result[str, GitError]:
        if (err := self._record("list_remote_refs", remote)) is not None:
            return Err(err)
        lines = [f"{_FAKE_SHA}\trefs/heads/{b}" for b in sorted(self.remote_heads)]
        lines += [f"{_FAKE_SHA}\trefs/tags/{t}" for t in sorted(self.remote_tags)]
        return Ok("\n".join(lines) + ("\n" if lines else ""))

    def list_local_branches(self) -> Result[tuple[str, ...], GitError]:
        if (err := self._record("list_local_branches")) is not None:
            return Err(err)
        return Ok(tuple(sorted(self.local_heads)))

    def current_branch(self) -> str | None:
        return self.current

    def checkout(self, branch: str) -> Result[None, GitError]:
        if (err := self._record("checkout", branch)) is not None:
            return Err(err)
        if branch not in self.local_heads:
            return Err(GitError(command="checkout", message=f"pathspec '{branch}' did not match"))
        self.current = branch
        return Ok(None)

    def checkout_new(self, branch: str) -> Result[None, GitError]:
        if (err := self._record("checkout_new", branch)) is not None:
            return Err(err)
        if branch in self.local_heads:
            return Err(GitError(command="checkout -b", message=f"'{branch}' already exists"))
        self.local_heads[branch] = self._head()
        self.current = branch
        return Ok(None)

    def stash_list(self) -> Result[tuple[str, ...], GitError]:
        if (err := self._record("stash_list")) is not None:
            return Err(err)
        return Ok(tuple(self.stashes))

    def stash_pop(self) -> Result[None, GitError]:
        if (err := self._record("stash_pop")) is not None:
            return Err(err)
        if not self.stashes:
            return Err(GitError(command="stash pop", message="No stash entries found."))
        self.stashes.pop(0)
        return Ok(None)

    def merge(self, source: str, target: str) -> Result[None, GitError]:
        if (err := self._record("merge", source, target)) is not None:
            return Err(err)
        if source not in self.local_heads or target not in self.local_heads:
            return Err(GitError(command="merge", message=f"{source}: not something we can merge"))
        self.current = target
        self.local_heads[target] = self._next_commit()
        return Ok(None)

    def pull(
        self, remote: str, branch: str, *, allow_unrelated: bool = False
    ) -> Result[None, GitError]:
        flag = "--allow-unrelated-histories" if allow_unrelated else ""
        if (err := self._record("pull", remote, branch, flag)) is not None:
            return Err(err)
        if branch not in self.remote_heads:
            return Err(
                GitError(command="pull", message=f"couldn't find remote ref {branch}")
            )
        conflicted = self.pull_conflicts.get(branch)
        if conflicted:
            self.workspace = WorkspaceStatus(conflicted=conflicted)
            return Err(
                GitError(
                    command="pull",
                    message="Automatic merge failed; fix conflicts and then commit the result.",
                    conflict=True,
                )
            )
        if self.current is not None:
            self.local_heads[self.current] = self._next_commit()
        return Ok(None)

    def push(self, remote: str, branch: str) -> Result[None, GitError]:
        if (err := self._record("push", remote, branch)) is not None:
            return Err(err)
        if branch not in self.local_heads:
            return Err(GitError(command="push", message=f"src refspec {branch} does not match"))
        self.remote_heads[branch] = self.local_heads[branch]
        return Ok(None)

    def push_tags(self, remote: str) -> Result[None, GitError]:
        if (err := self._record("push_tags", remote)) is not None:
            return Err(err)
        for name, target in self.local_tags.items():
            existing = self.remote_tags.get(name)
            if existing is not None and existing != target:
                return Err(
                    GitError(command="push --tags", message=f"! [rejected] {name} (already exists)")
                )
        self.remote_tags.update(self.local_tags)
        return Ok(None)

    def list_tags(self) -> Result[tuple[str, ...], GitError]:
        if (err := self._record("list_tags")) is not None:
            return Err(err)
        return Ok(tuple(sorted(self.local_tags)))

    def add_tag(self, name: str) -> Result[None, GitError]:
        if (err := self._record("add_tag", name)) is not None:
            return Err(err)
        if name in self.local_tags:
            return Err(GitError(command="tag", message=f"tag '{name}' already exists"))
        self.local_tags[name] = self._head()
        return Ok(None)

    def delete_local_tag(self, name: str) -> Result[None, GitError]:
        if (err := self._record("delete_local_tag", name)) is not None:
            return Err(err)
        if self.local_tags.pop(name, None) is None:
            return Err(GitError(command="tag -d", message=f"tag '{name}' not found."))
        return Ok(None)

    def delete_remote_tag(self, remote: str, name: str) -> Result[None, GitError]:
        if (err := self._record("delete_remote_tag", remote, name)) is not None:
            return Err(err)
        if self.remote_tags.pop(name, None) is None:
            return Err(GitError(command="push :refs/tags", message="remote ref does not exist"))
        return Ok(None)

    def delete_local_branch(self, name: str) -> Result[None, GitError]:
        if (err := self._record("delete_local_branch", name)) is not None:
            return Err(err)
        if name == self.current:
            return Err(GitError(command="branch -d", message=f"cannot delete checked out '{name}'"))
        if self.local_heads.pop(name, None) is None:
            return Err(GitError(command="branch -d", message=f"branch '{name}' not found."))
        return Ok(None)

    def delete_remote_branch(self, remote: str, name: str) -> Result[None, GitError]:
        if (err := self._record("delete_remote_branch", remote, name)) is not None:
            return Err(err)
        if self.remote_heads.pop(name, None) is None:
            return Err(
                GitError(command="push --delete", message=f"remote ref does not exist: {name}")
            )
        return Ok(None)
