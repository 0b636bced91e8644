"""Git repository backed by the git executable.

Usage:
    repo = Repository(Path("/path/to/project"))

    match repo.status():
        case Ok(status):
            if status.has_conflicts:
                print("resolve conflicts first")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.git.models import GitError, WorkspaceStatus, parse_porcelain_status
from relflow.platform.process import ProcessError
from relflow.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone", "ls-remote"})

_CONFLICT_MARKERS = ("CONFLICT", "Automatic merge failed", "fix conflicts")

__all__ = ["Repository"]


def _is_conflict(error: ProcessError) -> bool:
    text = f"{error.stdout}\n{error.stderr}"
    return any(marker in text for marker in _CONFLICT_MARKERS)


class Repository:
    """Git working copy at ``path``.

    Implements the VersionControl protocol. Every method that can fail
    returns a Result; nothing raises for git failures.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return (self.path / ".git").exists()

    def init(self) -> Result[None, GitError]:
        return self._check(["init"], label="init")

    def status(self) -> Result[WorkspaceStatus, GitError]:
        result = self._run(["status", "--porcelain=v1", "-z"])
        match result:
            case Err(e):
                return Err(self._error("status", e))
            case Ok(stdout):
                return Ok(parse_porcelain_status(stdout))

    def stage(self, paths: Sequence[str]) -> Result[None, GitError]:
        if not paths:
            return Ok(None)
        return self._check(["add", "-A", "--", *paths], label="add")

    def commit(self, message: str) -> Result[None, GitError]:
        return self._check(["commit", "-m", message], label="commit")

    def list_remotes(self) -> Result[tuple[str, ...], GitError]:
        return self._lines(["remote"], label="remote")

    def add_remote(self, name: str, url: str) -> Result[None, GitError]:
        return self._check(["remote", "add", name, url], label=f"remote add {name}")

    def list_remote_refs(self, remote: str) -> Result[str, GitError]:
        result = self._run(["ls-remote", "--refs", remote])
        if isinstance(result, Err):
            return Err(self._error(f"ls-remote {remote}", result.error))
        return Ok(result.value)

    def list_local_branches(self) -> Result[tuple[str, ...], GitError]:
        return self._lines(["branch", "--format=%(refname:short)"], label="branch")

    def current_branch(self) -> str | None:
        """Current branch name, None on detached HEAD or error."""
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def checkout(self, branch: str) -> Result[None, GitError]:
        return self._check(["checkout", branch], label=f"checkout {branch}")

    def checkout_new(self, branch: str) -> Result[None, GitError]:
        return self._check(["checkout", "-b", branch], label=f"checkout -b {branch}")

    def stash_list(self) -> Result[tuple[str, ...], GitError]:
        return self._lines(["stash", "list"], label="stash list")

    def stash_pop(self) -> Result[None, GitError]:
        return self._check(["stash", "pop"], label="stash pop")

    def merge(self, source: str, target: str) -> Result[None, GitError]:
        if self.current_branch() != target:
            switched = self.checkout(target)
            if isinstance(switched, Err):
                return switched
        return self._check(["merge", "--no-edit", source], label=f"merge {source} -> {target}")

    def pull(
        self, remote: str, branch: str, *, allow_unrelated: bool = False
    ) -> Result[None, GitError]:
        args = ["pull", "--no-edit", remote, branch]
        if allow_unrelated:
            args.append("--allow-unrelated-histories")
        return self._check(args, label=f"pull {remote} {branch}")

    def push(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._check(["push", remote, branch], label=f"push {remote} {branch}")

    def push_tags(self, remote: str) -> Result[None, GitError]:
        return self._check(["push", remote, "--tags"], label=f"push {remote} --tags")

    def list_tags(self) -> Result[tuple[str, ...], GitError]:
        return self._lines(["tag", "--list"], label="tag --list")

    def add_tag(self, name: str) -> Result[None, GitError]:
        return self._check(["tag", name], label=f"tag {name}")

    def delete_local_tag(self, name: str) -> Result[None, GitError]:
        return self._check(["tag", "-d", name], label=f"tag -d {name}")

    def delete_remote_tag(self, remote: str, name: str) -> Result[None, GitError]:
        return self._check(
            ["push", remote, f":refs/tags/{name}"], label=f"push {remote} :refs/tags/{name}"
        )

    def delete_local_branch(self, name: str) -> Result[None, GitError]:
        return self._check(["branch", "-d", name], label=f"branch -d {name}")

    def delete_remote_branch(self, remote: str, name: str) -> Result[None, GitError]:
        return self._check(
            ["push", remote, "--delete", name], label=f"push {remote} --delete {name}"
        )

    def _check(self, args: list[str], *, label: str) -> Result[None, GitError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error(label, result.error))
        return Ok(None)

    def _lines(self, args: list[str], *, label: str) -> Result[tuple[str, ...], GitError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error(label, result.error))
        return Ok(tuple(ln.strip() for ln in result.value.splitlines() if ln.strip()))

    def _error(self, label: str, e: ProcessError) -> GitError:
        return GitError(
            command=label,
            message=e.stderr.strip() or e.stdout.strip() or f"git {label} failed",
            returncode=e.returncode,
            conflict=_is_conflict(e),
        )

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
