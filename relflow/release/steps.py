"""Shared plumbing for workflow steps: echo git commands, lift git failures."""

from __future__ import annotations

from relflow.git.models import GitError
from relflow.output.console import ConsoleProtocol, Style
from relflow.release.errors import ReleaseError, ReleaseErrorKind

CONFLICT_HINT = "resolve the conflicts, commit the result, then rerun"


def echo_git(console: ConsoleProtocol, *args: str) -> None:
    console.print(" ".join(("git", *args)), Style.DIM)


def git_failure(error: GitError, *, kind: ReleaseErrorKind = "git_failed") -> ReleaseError:
    """Turn a GitError into a ReleaseError; conflicts always win over ``kind``."""
    if error.conflict:
        return ReleaseError(
            kind="conflict",
            message=f"git {error.command}: {error.message}",
            hint=CONFLICT_HINT,
        )
    return ReleaseError(kind=kind, message=f"git {error.command} failed: {error.message}")
