"""Error payload shared by every release workflow step."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from relflow.core.errors import ErrorCode

ReleaseErrorKind = Literal[
    "invalid_version",
    "invalid_input",
    "missing_manifest",
    "missing_script",
    "illegal_build_command",
    "conflict",
    "git_failed",
    "remote_failed",
    "build_failed",
    "hosting_failed",
    "unsupported_divergence",
    "cleanup_failed",
]

Severity = Literal["fatal", "conflict", "remote", "best_effort"]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    ``kind`` is stable and machine readable; ``message`` and ``hint`` are for
    humans. The CLI renders both and picks an exit code from the kind.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    @property
    def severity(self) -> Severity:
        match self.kind:
            case "conflict":
                return "conflict"
            case "remote_failed" | "hosting_failed":
                return "remote"
            case "cleanup_failed":
                return "best_effort"
            case _:
                return "fatal"

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


def release_error_code(error: ReleaseError) -> ErrorCode:
    """Exit code for a failed run: by severity, then by kind for fatal errors."""
    match error.severity:
        case "conflict":
            return ErrorCode.CONFLICT
        case "remote":
            return ErrorCode.NETWORK_ERROR
        case "best_effort":
            return ErrorCode.IO_ERROR
        case "fatal":
            pass

    if error.kind in {"missing_manifest", "git_failed"}:
        return ErrorCode.ENV_ERROR
    if error.kind == "build_failed":
        return ErrorCode.BUILD_ERROR
    return ErrorCode.USER_ERROR
