"""Error codes for CLI exit status.

The numeric values are process exit codes and must stay stable:
- 0: Success
- 1: User error (bad input, invalid version, illegal build command)
- 2: Environment error (not a repository, missing manifest, bad config)
- 3: Build error (build command failed)
- 4: Network error (push/pull/tag rejected, hosting API unreachable)
- 5: I/O error (file not writable)
- 6: Conflict (merge conflicts need manual resolution)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    CONFLICT = 6

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
