from __future__ import annotations

import pytest

from relflow.core.errors import ErrorCode
from relflow.release.errors import ReleaseError, release_error_code


@pytest.mark.parametrize(
    ("kind", "severity", "code"),
    [
        ("invalid_version", "fatal", ErrorCode.USER_ERROR),
        ("missing_script", "fatal", ErrorCode.USER_ERROR),
        ("illegal_build_command", "fatal", ErrorCode.USER_ERROR),
        ("unsupported_divergence", "fatal", ErrorCode.USER_ERROR),
        ("missing_manifest", "fatal", ErrorCode.ENV_ERROR),
        ("conflict", "conflict", ErrorCode.CONFLICT),
        ("remote_failed", "remote", ErrorCode.NETWORK_ERROR),
        ("hosting_failed", "remote", ErrorCode.NETWORK_ERROR),
        ("build_failed", "fatal", ErrorCode.BUILD_ERROR),
        ("cleanup_failed", "best_effort", ErrorCode.IO_ERROR),
    ],
)
def test_severity_and_exit_code(kind: str, severity: str, code: ErrorCode) -> None:
    error = ReleaseError(kind=kind, message="m")  # type: ignore[arg-type]
    assert error.severity == severity
    assert release_error_code(error) == code


def test_pretty() -> None:
    assert ReleaseError(kind="conflict", message="m").pretty() == "m"
    assert ReleaseError(kind="conflict", message="m", hint="h").pretty() == "m (hint: h)"
