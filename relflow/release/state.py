"""Choices remembered between runs (hosting platform, token, owner, publish target).

Each record is one small text file under ``<home>/.git/``. A record is asked
for once and reused until the user passes the matching ``--refresh-*`` flag.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Literal

from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol
from relflow.platform.files import atomic_write_text
from relflow.release.errors import ReleaseError

StateKey = Literal["server", "token", "owner", "login", "publish"]

STATE_DIR = ".git"
_FILES: dict[StateKey, str] = {
    "server": ".git_server",
    "token": ".git_token",
    "owner": ".git_own",
    "login": ".git_login",
    "publish": ".git_publish",
}
_SECRET: frozenset[StateKey] = frozenset({"token"})


class StateStore:
    def __init__(self, home: Path) -> None:
        self.root = home / STATE_DIR

    def path(self, key: StateKey) -> Path:
        return self.root / _FILES[key]

    def read(self, key: StateKey) -> str | None:
        """Stored value, or None when missing, unreadable or blank."""
        try:
            value = self.path(key).read_text(encoding="utf-8").strip()
        except OSError:
            return None
        return value or None

    def write(self, key: StateKey, value: str) -> Result[Path, ReleaseError]:
        path = self.path(key)
        try:
            atomic_write_text(path, value)
            if key in _SECRET:
                path.chmod(0o600)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message=f"failed to save {key}: {e}",
                    hint=str(path),
                )
            )
        return Ok(path)

    def resolve(
        self,
        key: StateKey,
        *,
        ask: Callable[[], str],
        console: ConsoleProtocol,
        refresh: bool = False,
    ) -> Result[str, ReleaseError]:
        """Return the stored value, asking (and saving) when missing or refreshed."""
        stored = None if refresh else self.read(key)
        if stored is not None:
            console.verbose(f"{key} read from {self.path(key)}")
            return Ok(stored)

        value = ask().strip()
        if not value:
            return Err(ReleaseError(kind="invalid_input", message=f"{key} must not be empty"))

        saved = self.write(key, value)
        if isinstance(saved, Err):
            return saved
        shown = "***" if key in _SECRET else value
        console.success(f"{key} saved: {shown} -> {saved.value}")
        return Ok(value)
