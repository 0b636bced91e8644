"""Interactive answers for the release workflow, asked with typer."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import typer

from relflow.output.console import ConsoleProtocol, Style
from relflow.release.prompter import OwnerKind
from relflow.release.version import BUMPS, ReleaseBump, Version

_OWNER_LABELS: dict[OwnerKind, str] = {"user": "personal", "org": "organization"}


def pick(console: ConsoleProtocol, title: str, labels: Sequence[str], *, default: int = 1) -> int:
    """Numbered menu; returns the 0-based index of the choice."""
    console.print(title, Style.BOLD)
    for i, label in enumerate(labels, start=1):
        console.print(f"{i:2}. {label}", Style.DIM)

    while True:
        raw = typer.prompt("Pick number", default=str(default))
        try:
            idx = int(raw)
        except ValueError:
            console.error("invalid number")
            continue
        if idx < 1 or idx > len(labels):
            console.error("out of range")
            continue
        return idx - 1


class TyperPrompter:
    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def choose_bump(
        self, release: Version, candidates: Mapping[ReleaseBump, Version]
    ) -> ReleaseBump:
        labels = [f"{k:<6} ({release} -> {candidates[k]})" for k in BUMPS]
        idx = pick(self._console, f"Latest release is {release}; pick the next version", labels)
        return BUMPS[idx]

    def commit_message(self) -> str:
        return str(typer.prompt("Commit message", default="", show_default=False))

    def platform(self, choices: Sequence[str], default: str) -> str:
        start = choices.index(default) + 1 if default in choices else 1
        idx = pick(self._console, "Hosting platform", list(choices), default=start)
        return choices[idx]

    def token(self, platform: str, token_url: str) -> str:
        self._console.warning(f"no {platform} token saved; create one at {token_url}")
        return str(typer.prompt(f"{platform} token", hide_input=True))

    def owner_kind(self, choices: Sequence[OwnerKind]) -> OwnerKind:
        idx = pick(self._console, "Repository owner", [_OWNER_LABELS[c] for c in choices])
        return choices[idx]

    def organization(self, choices: Sequence[str]) -> str:
        idx = pick(self._console, "Organization", list(choices))
        return choices[idx]

    def publish_target(self, choices: Sequence[str]) -> str:
        idx = pick(self._console, "Publish target", [c.upper() for c in choices])
        return choices[idx]
