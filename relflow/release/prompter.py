"""Questions the workflow asks the user.

The CLI answers them with typer prompts; tests use ScriptedPrompter.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal, Protocol

from relflow.release.version import ReleaseBump, Version

OwnerKind = Literal["user", "org"]
OWNER_KINDS: tuple[OwnerKind, ...] = ("user", "org")


class Prompter(Protocol):
    def choose_bump(
        self, release: Version, candidates: Mapping[ReleaseBump, Version]
    ) -> ReleaseBump: ...

    def commit_message(self) -> str: ...

    def platform(self, choices: Sequence[str], default: str) -> str: ...

    def token(self, platform: str, token_url: str) -> str: ...

    def owner_kind(self, choices: Sequence[OwnerKind]) -> OwnerKind: ...

    def organization(self, choices: Sequence[str]) -> str: ...

    def publish_target(self, choices: Sequence[str]) -> str: ...


@dataclass
class ScriptedPrompter:
    """Prompter with canned answers; records every question asked.

    ``messages`` are consumed in order, so a blank entry followed by a real
    message exercises the re-prompt loop.
    """

    bump: ReleaseBump = "patch"
    messages: list[str] = field(default_factory=lambda: ["update"])
    platform_choice: str = "github"
    token_value: str = "secret-token"
    owner: OwnerKind = "user"
    org: str = ""
    target: str = "oss"
    asked: list[str] = field(default_factory=list)

    def choose_bump(
        self, release: Version, candidates: Mapping[ReleaseBump, Version]
    ) -> ReleaseBump:
        self.asked.append(f"bump {release}")
        return self.bump

    def commit_message(self) -> str:
        self.asked.append("commit_message")
        if len(self.messages) > 1:
            return self.messages.pop(0)
        return self.messages[0] if self.messages else "update"

    def platform(self, choices: Sequence[str], default: str) -> str:
        self.asked.append("platform")
        return self.platform_choice

    def token(self, platform: str, token_url: str) -> str:
        self.asked.append(f"token {platform}")
        return self.token_value

    def owner_kind(self, choices: Sequence[OwnerKind]) -> OwnerKind:
        self.asked.append(f"owner {'/'.join(choices)}")
        return self.owner

    def organization(self, choices: Sequence[str]) -> str:
        self.asked.append("organization")
        return self.org

    def publish_target(self, choices: Sequence[str]) -> str:
        self.asked.append("publish_target")
        return self.target
