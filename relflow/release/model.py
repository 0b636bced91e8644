from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from relflow.release.errors import ReleaseError
from relflow.release.version import ReleaseBump, Version

DEV_PREFIX = "dev/"
RELEASE_PREFIX = "release/"


def dev_branch_name(version: Version) -> str:
    return f"{DEV_PREFIX}{version}"


def release_tag_name(version: Version) -> str:
    return f"{RELEASE_PREFIX}{version}"


@dataclass(frozen=True, slots=True)
class UploadTarget:
    """scp destination for the build output (``user@host:path``)."""

    user: str
    host: str
    path: str
    source: str = "dist"

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.host}:{self.path}"


@dataclass(frozen=True, slots=True)
class PublishContext:
    """Everything one workflow run knows about the project.

    Steps never mutate it; a step that changes the version or branch returns
    a new context (``dataclasses.replace``).
    """

    project_name: str
    version: Version
    work_dir: Path
    build_command: str
    target_branch: str
    is_production: bool = False
    upload: UploadTarget | None = None


@dataclass(frozen=True, slots=True)
class Negotiation:
    version: Version
    branch: str
    # Set only when the version was derived from the latest release.
    bump: ReleaseBump | None = None


class PipelineState(StrEnum):
    IDLE = "idle"
    PRE_PUBLISH_VALIDATED = "pre_publish_validated"
    BUILT = "built"
    PRODUCTION_GATE = "production_gate"
    TAG_CREATED = "tag_created"
    MASTER_UPDATED = "master_updated"
    BRANCHES_CLEANED = "branches_cleaned"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class PipelineReport:
    states: tuple[PipelineState, ...]
    warnings: tuple[ReleaseError, ...] = ()

    @property
    def final_state(self) -> PipelineState | None:
        return self.states[-1] if self.states else None
