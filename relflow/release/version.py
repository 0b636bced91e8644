"""Semantic versions for projects, release tags and development branches.

Parsing and precedence come from python-semver. Increments follow the
npm rules the managed projects already use: bumping a pre-release to the
release it leads up to drops the pre-release part instead of skipping a
version (``1.3.0-beta.1`` minor -> ``1.3.0``, not ``1.4.0``).
"""

from __future__ import annotations

from typing import Literal

import semver
from semver import Version

from relflow.core.result import Err, Ok, Result
from relflow.release.errors import ReleaseError

__all__ = [
    "BUMPS",
    "ReleaseBump",
    "Version",
    "bump",
    "bump_candidates",
    "parse_version",
    "try_parse_version",
]

ReleaseBump = Literal["patch", "minor", "major"]
BUMPS: tuple[ReleaseBump, ...] = ("patch", "minor", "major")


def try_parse_version(text: str) -> Version | None:
    """Parse a full ``MAJOR.MINOR.PATCH[-pre][+build]`` string, or None."""
    if not semver.Version.is_valid(text.strip()):
        return None
    return Version.parse(text.strip())


def parse_version(text: str, *, source: str = "manifest") -> Result[Version, ReleaseError]:
    version = try_parse_version(text)
    if version is None:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"invalid version in {source}: {text!r}",
                hint="Expected MAJOR.MINOR.PATCH, e.g. 1.2.0 or 1.2.0-beta.1",
            )
        )
    return Ok(version)


def bump(version: Version, kind: ReleaseBump) -> Version:
    if version.prerelease is not None:
        final = version.finalize_version()
        match kind:
            case "patch":
                return final
            case "minor" if version.patch == 0:
                return final
            case "major" if version.minor == 0 and version.patch == 0:
                return final
            case _:
                pass

    match kind:
        case "major":
            return version.bump_major()
        case "minor":
            return version.bump_minor()
        case "patch":
            return version.bump_patch()
        case _:
            raise AssertionError(f"unexpected bump kind: {kind}")


def bump_candidates(version: Version) -> dict[ReleaseBump, Version]:
    """Every increment of ``version``, keyed by kind (for prompts)."""
    return {kind: bump(version, kind) for kind in BUMPS}
