"""Extract release and development versions from a remote reference listing.

The listing is whatever ``git ls-remote`` (or any other source) prints, one
reference per line. Only the ``refs/...`` token matters, so a leading
``<sha>\\t`` column is optional.
"""

from __future__ import annotations

import re
from typing import Literal

from relflow.release.version import Version, try_parse_version

__all__ = ["RefKind", "has_remote_ref", "latest_release", "parse_remote_refs"]

RefKind = Literal["release-tag", "dev-branch"]

_PATTERNS: dict[RefKind, re.Pattern[str]] = {
    "release-tag": re.compile(r"(?:^|\s)refs/tags/release/([^\s^]+)"),
    "dev-branch": re.compile(r"(?:^|\s)refs/heads/dev/([^\s^]+)"),
}


def parse_remote_refs(listing: str, kind: RefKind) -> tuple[Version, ...]:
    """Versions found under the ``kind`` prefix, highest first, without duplicates."""
    pattern = _PATTERNS[kind]
    found: set[Version] = set()
    for line in listing.splitlines():
        m = pattern.search(line)
        if m is None:
            continue
        version = try_parse_version(m.group(1))
        if version is not None:
            found.add(version)
    return tuple(sorted(found, reverse=True))


def latest_release(listing: str) -> Version | None:
    releases = parse_remote_refs(listing, "release-tag")
    return releases[0] if releases else None


def has_remote_ref(listing: str, ref: str) -> bool:
    """True if ``ref`` (e.g. ``refs/heads/master``) is listed exactly."""
    for line in listing.splitlines():
        parts = line.split()
        if parts and parts[-1] in (ref, f"{ref}^{{}}"):
            return True
    return False
