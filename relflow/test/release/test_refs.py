from __future__ import annotations

from relflow.release.refs import has_remote_ref, latest_release, parse_remote_refs
from relflow.release.version import Version

SHA = "3f2a" * 10

LISTING = "\n".join(
    [
        f"{SHA}\trefs/heads/master",
        f"{SHA}\trefs/heads/dev/1.3.0",
        f"{SHA}\trefs/heads/dev/not-a-version",
        f"{SHA}\trefs/heads/feature/dev/9.9.9",
        f"{SHA}\trefs/tags/release/1.0.0",
        f"{SHA}\trefs/tags/release/1.10.0",
        f"{SHA}\trefs/tags/release/1.2.0",
        f"{SHA}\trefs/tags/release/1.2.0^{{}}",
        f"{SHA}\trefs/tags/release/2.0.0-beta.1",
        f"{SHA}\trefs/tags/v3.0.0",
        "garbage line",
        "",
    ]
)


def _strs(versions: tuple[Version, ...]) -> list[str]:
    return [str(v) for v in versions]


def test_release_tags_sorted_descending() -> None:
    assert _strs(parse_remote_refs(LISTING, "release-tag")) == [
        "2.0.0-beta.1",
        "1.10.0",
        "1.2.0",
        "1.0.0",
    ]


def test_dev_branches_only_under_prefix() -> None:
    assert _strs(parse_remote_refs(LISTING, "dev-branch")) == ["1.3.0"]


def test_bare_refs_without_sha() -> None:
    listing = "refs/tags/release/0.1.0\nrefs/tags/release/0.2.0\n"
    assert _strs(parse_remote_refs(listing, "release-tag")) == ["0.2.0", "0.1.0"]


def test_empty_listing() -> None:
    assert parse_remote_refs("", "release-tag") == ()
    assert latest_release("") is None


def test_parsing_is_stable() -> None:
    first = parse_remote_refs(LISTING, "release-tag")
    shuffled = "\n".join(reversed(LISTING.splitlines()))
    assert parse_remote_refs(LISTING, "release-tag") == first
    assert parse_remote_refs(shuffled, "release-tag") == first


def test_duplicates_collapse() -> None:
    listing = f"{SHA}\trefs/tags/release/1.0.0\n{SHA}\trefs/tags/release/1.0.0+build.7\n"
    assert len(parse_remote_refs(listing, "release-tag")) == 1


def test_latest_release() -> None:
    assert latest_release(LISTING) == Version.parse("2.0.0-beta.1")


def test_has_remote_ref_is_exact() -> None:
    assert has_remote_ref(LISTING, "refs/heads/master")
    assert has_remote_ref(LISTING, "refs/tags/release/1.2.0")
    assert not has_remote_ref(LISTING, "refs/heads/main")
    assert not has_remote_ref(LISTING, "refs/heads/dev/1.3")
