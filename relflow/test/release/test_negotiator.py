from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

import pytest

from relflow.core.result import Err, Ok
from relflow.git.mock import MockRepository
from relflow.output.console import MockConsole
from relflow.release.model import PublishContext
from relflow.release.negotiator import check_divergence, negotiate, negotiate_version
from relflow.release.version import BUMPS, ReleaseBump, Version


def _manifest(tmp_path: Path, version: str) -> Path:
    path = tmp_path / "package.json"
    path.write_text(
        json.dumps({"name": "app", "version": version}, indent=2) + "\n", encoding="utf-8"
    )
    return path


def _ctx(tmp_path: Path, version: str) -> PublishContext:
    return PublishContext(
        project_name="app",
        version=Version.parse(version),
        work_dir=tmp_path,
        build_command="npm run build",
        target_branch=f"dev/{version}",
    )


def _always(kind: ReleaseBump):
    asked: list[Version] = []

    def choose(latest: Version, candidates: Mapping[ReleaseBump, Version]) -> ReleaseBump:
        assert set(candidates) == set(BUMPS)
        asked.append(latest)
        return kind

    return choose, asked


def _never(latest: Version, candidates: Mapping[ReleaseBump, Version]) -> ReleaseBump:
    raise AssertionError("bump must not be asked")


def _run(tmp_path: Path, repo: MockRepository, local: str, kind: ReleaseBump = "patch"):
    path = _manifest(tmp_path, local)
    choose, asked = _always(kind)
    result = negotiate_version(
        _ctx(tmp_path, local),
        vcs=repo,
        remote="origin",
        manifest_path=path,
        choose_bump=choose,
        console=MockConsole(),
    )
    return result, path, asked


def _manifest_version(path: Path) -> str:
    return json.loads(path.read_text(encoding="utf-8"))["version"]


def test_no_release_keeps_local(tmp_path: Path) -> None:
    repo = MockRepository.with_history(remote_branches=["master"])

    result, path, asked = _run(tmp_path, repo, "1.0.0")

    assert isinstance(result, Ok)
    assert str(result.value.version) == "1.0.0"
    assert result.value.target_branch == "dev/1.0.0"
    assert asked == []
    assert _manifest_version(path) == "1.0.0"


def test_behind_latest_release_bumps_release(tmp_path: Path) -> None:
    repo = MockRepository.with_history(remote_branches=["master"])
    repo.remote_tags["release/1.2.0"] = "c0"
    repo.remote_tags["release/1.1.0"] = "c0"

    result, path, asked = _run(tmp_path, repo, "1.0.0", kind="minor")

    assert isinstance(result, Ok)
    assert str(result.value.version) == "1.3.0"
    assert result.value.target_branch == "dev/1.3.0"
    assert asked == [Version.parse("1.2.0")]
    assert _manifest_version(path) == "1.3.0"


def test_equal_to_latest_release_bumps(tmp_path: Path) -> None:
    repo = MockRepository.with_history()
    repo.remote_tags["release/1.2.0"] = "c0"

    result, _, _ = _run(tmp_path, repo, "1.2.0", kind="patch")

    assert isinstance(result, Ok)
    assert str(result.value.version) == "1.2.1"


def test_ahead_of_latest_release_keeps_local(tmp_path: Path) -> None:
    repo = MockRepository.with_history()
    repo.remote_tags["release/1.2.0"] = "c0"

    result, path, asked = _run(tmp_path, repo, "2.0.0")

    assert isinstance(result, Ok)
    assert str(result.value.version) == "2.0.0"
    assert asked == []
    assert _manifest_version(path) == "2.0.0"


def test_single_dev_branch_ahead_is_allowed(tmp_path: Path) -> None:
    repo = MockRepository.with_history(remote_branches=["master", "dev/1.3.0"])
    repo.remote_tags["release/1.2.0"] = "c0"

    result, _, _ = _run(tmp_path, repo, "1.3.0")

    assert isinstance(result, Ok)
    assert result.value.target_branch == "dev/1.3.0"


def test_divergent_dev_branches_are_refused(tmp_path: Path) -> None:
    repo = MockRepository.with_history(remote_branches=["master", "dev/1.3.0", "dev/2.0.0"])
    repo.remote_tags["release/1.2.0"] = "c0"

    result, path, asked = _run(tmp_path, repo, "1.0.0")

    assert isinstance(result, Err)
    assert result.error.kind == "unsupported_divergence"
    assert "dev/2.0.0" in result.error.message
    assert asked == []
    assert _manifest_version(path) == "1.0.0"


def test_released_dev_branches_do_not_count(tmp_path: Path) -> None:
    listing = "refs/heads/dev/1.1.0\nrefs/heads/dev/1.2.0\nrefs/heads/dev/1.3.0\n"
    assert check_divergence(listing, Version.parse("1.2.0")) == Ok(None)
    assert isinstance(check_divergence(listing, None), Err)


def test_remote_listing_failure(tmp_path: Path) -> None:
    repo = MockRepository.with_history()
    repo.fail_on("list_remote_refs", "Could not read from remote repository.")

    result, path, _ = _run(tmp_path, repo, "1.0.0")

    assert isinstance(result, Err)
    assert result.error.kind == "remote_failed"
    assert result.error.severity == "remote"
    assert _manifest_version(path) == "1.0.0"


def test_missing_manifest(tmp_path: Path) -> None:
    choose, _ = _always("patch")
    result = negotiate_version(
        _ctx(tmp_path, "1.0.0"),
        vcs=MockRepository.with_history(),
        remote="origin",
        manifest_path=tmp_path / "package.json",
        choose_bump=choose,
        console=MockConsole(),
    )
    assert isinstance(result, Err)
    assert result.error.kind == "missing_manifest"


@pytest.mark.parametrize("latest", ["0.1.0", "1.2.0", "1.3.0-beta.1", "3.0.0-rc.2"])
@pytest.mark.parametrize("local", ["0.0.1", "1.0.0", "1.2.0", "1.3.0-alpha"])
def test_negotiated_version_never_below_latest(latest: str, local: str) -> None:
    latest_v = Version.parse(latest)
    for kind in BUMPS:
        choose, _ = _always(kind)
        decision = negotiate(Version.parse(local), latest_v, choose)
        assert decision.version > latest_v
        assert decision.branch == f"dev/{decision.version}"


def test_negotiate_without_release() -> None:
    decision = negotiate(Version.parse("0.3.0"), None, _never)
    assert decision.version == Version.parse("0.3.0")
    assert decision.bump is None
