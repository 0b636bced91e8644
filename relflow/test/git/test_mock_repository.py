"""MockRepository must behave like git where the workflow relies on it."""

from __future__ import annotations

from relflow.core.result import Err, Ok
from relflow.git import MockRepository, VersionControl, WorkspaceStatus


def test_satisfies_protocol() -> None:
    assert isinstance(MockRepository(), VersionControl)


def test_commit_requires_everything_staged() -> None:
    repo = MockRepository.with_history()
    repo.workspace = WorkspaceStatus(modified=frozenset({"a.txt", "b.txt"}))

    repo.stage(["a.txt"])
    assert isinstance(repo.commit("partial"), Err)

    repo.stage(["b.txt"])
    assert repo.commit("all") == Ok(None)
    assert repo.workspace.is_clean
    assert repo.commits == ["all"]


def test_remote_listing_format() -> None:
    repo = MockRepository.with_history(remote_branches=("master",))
    repo.remote_tags["release/1.0.0"] = "c0"

    listing = repo.list_remote_refs("origin")

    assert isinstance(listing, Ok)
    assert listing.value.splitlines() == [
        f"{'0' * 40}\trefs/heads/master",
        f"{'0' * 40}\trefs/tags/release/1.0.0",
    ]


def test_pull_conflict_marks_workspace() -> None:
    repo = MockRepository.with_history(remote_branches=("master",))
    repo.pull_conflicts["master"] = frozenset({"index.js"})

    result = repo.pull("origin", "master")

    assert isinstance(result, Err)
    assert result.error.conflict
    assert repo.workspace.conflicted == {"index.js"}


def test_push_tags_rejects_moved_tag() -> None:
    repo = MockRepository.with_history()
    repo.remote_tags["release/1.0.0"] = "old"
    repo.local_tags["release/1.0.0"] = "new"

    assert isinstance(repo.push_tags("origin"), Err)


def test_cannot_delete_checked_out_branch() -> None:
    repo = MockRepository.with_history(local_branches=("master", "dev/1.0.0"), current="dev/1.0.0")
    assert isinstance(repo.delete_local_branch("dev/1.0.0"), Err)


def test_injected_failure() -> None:
    repo = MockRepository.with_history()
    repo.fail_on("push", "network down")

    result = repo.push("origin", "master")

    assert isinstance(result, Err)
    assert result.error.message == "network down"
    assert repo.ops() == ["push"]

    repo.clear_failure("push")
    assert repo.push("origin", "master") == Ok(None)
