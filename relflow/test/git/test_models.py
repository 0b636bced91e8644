"""Tests for git/models.py."""

from __future__ import annotations

from relflow.git.models import WorkspaceStatus, parse_porcelain_status


class TestWorkspaceStatus:
    def test_clean(self) -> None:
        status = WorkspaceStatus()
        assert status.is_clean
        assert not status.has_pending
        assert not status.has_conflicts

    def test_pending_paths_are_sorted_and_unique(self) -> None:
        status = WorkspaceStatus(
            not_added=frozenset({"b.txt"}),
            created=frozenset({"a.txt"}),
            modified=frozenset({"a.txt", "c.txt"}),
        )
        assert status.pending_paths == ("a.txt", "b.txt", "c.txt")
        assert not status.is_clean

    def test_conflicts_are_not_pending(self) -> None:
        status = WorkspaceStatus(conflicted=frozenset({"src/app.js"}))
        assert status.has_conflicts
        assert status.pending_paths == ()
        assert not status.is_clean


class TestParsePorcelainStatus:
    def test_empty_output(self) -> None:
        assert parse_porcelain_status("") == WorkspaceStatus()

    def test_all_kinds(self) -> None:
        output = "\n".join(
            [
                "?? new.txt",
                "A  added.txt",
                "AM added_then_edited.txt",
                " D gone.txt",
                "D  removed.txt",
                " M edited.txt",
                "M  staged.txt",
                "R  old.txt -> renamed.txt",
                "UU both.txt",
                "AA both_added.txt",
                "!! ignored.log",
            ]
        )

        status = parse_porcelain_status(output)

        assert status.not_added == {"new.txt"}
        assert status.created == {"added.txt", "added_then_edited.txt"}
        assert status.deleted == {"gone.txt", "removed.txt"}
        assert status.modified == {"added_then_edited.txt", "edited.txt", "staged.txt"}
        assert status.renamed == {"renamed.txt"}
        assert status.conflicted == {"both.txt", "both_added.txt"}

    def test_quoted_paths(self) -> None:
        status = parse_porcelain_status('?? "with space.txt"\n')
        assert status.not_added == {"with space.txt"}

    def test_branch_header_ignored(self) -> None:
        status = parse_porcelain_status("## master...origin/master\n M a.txt\n")
        assert status.modified == {"a.txt"}

    def test_octal_escaped_paths(self) -> None:
        status = parse_porcelain_status('?? "caf\\303\\251.txt"\n M "tab\\there.txt"\n')
        assert status.not_added == {"café.txt"}
        assert status.modified == {"tab\there.txt"}

    def test_nul_separated_records(self) -> None:
        output = "\0".join(
            [
                "?? café.txt",
                " M a -> b.txt",
                "R  renamed.txt",
                "old name.txt",
                "UU both.txt",
                "",
            ]
        )

        status = parse_porcelain_status(output)

        assert status.not_added == {"café.txt"}
        assert status.modified == {"a -> b.txt"}
        assert status.renamed == {"renamed.txt"}
        assert status.conflicted == {"both.txt"}
        assert "old name.txt" not in status.pending_paths
