"""Value types returned by version-control queries."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = [
    "CONFLICT_CODES",
    "GitError",
    "WorkspaceStatus",
    "parse_porcelain_status",
]

# Unmerged XY pairs from `git status --porcelain=v1` (see git-status(1)).
CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "pull origin master")
        message: Error message
        returncode: Process return code
        conflict: True when git stopped on merge conflicts
    """

    command: str
    message: str
    returncode: int = 1
    conflict: bool = False


def _empty() -> frozenset[str]:
    return frozenset()


@dataclass(frozen=True, slots=True)
class WorkspaceStatus:
    """Snapshot of the working copy.

    Each set holds repository-relative paths. A path can sit in more than one
    set (``AM`` is both created and modified); conflicted paths sit only in
    ``conflicted``.
    """

    not_added: frozenset[str] = field(default_factory=_empty)
    created: frozenset[str] = field(default_factory=_empty)
    deleted: frozenset[str] = field(default_factory=_empty)
    modified: frozenset[str] = field(default_factory=_empty)
    renamed: frozenset[str] = field(default_factory=_empty)
    conflicted: frozenset[str] = field(default_factory=_empty)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicted)

    @property
    def pending_paths(self) -> tuple[str, ...]:
        """Every path that must be staged before a merge/checkout, sorted."""
        paths = self.not_added | self.created | self.deleted | self.modified | self.renamed
        return tuple(sorted(paths))

    @property
    def has_pending(self) -> bool:
        return bool(self.pending_paths)

    @property
    def is_clean(self) -> bool:
        return not self.has_pending and not self.has_conflicts


_C_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}
_OCTAL = frozenset("01234567")


def _unquote(path: str) -> str:
    """Undo git's C-style quoting (``core.quotePath``), octal escapes included."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            octal = body[i + 1 : i + 4]
            if len(octal) == 3 and set(octal) <= _OCTAL:
                raw.append(int(octal, 8))
                i += 4
                continue
            if body[i + 1] in _C_ESCAPES:
                raw.append(_C_ESCAPES[body[i + 1]])
                i += 2
                continue
        raw += ch.encode("utf-8")
        i += 1
    return raw.decode("utf-8", errors="surrogateescape")


def parse_porcelain_status(output: str) -> WorkspaceStatus:
    """Parse `git status --porcelain=v1` output into a WorkspaceStatus.

    Accepts both the NUL-separated form (``-z``, paths verbatim, a rename's
    source in the record after it) and the line form (quoted paths,
    ``old -> new`` renames).
    """
    not_added: set[str] = set()
    created: set[str] = set()
    deleted: set[str] = set()
    modified: set[str] = set()
    renamed: set[str] = set()
    conflicted: set[str] = set()

    nul_separated = "\0" in output
    records = output.split("\0") if nul_separated else output.splitlines()

    skip_source = False
    for record in records:
        if skip_source:
            skip_source = False
            continue
        if len(record) < 4 or record.startswith("##"):
            continue

        xy = record[:2]
        if nul_separated:
            path = record[3:]
            skip_source = xy[0] in "RC"
        else:
            # "old -> new": the new path is what exists on disk.
            path = _unquote(record[3:].split(" -> ", 1)[-1])

        if xy == "??":
            not_added.add(path)
            continue
        if xy == "!!":
            continue
        if xy in CONFLICT_CODES:
            conflicted.add(path)
            continue

        x, y = xy[0], xy[1]
        if x == "R":
            renamed.add(path)
        if x in "AC":
            created.add(path)
        if x == "D" or y == "D":
            deleted.add(path)
        if x == "M" or y == "M":
            modified.add(path)

    return WorkspaceStatus(
        not_added=frozenset(not_added),
        created=frozenset(created),
        deleted=frozenset(deleted),
        modified=frozenset(modified),
        renamed=frozenset(renamed),
        conflicted=frozenset(conflicted),
    )
