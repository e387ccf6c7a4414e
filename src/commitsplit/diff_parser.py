"""
Parsing of git diff output into ChangeRecord objects.

Only the parts of the unified diff format needed for boundary analysis
are handled: hunk headers and the added, removed and context lines that
follow them. File headers and mode lines are skipped.
"""

from __future__ import annotations

import re

from commitsplit.models import ChangeKind, ChangeRecord, DiffLine, Hunk, LineKind

_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,\d+)? \+(\d+)(?:,\d+)? @@")

_STATUS_KINDS = {
    "A": ChangeKind.ADDED,
    "D": ChangeKind.DELETED,
    "R": ChangeKind.RENAMED,
    "M": ChangeKind.MODIFIED,
}


def parse_hunks(diff: str) -> list[Hunk]:
    """Parse the hunks of a single-file unified diff.

    Lines before the first ``@@`` header are ignored. Added lines are
    numbered from the hunk's new-file start line.
    """
    hunks: list[Hunk] = []
    header: str | None = None
    lines: list[DiffLine] = []
    next_line = 0

    for raw in diff.splitlines():
        if raw.startswith("@@"):
            if header is not None:
                hunks.append(Hunk(header=header, lines=tuple(lines)))
            match = _HUNK_HEADER_RE.match(raw)
            next_line = int(match.group(2)) if match else 0
            header = raw
            lines = []
            continue

        if header is None:
            continue

        if raw.startswith("+"):
            lines.append(DiffLine(content=raw[1:], kind=LineKind.ADDED, line_number=next_line))
            next_line += 1
        elif raw.startswith("-"):
            lines.append(DiffLine(content=raw[1:], kind=LineKind.REMOVED))
        elif raw.startswith(" "):
            lines.append(DiffLine(content=raw[1:], kind=LineKind.CONTEXT))
            next_line += 1

    if header is not None:
        hunks.append(Hunk(header=header, lines=tuple(lines)))

    return hunks


def change_from_diff(path: str, diff: str, kind: ChangeKind = ChangeKind.MODIFIED) -> ChangeRecord:
    """Build a ChangeRecord whose counts are derived from its hunks."""
    hunks = parse_hunks(diff)
    insertions = sum(1 for h in hunks for line in h.lines if line.kind is LineKind.ADDED)
    deletions = sum(1 for h in hunks for line in h.lines if line.kind is LineKind.REMOVED)
    return ChangeRecord(
        path=path,
        kind=kind,
        insertions=insertions,
        deletions=deletions,
        hunks=tuple(hunks),
    )


def parse_numstat(output: str) -> list[tuple[str, int, int]]:
    """Parse ``git diff --numstat`` output into (path, insertions, deletions).

    Binary files report ``-`` for both counts and are counted as zero.
    Rename entries keep only the destination path.
    """
    entries: list[tuple[str, int, int]] = []
    for line in output.strip().splitlines():
        parts = line.split("\t")
        if len(parts) < 3 or not parts[2]:
            continue
        insertions, deletions = parts[0], parts[1]
        path = parts[-1]
        if " => " in path:
            path = _rename_destination(path)
        entries.append(
            (
                path,
                0 if insertions == "-" else int(insertions),
                0 if deletions == "-" else int(deletions),
            )
        )
    return entries


def parse_name_status(output: str) -> dict[str, tuple[ChangeKind, str | None]]:
    """Parse ``git diff --name-status`` output.

    Returns a mapping of current path to (kind, previous path).
    """
    statuses: dict[str, tuple[ChangeKind, str | None]] = {}
    for line in output.strip().splitlines():
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        kind = _STATUS_KINDS.get(parts[0][:1], ChangeKind.MODIFIED)
        if kind is ChangeKind.RENAMED and len(parts) >= 3:
            statuses[parts[2]] = (kind, parts[1])
        else:
            statuses[parts[1]] = (kind, None)
    return statuses


def _rename_destination(path: str) -> str:
    # "src/{old => new}/file.py" or "old.py => new.py"
    if "{" in path and "}" in path:
        prefix, rest = path.split("{", 1)
        inner, suffix = rest.split("}", 1)
        new = inner.split(" => ", 1)[1]
        return (prefix + new + suffix).replace("//", "/")
    return path.split(" => ", 1)[1]
