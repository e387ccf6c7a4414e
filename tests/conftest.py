"""Shared fixtures for commitsplit tests."""

import pytest

from commitsplit.models import ChangeKind, ChangeRecord, DiffLine, Hunk, LineKind


@pytest.fixture
def make_change():
    """Factory for ChangeRecord objects with a single hunk of added lines."""

    def _make(path, added=(), insertions=None, deletions=0, hunks=None, kind=ChangeKind.MODIFIED):
        lines = tuple(DiffLine(content=a, kind=LineKind.ADDED) for a in added)
        if hunks is None:
            hunks = (Hunk(header="@@ -1 +1 @@", lines=lines),) if lines else ()
        return ChangeRecord(
            path=path,
            kind=kind,
            insertions=len(added) if insertions is None else insertions,
            deletions=deletions,
            hunks=hunks,
        )

    return _make
