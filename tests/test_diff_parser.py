"""Unit tests for diff_parser module."""

from commitsplit.diff_parser import change_from_diff, parse_hunks, parse_name_status, parse_numstat
from commitsplit.models import ChangeKind, LineKind

SAMPLE_DIFF = """diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,4 @@
 import os
-import sys
+import json
+import logging
@@ -10,2 +11,2 @@ def main():
-    print("hi")
+    logging.info("hi")
     return 0
"""


class TestParseHunks:
    """Tests for parse_hunks function."""

    def test_splits_hunks(self):
        """Should produce one hunk per @@ header."""
        hunks = parse_hunks(SAMPLE_DIFF)
        assert len(hunks) == 2
        assert hunks[0].header == "@@ -1,3 +1,4 @@"
        assert hunks[1].header.startswith("@@ -10,2 +11,2 @@")

    def test_line_kinds(self):
        """Should classify lines and strip the marker."""
        first = parse_hunks(SAMPLE_DIFF)[0]
        assert [line.kind for line in first.lines] == [
            LineKind.CONTEXT,
            LineKind.REMOVED,
            LineKind.ADDED,
            LineKind.ADDED,
        ]
        assert first.lines[1].content == "import sys"

    def test_added_line_numbers(self):
        """Should number added lines from the new-file start line."""
        hunks = parse_hunks(SAMPLE_DIFF)
        added = [line.line_number for line in hunks[0].lines if line.kind is LineKind.ADDED]
        assert added == [2, 3]
        assert hunks[1].lines[1].line_number == 11
        assert hunks[0].lines[0].line_number is None

    def test_file_headers_ignored(self):
        """Should not treat ---/+++ headers as lines."""
        hunks = parse_hunks(SAMPLE_DIFF)
        contents = [line.content for hunk in hunks for line in hunk.lines]
        assert "++ b/src/app.py" not in contents
        assert "-- a/src/app.py" not in contents

    def test_empty(self):
        """Should return no hunks for empty input."""
        assert parse_hunks("") == []


class TestChangeFromDiff:
    """Tests for change_from_diff function."""

    def test_counts_match_hunks(self):
        """Should derive insertions and deletions from hunk lines."""
        change = change_from_diff("src/app.py", SAMPLE_DIFF)
        assert change.insertions == 3
        assert change.deletions == 2
        assert change.hunk_count == 2
        assert change.kind is ChangeKind.MODIFIED


class TestParseNumstat:
    """Tests for parse_numstat function."""

    def test_regular_and_binary(self):
        """Should parse counts and treat binary entries as zero."""
        output = "3\t1\tsrc/app.py\n-\t-\tassets/logo.png\n"
        assert parse_numstat(output) == [("src/app.py", 3, 1), ("assets/logo.png", 0, 0)]

    def test_renames(self):
        """Should keep the destination path of renames."""
        output = "0\t0\told.py => new.py\n2\t0\tsrc/{core => lib}/util.py\n"
        assert parse_numstat(output) == [("new.py", 0, 0), ("src/lib/util.py", 2, 0)]

    def test_empty(self):
        """Should return nothing for empty output."""
        assert parse_numstat("") == []


class TestParseNameStatus:
    """Tests for parse_name_status function."""

    def test_statuses(self):
        """Should map status letters to change kinds."""
        output = "M\tsrc/app.py\nA\tnew.py\nD\tgone.py\nR100\told.py\tmoved.py\n"
        statuses = parse_name_status(output)
        assert statuses["src/app.py"] == (ChangeKind.MODIFIED, None)
        assert statuses["new.py"] == (ChangeKind.ADDED, None)
        assert statuses["gone.py"] == (ChangeKind.DELETED, None)
        assert statuses["moved.py"] == (ChangeKind.RENAMED, "old.py")
