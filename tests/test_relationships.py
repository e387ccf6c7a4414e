"""Unit tests for relationships module."""

import pytest

from commitsplit.models import ChangeRecord, DiffLine, Hunk, LineKind, RelationshipKind
from commitsplit.relationships import (
    analyze_relationships,
    base_name,
    config_strength,
    extract_function_names,
    import_strength,
    pairing_strength,
    score_pair,
    similar_changes_strength,
)


def _change(path, added=(), removed=(), context=(), insertions=None, deletions=None):
    lines = (
        [DiffLine(content=c, kind=LineKind.CONTEXT) for c in context]
        + [DiffLine(content=r, kind=LineKind.REMOVED) for r in removed]
        + [DiffLine(content=a, kind=LineKind.ADDED) for a in added]
    )
    hunks = (Hunk(header="@@ -1 +1 @@", lines=tuple(lines)),) if lines else ()
    return ChangeRecord(
        path=path,
        insertions=len(added) if insertions is None else insertions,
        deletions=len(removed) if deletions is None else deletions,
        hunks=hunks,
    )


class TestBaseName:
    """Tests for base_name function."""

    def test_strips_directory_and_extension(self):
        """Should drop the directory and the last extension."""
        assert base_name("src/auth/login.ts") == "login"
        assert base_name("src/auth/login.test.ts") == "login.test"
        assert base_name("Makefile") == "Makefile"


class TestImportStrength:
    """Tests for import_strength function."""

    def test_name_mention(self):
        """Should score 0.6 when one file mentions the other's name."""
        a = _change("src/app.py", added=["from utils import helper"])
        b = _change("src/utils.py", added=["def helper(): pass"])
        assert import_strength(a, b) == pytest.approx(0.6)

    def test_relative_import_caps_at_one(self):
        """Should add 0.8 for a relative import and cap at 1.0."""
        a = _change("src/app.ts", added=["import { x } from './utils'"])
        b = _change("src/utils.ts", added=["export const x = 1"])
        assert import_strength(a, b) == 1.0

    def test_python_relative_import(self):
        """Should recognise Python relative imports."""
        a = _change("pkg/app.py", context=["from .models import User"])
        b = _change("pkg/models.py", added=["class User: pass"])
        assert import_strength(a, b) == 1.0

    def test_unrelated(self):
        """Should score zero when neither file mentions the other."""
        a = _change("src/app.py", added=["print('x')"])
        b = _change("src/other.py", added=["print('y')"])
        assert import_strength(a, b) == 0


class TestPairingStrength:
    """Tests for pairing_strength function."""

    def test_test_and_source(self):
        """Should score 0.9 for a test file named after its source."""
        source = _change("src/auth/login.ts")
        test = _change("src/auth/login.test.ts")
        assert pairing_strength(source, test) == 0.9
        assert pairing_strength(test, source) == 0.9

    def test_python_layout(self):
        """Should pair tests/test_x.py with x.py."""
        assert pairing_strength(_change("tests/test_parser.py"), _change("src/pkg/parser.py")) == 0.9

    def test_two_tests(self):
        """Should not pair two test files."""
        assert pairing_strength(_change("tests/test_a.py"), _change("tests/test_b.py")) == 0

    def test_unrelated_test(self):
        """Should not pair a test with an unrelated source."""
        assert pairing_strength(_change("tests/test_a.py"), _change("src/other.py")) == 0


class TestSimilarChanges:
    """Tests for similar_changes_strength function."""

    def test_extract_names(self):
        """Should find function declarations and assignments."""
        change = _change(
            "src/a.js",
            added=["function load() {", "const save = async () => {}", "def parse(x):"],
        )
        assert extract_function_names(change) == ["load", "save", "parse"]

    def test_context_not_scanned(self):
        """Should only look at added and removed lines."""
        change = _change("src/a.js", context=["function hidden() {}"])
        assert extract_function_names(change) == []

    def test_full_overlap(self):
        """Should score 0.7 when both files change the same functions."""
        a = _change("src/a.py", added=["def load(x):", "def save(x):"])
        b = _change("src/b.py", removed=["def load(x):", "def save(x):"])
        assert similar_changes_strength(a, b) == pytest.approx(0.7)

    def test_partial_overlap(self):
        """Should scale by the larger function list."""
        a = _change("src/a.py", added=["def load(x):"])
        b = _change("src/b.py", added=["def load(x):", "def save(x):"])
        assert similar_changes_strength(a, b) == pytest.approx(0.35)

    def test_no_functions(self):
        """Should score zero without any function names."""
        assert similar_changes_strength(_change("a.txt"), _change("b.txt")) == 0


class TestConfigStrength:
    """Tests for config_strength function."""

    def test_both_config(self):
        """Should score 0.8 when both files look like configuration."""
        assert config_strength(_change("package.json"), _change("config/app.yaml")) == 0.8

    def test_one_config(self):
        """Should score zero when only one file is configuration."""
        assert config_strength(_change("package.json"), _change("src/app.py")) == 0


class TestScorePair:
    """Tests for score_pair and analyze_relationships."""

    def test_emits_test_pair(self):
        """Should emit a test_pair edge of strength 0.9."""
        source = _change("src/auth/login.ts", added=["export function login() {}"], insertions=40, deletions=2)
        test = _change("src/auth/login.test.ts", added=["it('logs in', () => {})"], insertions=30)

        edges = score_pair(source, test)

        test_edges = [e for e in edges if e.kind is RelationshipKind.TEST_PAIR]
        assert len(test_edges) == 1
        assert test_edges[0].strength == 0.9
        assert {test_edges[0].file_a, test_edges[0].file_b} == {"src/auth/login.ts", "src/auth/login.test.ts"}

    def test_below_threshold_dropped(self):
        """Should not emit edges at or below their thresholds."""
        a = _change("src/first.py", added=["def load(x):"])
        b = _change("src/second.py", added=["def load(x):", "def save(x):"])
        assert score_pair(a, b) == []

    def test_no_self_edges(self):
        """Should not relate a file to itself."""
        a = _change("settings.json")
        assert score_pair(a, a) == []

    def test_sorted_by_strength(self):
        """Should list the strongest edges first."""
        changes = [
            _change("settings.json"),
            _change("config.yml"),
            _change("src/app.py", added=["from .utils import x"]),
            _change("src/utils.py"),
        ]
        edges = analyze_relationships(changes)
        strengths = [e.strength for e in edges]
        assert strengths == sorted(strengths, reverse=True)
        assert edges[0].kind is RelationshipKind.IMPORT
        assert any(e.kind is RelationshipKind.CONFIG_RELATED for e in edges)
