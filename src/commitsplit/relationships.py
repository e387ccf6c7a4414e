"""Pairwise relationship scoring between changed files.

Each check returns a strength in [0, 1]. Only edges above the per-kind
emission threshold are kept.
"""

from __future__ import annotations

import re
from itertools import combinations
from pathlib import PurePosixPath

from commitsplit.models import ChangeRecord, RelationshipEdge, RelationshipKind

# Edges at or below these strengths are discarded.
EMISSION_THRESHOLDS = {
    RelationshipKind.IMPORT: 0.3,
    RelationshipKind.TEST_PAIR: 0.7,
    RelationshipKind.SIMILAR_CHANGES: 0.4,
    RelationshipKind.CONFIG_RELATED: 0.5,
}

TEST_MARKERS = ("test", "spec", "__tests__")

CONFIG_MARKERS = ("config", "env", "settings", "constants", ".json", ".yml", ".yaml", ".toml")

# "{name}" is replaced by the other file's base name.
RELATIVE_IMPORT_TEMPLATES = (
    "from './{name}",
    'from "./{name}',
    "from .{name} import",
)

_FUNCTION_RE = re.compile(
    r"(?:function\s+(\w+)|(\w+)\s*[:=]\s*(?:function|\(|async)|def\s+(\w+))"
)


def base_name(path: str) -> str:
    """File name without directory and final extension."""
    return PurePosixPath(path).stem


def is_test_path(path: str) -> bool:
    lower = path.lower()
    return any(marker in lower for marker in TEST_MARKERS)


def is_config_like(path: str) -> bool:
    lower = path.lower()
    return any(marker in lower for marker in CONFIG_MARKERS)


def extract_function_names(change: ChangeRecord) -> list[str]:
    """Best-effort list of function names defined or assigned in changed lines."""
    names: list[str] = []
    for match in _FUNCTION_RE.finditer(change.changed_content):
        name = match.group(1) or match.group(2) or match.group(3)
        if name:
            names.append(name)
    return names


def import_strength(a: ChangeRecord, b: ChangeRecord) -> float:
    content_a, content_b = a.content, b.content
    name_a, name_b = base_name(a.path), base_name(b.path)

    strength = 0.0
    if (name_b and name_b in content_a) or (name_a and name_a in content_b):
        strength += 0.6
    if _has_relative_import(content_a, name_b) or _has_relative_import(content_b, name_a):
        strength += 0.8
    return min(strength, 1.0)


def pairing_strength(a: ChangeRecord, b: ChangeRecord) -> float:
    a_is_test, b_is_test = is_test_path(a.path), is_test_path(b.path)
    if a_is_test == b_is_test:
        return 0.0

    test, source = (a, b) if a_is_test else (b, a)
    source_name = base_name(source.path)
    if source_name and source_name in test.path:
        return 0.9
    return 0.0


def similar_changes_strength(a: ChangeRecord, b: ChangeRecord) -> float:
    names_a = extract_function_names(a)
    names_b = extract_function_names(b)
    common = [name for name in names_a if name in names_b]
    return len(common) / max(len(names_a), len(names_b), 1) * 0.7


def config_strength(a: ChangeRecord, b: ChangeRecord) -> float:
    if is_config_like(a.path) and is_config_like(b.path):
        return 0.8
    return 0.0


_CHECKS = (
    (RelationshipKind.IMPORT, import_strength),
    (RelationshipKind.TEST_PAIR, pairing_strength),
    (RelationshipKind.SIMILAR_CHANGES, similar_changes_strength),
    (RelationshipKind.CONFIG_RELATED, config_strength),
)


def score_pair(a: ChangeRecord, b: ChangeRecord) -> list[RelationshipEdge]:
    """Score every relationship kind for one pair of changes."""
    if a.path == b.path:
        return []

    edges: list[RelationshipEdge] = []
    for kind, check in _CHECKS:
        strength = check(a, b)
        if strength > EMISSION_THRESHOLDS[kind]:
            edges.append(RelationshipEdge(file_a=a.path, file_b=b.path, kind=kind, strength=strength))
    return edges


def analyze_relationships(changes: list[ChangeRecord]) -> list[RelationshipEdge]:
    """Score all pairs of changes, strongest relations first.

    Pairs are visited in input order and the sort is stable, so equal
    strengths keep that order.
    """
    edges: list[RelationshipEdge] = []
    for a, b in combinations(changes, 2):
        edges.extend(score_pair(a, b))
    return sorted(edges, key=lambda edge: edge.strength, reverse=True)


def _has_relative_import(content: str, name: str) -> bool:
    if not name:
        return False
    return any(template.format(name=name) in content for template in RELATIVE_IMPORT_TEMPLATES)
