"""Textual dependency graph between changed files."""

from __future__ import annotations

from commitsplit.models import ChangeRecord
from commitsplit.relationships import base_name


def find_file_dependencies(change: ChangeRecord, changes: list[ChangeRecord]) -> list[str]:
    """Paths of other changes whose base name appears in this change's diff."""
    content = change.content
    dependencies: list[str] = []
    for other in changes:
        if other.path == change.path:
            continue
        name = base_name(other.path)
        if name and name in content:
            dependencies.append(other.path)
    return dependencies


def build_dependency_graph(changes: list[ChangeRecord]) -> dict[str, list[str]]:
    """Map each changed path to the changed paths it references.

    The graph is directed and may contain cycles.
    """
    return {change.path: find_file_dependencies(change, changes) for change in changes}


def boundary_dependencies(files: list[ChangeRecord], graph: dict[str, list[str]]) -> list[str]:
    """Dependencies of a group of files that point outside the group."""
    inside = {f.path for f in files}
    external: list[str] = []
    for change in files:
        for dependency in graph.get(change.path, []):
            if dependency not in inside and dependency not in external:
                external.append(dependency)
    return external
