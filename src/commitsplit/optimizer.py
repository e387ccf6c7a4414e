"""Post-processing of detected boundaries: split large ones, merge tiny ones."""

from __future__ import annotations

import logging

from commitsplit.models import ChangeRecord, CommitBoundary

logger = logging.getLogger(__name__)

MAX_BOUNDARY_SIZE = 8
SPLIT_CHUNK_SIZE = 4
MERGE_LIMIT = 4


def calculate_complexity(files: list[ChangeRecord]) -> float:
    """Changed lines plus half a point per hunk."""
    return sum(f.total_changes for f in files) + 0.5 * sum(f.hunk_count for f in files)


def split_boundary(boundary: CommitBoundary, chunk_size: int = SPLIT_CHUNK_SIZE) -> list[CommitBoundary]:
    """Split a boundary into consecutive chunks of at most ``chunk_size`` files."""
    chunks = [boundary.files[i : i + chunk_size] for i in range(0, len(boundary.files), chunk_size)]
    total = len(chunks)
    return [
        boundary.model_copy(
            update={
                "id": f"{boundary.id}-part{index}",
                "files": list(chunk),
                "reasoning": f"{boundary.reasoning} (part {index} of {total})",
                "estimated_complexity": calculate_complexity(chunk),
                "dependencies": list(boundary.dependencies),
            }
        )
        for index, chunk in enumerate(chunks, start=1)
    ]


def merge_boundaries(target: CommitBoundary, source: CommitBoundary) -> CommitBoundary:
    """Return a new boundary holding ``target`` followed by ``source``."""
    return target.model_copy(
        update={
            "files": [*target.files, *source.files],
            "reasoning": f"{target.reasoning} + {source.reasoning}",
            "estimated_complexity": target.estimated_complexity + source.estimated_complexity,
        }
    )


def optimize_boundaries(
    boundaries: list[CommitBoundary],
    max_size: int = MAX_BOUNDARY_SIZE,
    chunk_size: int = SPLIT_CHUNK_SIZE,
    merge_limit: int = MERGE_LIMIT,
) -> list[CommitBoundary]:
    """Split oversized boundaries and fold singletons into same-theme neighbours.

    Split parts hold at most ``chunk_size`` files, and never more than ``max_size``.

    Input boundaries are never modified. Every file of the input appears
    exactly once in the output.
    """
    optimized: list[CommitBoundary] = []

    for boundary in boundaries:
        if len(boundary.files) > max_size:
            parts = split_boundary(boundary, min(chunk_size, max_size))
            logger.debug("Split %s (%d files) into %d parts", boundary.id, len(boundary.files), len(parts))
            optimized.extend(parts)
        elif len(boundary.files) == 1:
            target = next(
                (
                    index
                    for index, existing in enumerate(optimized)
                    if existing.theme == boundary.theme and len(existing.files) < merge_limit
                ),
                None,
            )
            if target is None:
                optimized.append(boundary)
            else:
                logger.debug("Merged %s into %s", boundary.id, optimized[target].id)
                optimized[target] = merge_boundaries(optimized[target], boundary)
        else:
            optimized.append(boundary)

    return optimized
