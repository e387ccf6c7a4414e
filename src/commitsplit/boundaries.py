"""Commit boundary detection.

Boundaries come from a chain of sources tried in order. The AI source
asks the model for a grouping and declines when the answer is unusable;
the heuristic source clusters changes by impact type and always answers.
Whatever the chain returns is passed through the optimizer.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Protocol

from commitsplit import impact
from commitsplit.agent import (
    BOUNDARY_INSTRUCTIONS,
    CATEGORY_INSTRUCTIONS,
    CompletionClient,
    build_boundary_prompt,
    build_category_prompt,
    extract_json,
)
from commitsplit.config import Config
from commitsplit.dependencies import boundary_dependencies, build_dependency_graph
from commitsplit.models import (
    BoundarySuggestion,
    CategorySuggestion,
    ChangeRecord,
    CommitBoundary,
    Priority,
)
from commitsplit.optimizer import calculate_complexity, optimize_boundaries
from commitsplit.relationships import analyze_relationships

logger = logging.getLogger(__name__)

IMPACT_PRIORITIES = {
    impact.BUSINESS_LOGIC: Priority.HIGH,
    impact.API: Priority.HIGH,
    impact.DATABASE: Priority.HIGH,
    impact.UI: Priority.MEDIUM,
    impact.CONFIGURATION: Priority.MEDIUM,
}


class BoundarySource(Protocol):
    """A way of proposing boundaries. Returning None passes to the next source."""

    async def propose(self, changes: list[ChangeRecord]) -> list[CommitBoundary] | None:
        ...


class AIBoundarySource:
    """Boundaries suggested by the model.

    The suggestion is trusted when it has more than one boundary or when
    the change set is larger than ``config.ai_gate_file_count``. Files the
    model skipped end up in one extra boundary and files it listed twice
    stay in the first boundary that claimed them.
    """

    def __init__(self, client: CompletionClient, config: Config):
        self.client = client
        self.config = config

    async def propose(self, changes: list[ChangeRecord]) -> list[CommitBoundary] | None:
        try:
            boundaries = await self._request(changes)
        except Exception as e:  # noqa: BLE001 - any model failure means "no result"
            logger.warning("AI boundary analysis failed, falling back to heuristics: %s", e)
            return None

        if not boundaries:
            return None
        if len(boundaries) > 1 or len(changes) > self.config.ai_gate_file_count:
            logger.info("Using %d AI-suggested boundaries", len(boundaries))
            claimed = {path for boundary in boundaries for path in boundary.file_paths}
            unassigned = [change for change in changes if change.path not in claimed]
            if unassigned:
                boundaries.append(_catch_all_boundary(unassigned, "ai-boundary-unassigned"))
            return boundaries

        logger.debug("AI suggested a single boundary for %d files, using heuristics", len(changes))
        return None

    async def _request(self, changes: list[ChangeRecord]) -> list[CommitBoundary]:
        text = await self.client.complete(
            build_boundary_prompt(changes),
            BOUNDARY_INSTRUCTIONS,
            self.config.boundary_max_tokens,
            self.config.boundary_temperature,
        )
        if not text:
            return []
        json_str = extract_json(text)
        if json_str is None:
            raise ValueError("response contained no JSON object")
        suggestion = BoundarySuggestion(**json.loads(json_str))

        by_path = {change.path: change for change in changes}
        graph = build_dependency_graph(changes)
        claimed: set[str] = set()
        used_ids: set[str] = set()
        boundaries: list[CommitBoundary] = []

        for index, suggested in enumerate(suggestion.boundaries, start=1):
            files = [
                by_path[path]
                for path in dict.fromkeys(suggested.files)
                if path in by_path and path not in claimed
            ]
            if not files:
                continue
            claimed.update(f.path for f in files)

            boundary_id = suggested.id or f"ai-boundary-{index}"
            if boundary_id in used_ids:
                boundary_id = f"ai-boundary-{index}"
            used_ids.add(boundary_id)

            boundaries.append(
                CommitBoundary(
                    id=boundary_id,
                    files=files,
                    reasoning=suggested.reasoning or "AI-generated boundary based on semantic analysis",
                    priority=suggested.priority or Priority.MEDIUM,
                    estimated_complexity=calculate_complexity(files),
                    dependencies=boundary_dependencies(files, graph),
                    theme=suggested.theme or "code changes",
                )
            )

        return boundaries


class HeuristicBoundarySource:
    """Boundaries seeded from impact-type groups.

    With a completion client, per-file categories suggested by the model
    are added to the heuristic impact label before grouping.
    """

    def __init__(self, client: CompletionClient | None = None, config: Config | None = None):
        self.client = client
        self.config = config or Config()

    async def propose(self, changes: list[ChangeRecord]) -> list[CommitBoundary]:
        extra = await self._ai_categories(changes) if self.client is not None else None
        groups = impact.group_by_impact(changes, extra)
        relationships = analyze_relationships(changes)
        graph = build_dependency_graph(changes)
        logger.debug(
            "Heuristic analysis: %d impact groups, %d relationships",
            len(groups),
            len(relationships),
        )

        boundaries: list[CommitBoundary] = []
        processed: set[str] = set()

        for impact_type, files in groups.items():
            unprocessed = [f for f in files if f.path not in processed]
            if not unprocessed:
                continue
            boundaries.append(
                CommitBoundary(
                    id=f"boundary-{len(boundaries) + 1}",
                    files=unprocessed,
                    reasoning=f"Related {impact_type} changes that should be committed together",
                    priority=IMPACT_PRIORITIES.get(impact_type, Priority.LOW),
                    estimated_complexity=calculate_complexity(unprocessed),
                    dependencies=boundary_dependencies(unprocessed, graph),
                    theme=impact.detect_theme(unprocessed),
                )
            )
            processed.update(f.path for f in unprocessed)

        remaining = [f for f in groups.get(impact.MIXED, []) if f.path not in processed]
        if remaining:
            boundaries.append(_catch_all_boundary(remaining, "boundary-mixed"))

        return boundaries

    async def _ai_categories(self, changes: list[ChangeRecord]) -> list[list[str]]:
        return list(await asyncio.gather(*(self._categorize(change) for change in changes)))

    async def _categorize(self, change: ChangeRecord) -> list[str]:
        try:
            text = await self.client.complete(
                build_category_prompt(change),
                CATEGORY_INSTRUCTIONS,
                self.config.category_max_tokens,
                self.config.category_temperature,
            )
            if not text:
                return []
            json_str = extract_json(text)
            if json_str is None:
                return []
            suggestion = CategorySuggestion(**json.loads(json_str))
        except Exception as e:  # noqa: BLE001 - any model failure means "no result"
            logger.debug("AI categorization failed for %s: %s", change.path, e)
            return []

        categories: list[str] = []
        for category in suggestion.categories:
            label = category.strip().lower()
            if label in impact.AI_CATEGORIES and label not in categories:
                categories.append(label)
        return categories


class BoundaryDetector:
    """Detect and optimize commit boundaries for a set of changes.

    Args:
        config: Thresholds and model settings.
        client: Completion client; when None, only heuristics are used.
    """

    def __init__(self, config: Config | None = None, client: CompletionClient | None = None):
        self.config = config or Config()
        self.sources: list[BoundarySource] = []
        if client is not None:
            self.sources.append(AIBoundarySource(client, self.config))
        self.sources.append(HeuristicBoundarySource(client, self.config))

    async def detect(self, changes: list[ChangeRecord]) -> list[CommitBoundary]:
        if not changes:
            return []

        boundaries: list[CommitBoundary] = []
        for source in self.sources:
            proposed = await source.propose(changes)
            if proposed is not None:
                boundaries = proposed
                break

        return optimize_boundaries(
            boundaries,
            max_size=self.config.max_boundary_size,
            chunk_size=self.config.split_chunk_size,
            merge_limit=self.config.merge_limit,
        )


def detect_boundaries(
    changes: list[ChangeRecord],
    config: Config | None = None,
    client: CompletionClient | None = None,
) -> list[CommitBoundary]:
    """Synchronous wrapper around BoundaryDetector.detect."""
    return asyncio.run(BoundaryDetector(config, client).detect(changes))


def _catch_all_boundary(files: list[ChangeRecord], boundary_id: str) -> CommitBoundary:
    return CommitBoundary(
        id=boundary_id,
        files=files,
        reasoning="Mixed changes that don't clearly fit other categories",
        priority=Priority.LOW,
        estimated_complexity=calculate_complexity(files),
        dependencies=[],
        theme="miscellaneous",
    )
