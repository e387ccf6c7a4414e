"""Turn detected boundaries into a staging strategy with commit plans."""

from __future__ import annotations

import math

from commitsplit.models import (
    CommitBoundary,
    CommitPlan,
    Risk,
    StagingStrategy,
    StrategyKind,
    SuggestedMessage,
)

HIGH_RISK_COMPLEXITY = 500
MEDIUM_RISK_COMPLEXITY = 200
MAX_COMMITS_BEFORE_WARNING = 5

THEME_DESCRIPTIONS = {
    "authentication": "implement authentication system",
    "user interface": "update UI components",
    "api development": "add API endpoints",
    "testing": "add test coverage",
    "configuration": "update configuration",
}


def infer_commit_type(boundary: CommitBoundary) -> str:
    theme = boundary.theme
    if "test" in theme:
        return "test"
    if "doc" in theme:
        return "docs"
    if "config" in theme:
        return "chore"
    if "ui" in theme or "style" in theme:
        return "feat"
    if any("fix" in f.path or "bug" in f.path for f in boundary.files):
        return "fix"
    return "feat"


def common_directory(paths: list[str]) -> str:
    """Longest shared directory prefix of ``paths``, or ``""`` for the root."""
    if not paths:
        return ""
    directories = [path.split("/")[:-1] for path in paths]
    common: list[str] = []
    for parts in zip(*directories):
        if any(part != parts[0] for part in parts):
            break
        common.append(parts[0])
    return "/".join(common)


def infer_scope(boundary: CommitBoundary) -> str | None:
    directory = common_directory(boundary.file_paths)
    if not directory:
        return None
    return directory.split("/")[-1] or None


def describe_theme(theme: str) -> str:
    return THEME_DESCRIPTIONS.get(theme, theme.replace("_", " "))


def suggest_message(boundary: CommitBoundary) -> SuggestedMessage:
    commit_type = infer_commit_type(boundary)
    scope = infer_scope(boundary)
    description = describe_theme(boundary.theme)
    title = f"{commit_type}({scope}): {description}" if scope else f"{commit_type}: {description}"

    body = None
    if len(boundary.files) > 3:
        body = "Changes include:\n" + "\n".join(f"- {path}" for path in boundary.file_paths)

    return SuggestedMessage(title=title, type=commit_type, body=body)


def assess_risk(boundary: CommitBoundary) -> Risk:
    if boundary.estimated_complexity > HIGH_RISK_COMPLEXITY:
        return Risk.HIGH
    if boundary.estimated_complexity > MEDIUM_RISK_COMPLEXITY:
        return Risk.MEDIUM
    return Risk.LOW


def estimate_time(boundary: CommitBoundary) -> str:
    minutes = max(2, math.ceil(len(boundary.files) / 2))
    return f"{minutes} minutes"


def plan_commit(boundary: CommitBoundary) -> CommitPlan:
    return CommitPlan(
        boundary=boundary,
        suggested_message=suggest_message(boundary),
        rationale=(
            f"This commit groups {len(boundary.files)} files related to {boundary.theme}. "
            f"{boundary.reasoning}"
        ),
        risk=assess_risk(boundary),
        estimated_time=estimate_time(boundary),
    )


def compose_strategy(boundaries: list[CommitBoundary]) -> StagingStrategy:
    """Build the commit plan for an ordered list of boundaries.

    The plan order follows ``boundaries``. An empty input gives an empty,
    low-risk, parallel strategy.
    """
    commits = [plan_commit(boundary) for boundary in boundaries]
    high_risk = sum(1 for plan in commits if plan.risk is Risk.HIGH)
    medium_risk = sum(1 for plan in commits if plan.risk is Risk.MEDIUM)
    has_dependencies = any(boundary.dependencies for boundary in boundaries)

    warnings: list[str] = []
    if len(boundaries) > MAX_COMMITS_BEFORE_WARNING:
        warnings.append(f"Large number of commits ({len(boundaries)}) - consider if some can be combined")
    if high_risk:
        warnings.append(f"{high_risk} high-risk commits detected - extra review recommended")
    if has_dependencies:
        warnings.append("Some commits have dependencies - ensure proper commit order")

    if has_dependencies:
        strategy = StrategyKind.SEQUENTIAL
    elif high_risk:
        strategy = StrategyKind.PROGRESSIVE
    else:
        strategy = StrategyKind.PARALLEL

    if high_risk:
        overall_risk = Risk.HIGH
    elif medium_risk > len(commits) / 2:
        overall_risk = Risk.MEDIUM
    else:
        overall_risk = Risk.LOW

    return StagingStrategy(
        strategy=strategy,
        commits=commits,
        warnings=warnings,
        overall_risk=overall_risk,
    )
