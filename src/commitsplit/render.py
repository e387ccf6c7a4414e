"""Output formats for a staging strategy: rich terminal, markdown and JSON."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from commitsplit.models import ChangeKind, ChangeRecord, Priority, Risk, StagingStrategy

RISK_COLORS = {Risk.LOW: "green", Risk.MEDIUM: "yellow", Risk.HIGH: "red"}
PRIORITY_COLORS = {Priority.LOW: "dim", Priority.MEDIUM: "yellow", Priority.HIGH: "red"}

TYPE_COLORS = {
    "feat": "green",
    "fix": "red",
    "refactor": "yellow",
    "docs": "blue",
    "chore": "magenta",
    "style": "cyan",
    "test": "white",
}

CHANGE_MARKERS = {
    ChangeKind.ADDED: "+",
    ChangeKind.DELETED: "-",
    ChangeKind.MODIFIED: "~",
    ChangeKind.RENAMED: "→",
}


def _file_label(change: ChangeRecord) -> str:
    if change.kind is ChangeKind.RENAMED and change.old_path:
        return f"{change.old_path} → {change.path}"
    return change.path


def strategy_to_dict(strategy: StagingStrategy, total_files: int) -> dict[str, Any]:
    """JSON-ready view of a strategy."""
    return {
        "analysis": {
            "totalFiles": total_files,
            "recommendedCommits": len(strategy.commits),
            "strategy": strategy.strategy.value,
            "overallRisk": strategy.overall_risk.value,
        },
        "warnings": list(strategy.warnings),
        "commits": [
            {
                "order": order,
                "boundary": {
                    "id": plan.boundary.id,
                    "theme": plan.boundary.theme,
                    "priority": plan.boundary.priority.value,
                    "estimatedComplexity": plan.boundary.estimated_complexity,
                    "dependencies": list(plan.boundary.dependencies),
                    "reasoning": plan.boundary.reasoning,
                    "fileCount": len(plan.boundary.files),
                    "files": [
                        {
                            "path": f.path,
                            "insertions": f.insertions,
                            "deletions": f.deletions,
                            "changeType": f.kind.value,
                        }
                        for f in plan.boundary.files
                    ],
                },
                "suggestedMessage": plan.suggested_message.model_dump(exclude_none=True),
                "risk": plan.risk.value,
                "estimatedTime": plan.estimated_time,
                "rationale": plan.rationale,
            }
            for order, plan in enumerate(strategy.commits, start=1)
        ],
    }


def render_markdown(strategy: StagingStrategy, total_files: int) -> str:
    lines = [
        "# Commit Boundary Analysis",
        "",
        "## Overview",
        "",
        f"- **Total files**: {total_files}",
        f"- **Recommended commits**: {len(strategy.commits)}",
        f"- **Strategy**: {strategy.strategy.value}",
        f"- **Overall risk**: {strategy.overall_risk.value}",
        "",
    ]

    if strategy.warnings:
        lines += ["## Warnings", ""]
        lines += [f"- {warning}" for warning in strategy.warnings]
        lines.append("")

    lines += ["## Recommended Commits", ""]
    for order, plan in enumerate(strategy.commits, start=1):
        boundary = plan.boundary
        lines += [
            f"### {order}. {plan.suggested_message.title}",
            "",
            f"**Theme**: {boundary.theme}  ",
            f"**Priority**: {boundary.priority.value}  ",
            f"**Risk**: {plan.risk.value}  ",
            f"**Estimated time**: {plan.estimated_time}  ",
            "",
            "**Files**:",
            "",
        ]
        lines += [
            f"- {CHANGE_MARKERS[f.kind]} `{_file_label(f)}` (+{f.insertions} -{f.deletions})"
            for f in boundary.files
        ]
        if boundary.dependencies:
            lines += ["", f"**Dependencies**: {', '.join(boundary.dependencies)}"]
        lines += ["", f"**Rationale**: {plan.rationale}", ""]

    return "\n".join(lines)


def print_strategy(console: Console, strategy: StagingStrategy, total_files: int) -> None:
    """Pretty-print a staging strategy."""
    risk_color = RISK_COLORS[strategy.overall_risk]
    console.print(Panel.fit("📊 [bold]Commit Boundary Analysis[/bold]", border_style="blue"))

    overview = Table.grid(padding=(0, 2))
    overview.add_column(style="dim")
    overview.add_column()
    overview.add_row("Total files", str(total_files))
    overview.add_row("Recommended commits", str(len(strategy.commits)))
    overview.add_row("Strategy", strategy.strategy.value)
    overview.add_row("Overall risk", f"[{risk_color}]{strategy.overall_risk.value}[/{risk_color}]")
    console.print(overview)
    console.print()

    if strategy.warnings:
        console.print("[yellow]⚠ Warnings:[/yellow]")
        for warning in strategy.warnings:
            console.print(f"  • {escape(warning)}")
        console.print()

    for order, plan in enumerate(strategy.commits, start=1):
        boundary = plan.boundary
        color = TYPE_COLORS.get(plan.suggested_message.type, "white")
        risk = RISK_COLORS[plan.risk]
        priority = PRIORITY_COLORS[boundary.priority]

        console.print(f"  [bold]\\[{order}][/bold] [{color}]{escape(plan.suggested_message.title)}[/{color}]")
        console.print(
            f"      [dim]Theme:[/dim] {escape(boundary.theme)}  "
            f"[dim]Priority:[/dim] [{priority}]{boundary.priority.value}[/{priority}]  "
            f"[dim]Risk:[/dim] [{risk}]{plan.risk.value}[/{risk}]  "
            f"[dim]Time:[/dim] {plan.estimated_time}"
        )
        for f in boundary.files:
            console.print(
                f"      └─ {CHANGE_MARKERS[f.kind]} {escape(_file_label(f))} "
                f"[dim](+{f.insertions} -{f.deletions})[/dim]"
            )
        if boundary.dependencies:
            console.print(f"      [dim]Depends on:[/dim] {escape(', '.join(boundary.dependencies))}")
        console.print(f"      [dim]Reason: {escape(plan.rationale)}[/dim]")
        console.print()
