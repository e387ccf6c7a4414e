"""CLI commands for commitsplit."""

from __future__ import annotations

import asyncio
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner
from rich.table import Table

from commitsplit.agent import GeminiCompletionClient
from commitsplit.boundaries import BoundaryDetector
from commitsplit.config import Config, load_config
from commitsplit.git_ops import (
    GitError,
    create_commit,
    get_repo,
    get_repo_root,
    get_working_changes,
    stage_files,
    unstage_all,
)
from commitsplit.logging_config import configure_logging
from commitsplit.models import CachedPlan, ChangeRecord, PlannedCommit, Risk, StagingStrategy
from commitsplit.render import print_strategy, render_markdown, strategy_to_dict
from commitsplit.staging import compose_strategy

app = typer.Typer(
    name="commitsplit",
    help="Split your working changes into clean, logical commits",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)

# Cache file name (stored in repo root)
CACHE_FILENAME = ".commitsplit_cache.json"


class OutputFormat(str, Enum):
    terminal = "terminal"
    json = "json"
    markdown = "markdown"


def _get_cache_path() -> Path:
    """Get the path to the cache file in the current repo."""
    try:
        repo = get_repo()
        return get_repo_root(repo) / CACHE_FILENAME
    except GitError:
        return Path.cwd() / CACHE_FILENAME


def _load_cached_plan() -> CachedPlan | None:
    """Load the cached plan from disk."""
    cache_path = _get_cache_path()
    if not cache_path.exists():
        return None
    try:
        with open(cache_path, "r") as f:
            return CachedPlan(**json.load(f))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning("Ignoring unreadable cache %s: %s", cache_path, e)
        return None


def _save_cached_plan(plan: CachedPlan) -> None:
    """Save the plan to disk cache."""
    cache_path = _get_cache_path()
    try:
        with open(cache_path, "w") as f:
            json.dump(plan.model_dump(), f, indent=2)
    except OSError as e:
        logger.warning("Could not write cache %s: %s", cache_path, e)


def _clear_cache() -> None:
    """Clear the cache file."""
    _get_cache_path().unlink(missing_ok=True)


def _print_error(message: str) -> None:
    """Print an error message and exit."""
    console.print(f"[red]✗[/red] {escape(message)}")
    raise typer.Exit(1)


def _print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def _load_config_or_exit() -> Config:
    try:
        return load_config()
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(1) from e


async def _analyze(changes: list[ChangeRecord], config: Config) -> StagingStrategy:
    client = None
    if config.use_ai:
        client = GeminiCompletionClient(config.api_key, config.model, config.ai_timeout)
    boundaries = await BoundaryDetector(config, client).detect(changes)
    return compose_strategy(boundaries)


@app.command()
def analyze(
    staged: bool = typer.Option(False, "--staged", "-s", help="Analyze staged changes only"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List working directory changes."""
    try:
        repo = get_repo()
        changes = get_working_changes(repo, staged=staged)
    except GitError as e:
        _print_error(str(e))
        return

    if json_output:
        output = {
            "files": [
                {"path": c.path, "status": c.kind.value, "insertions": c.insertions, "deletions": c.deletions}
                for c in changes
            ],
            "count": len(changes),
        }
        print(json.dumps(output, indent=2))
        return

    if not changes:
        console.print("[yellow]No uncommitted changes found.[/yellow]")
        return

    table = Table(title=f"📂 Uncommitted Changes ({len(changes)} files)")
    table.add_column("Status", style="cyan", width=10)
    table.add_column("File", style="white")
    table.add_column("+", style="green", justify="right")
    table.add_column("-", style="red", justify="right")

    status_colors = {
        "added": "green",
        "modified": "yellow",
        "deleted": "red",
        "renamed": "blue",
    }

    for change in changes:
        color = status_colors.get(change.kind.value, "white")
        table.add_row(
            f"[{color}]{change.kind.value}[/{color}]",
            escape(change.path),
            str(change.insertions),
            str(change.deletions),
        )

    console.print(table)


@app.command()
def split(
    staged: bool = typer.Option(False, "--staged", "-s", help="Analyze staged changes only"),
    output_format: OutputFormat = typer.Option(OutputFormat.terminal, "--format", "-f", help="Output format"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Preview without caching or staging"),
    auto_stage: bool = typer.Option(False, "--auto-stage", help="Stage the files of the first commit"),
    no_ai: bool = typer.Option(False, "--no-ai", help="Use heuristics only"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Override default model"),
    max_boundary_size: Optional[int] = typer.Option(
        None, "--max-boundary-size", min=1, help="Maximum number of files per commit"
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity"),
) -> None:
    """Detect commit boundaries and suggest a staging strategy."""
    configure_logging(verbose)

    config = _load_config_or_exit()
    updates: dict[str, object] = {}
    if no_ai:
        updates["ai_enabled"] = False
    if model:
        updates["model"] = model
    if max_boundary_size is not None:
        updates["max_boundary_size"] = max_boundary_size
    config = config.model_copy(update=updates)

    try:
        repo = get_repo()
        changes = get_working_changes(repo, staged=staged)
    except GitError as e:
        _print_error(str(e))
        return

    if not changes:
        if output_format is OutputFormat.json:
            print(json.dumps({"commits": [], "message": "No uncommitted changes found"}))
        else:
            console.print("[yellow]No uncommitted changes found.[/yellow]")
        return

    if output_format is OutputFormat.terminal:
        console.print()
        with Live(
            Spinner("dots", text=f"[cyan]Analyzing {len(changes)} changed files...[/cyan]"),
            console=console,
            transient=True,
        ):
            strategy = asyncio.run(_analyze(changes, config))
    else:
        strategy = asyncio.run(_analyze(changes, config))

    if not dry_run:
        _save_cached_plan(CachedPlan.from_strategy(strategy))

    if output_format is OutputFormat.json:
        print(json.dumps(strategy_to_dict(strategy, len(changes)), indent=2))
    elif output_format is OutputFormat.markdown:
        print(render_markdown(strategy, len(changes)))
    else:
        print_strategy(console, strategy, len(changes))

    if auto_stage and not dry_run and strategy.commits:
        first = strategy.commits[0]
        try:
            unstage_all(repo)
            stage_files(repo, first.boundary.file_paths)
        except GitError as e:
            _print_error(str(e))
            return
        _print_success(f"Staged {len(first.boundary.files)} files for: {escape(first.suggested_message.title)}")

    if output_format is OutputFormat.terminal:
        _print_next_steps(strategy, dry_run)


def _print_next_steps(strategy: StagingStrategy, dry_run: bool) -> None:
    if dry_run:
        console.print("[dim]Dry run - nothing cached or staged.[/dim]")
    elif len(strategy.commits) == 1:
        console.print("[dim]Single logical commit detected. Use 'commitsplit commit 1' to commit it.[/dim]")
    else:
        console.print(
            "[dim]Use 'commitsplit commit <index>' to commit a group, "
            "'commitsplit commit --all' for all, "
            "or 'commitsplit split --auto-stage' to stage the first group.[/dim]"
        )

    if strategy.overall_risk is Risk.HIGH:
        console.print("[yellow]⚠ High risk detected - consider extra review before committing[/yellow]")
    if strategy.warnings:
        console.print("[yellow]⚠ Review warnings above before proceeding[/yellow]")


@app.command()
def commit(
    index: Optional[int] = typer.Argument(None, help="Index of the commit to make (1-based)"),
    all_commits: bool = typer.Option(False, "--all", "-a", help="Make all planned commits in order"),
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Override commit message"),
) -> None:
    """Commit a planned group or all groups."""
    plan = _load_cached_plan()

    if plan is None:
        _print_error("No plan cached. Run 'commitsplit split' first.")
        return

    if not all_commits and index is None:
        _print_error("Please specify a commit index or use --all")
        return

    try:
        repo = get_repo()
    except GitError as e:
        _print_error(str(e))
        return

    to_commit: list[PlannedCommit]
    if all_commits:
        to_commit = list(plan.commits)
    else:
        planned = next((c for c in plan.commits if c.index == index), None)
        if planned is None:
            _print_error(f"Commit {index} not found. Available: {[c.index for c in plan.commits]}")
            return
        to_commit = [planned]

    for planned in to_commit:
        try:
            unstage_all(repo)
            stage_files(repo, planned.files)
            commit_message = message if message else planned.message
            commit_hash = create_commit(repo, commit_message)
        except GitError as e:
            _print_error(f"Failed to commit group {planned.index}: {e}")
            return

        _print_success(f"Committed: {escape(commit_message.splitlines()[0])} ([cyan]{commit_hash}[/cyan])")

        plan.commits = [c for c in plan.commits if c.index != planned.index]
        _save_cached_plan(plan)

    # Clear cache if all groups committed
    if not plan.commits:
        _clear_cache()
        console.print("\n[green]All planned commits created![/green]")


@app.command()
def clear() -> None:
    """Clear the cached plan."""
    _clear_cache()
    _print_success("Cached plan cleared")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
