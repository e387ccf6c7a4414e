"""Git operations layer for commitsplit."""

from __future__ import annotations

from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from commitsplit.diff_parser import parse_hunks, parse_name_status, parse_numstat
from commitsplit.models import ChangeKind, ChangeRecord, DiffLine, Hunk, LineKind


class GitError(Exception):
    """Custom exception for git operation errors."""
    pass


def get_repo(path: str | Path = ".") -> Repo:
    """Get the git repository at the given path.

    Args:
        path: Path to the repository root. Defaults to current directory.

    Returns:
        The git Repo object.

    Raises:
        GitError: If the path is not a valid git repository.
    """
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise GitError(f"Not a git repository: {path}")


def get_repo_root(repo: Repo) -> Path:
    """Get the root directory of the repository."""
    return Path(repo.working_dir)


def get_working_changes(
    repo: Repo,
    staged: bool = False,
    include_untracked: bool = True,
) -> list[ChangeRecord]:
    """Collect working directory (or staged) changes with their hunks.

    Args:
        repo: The git Repo object.
        staged: Read the index instead of the working tree.
        include_untracked: Add untracked files as new files. Ignored when
            ``staged`` is set.

    Returns:
        One ChangeRecord per changed file, in git's output order.

    Raises:
        GitError: If git fails to produce the diff.
    """
    scope = ["--staged"] if staged else []
    try:
        numstat = repo.git.diff(*scope, "--numstat", "-M")
        name_status = repo.git.diff(*scope, "--name-status", "-M")
    except GitCommandError as e:
        raise GitError(f"Failed to get diff: {e}")

    statuses = parse_name_status(name_status)
    changes: list[ChangeRecord] = []

    for path, insertions, deletions in parse_numstat(numstat):
        kind, old_path = statuses.get(path, (ChangeKind.MODIFIED, None))
        changes.append(
            ChangeRecord(
                path=path,
                kind=kind,
                insertions=insertions,
                deletions=deletions,
                hunks=tuple(parse_hunks(get_file_diff(repo, path, staged=staged, old_path=old_path))),
                old_path=old_path,
            )
        )

    if include_untracked and not staged:
        seen = {c.path for c in changes}
        for untracked in repo.untracked_files:
            if untracked not in seen:
                changes.append(_untracked_change(repo, untracked))

    return changes


def get_file_diff(repo: Repo, file_path: str, staged: bool = False, old_path: str | None = None) -> str:
    """Get the diff for one file.

    With ``old_path`` both sides of a rename are passed so that git pairs
    them and only the content changes are reported.

    Raises:
        GitError: If there's an error getting the diff.
    """
    try:
        scope = ["--staged"] if staged else []
        paths = [old_path, file_path] if old_path else [file_path]
        return repo.git.diff(*scope, "-M", "--", *paths)
    except GitCommandError as e:
        raise GitError(f"Failed to get diff for {file_path}: {e}")


def _untracked_change(repo: Repo, file_path: str) -> ChangeRecord:
    """Represent an untracked file as an addition of all its lines."""
    full_path = get_repo_root(repo) / file_path
    try:
        text = full_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        # Binary or unreadable: counts stay at zero like a binary numstat entry
        return ChangeRecord(path=file_path, kind=ChangeKind.ADDED)

    lines = text.splitlines()
    if not lines:
        return ChangeRecord(path=file_path, kind=ChangeKind.ADDED)

    hunk = Hunk(
        header=f"@@ -0,0 +1,{len(lines)} @@",
        lines=tuple(
            DiffLine(content=line, kind=LineKind.ADDED, line_number=number)
            for number, line in enumerate(lines, start=1)
        ),
    )
    return ChangeRecord(path=file_path, kind=ChangeKind.ADDED, insertions=len(lines), hunks=(hunk,))


def stage_files(repo: Repo, file_paths: list[str]) -> None:
    """Stage specific files for commit.

    Raises:
        GitError: If staging fails.
    """
    try:
        # Use git add command directly (handles deletions and empty files better than index.add)
        repo.git.add("-A", "--", *file_paths)
    except GitCommandError as e:
        raise GitError(f"Failed to stage files: {e}")


def create_commit(repo: Repo, message: str) -> str:
    """Create a commit with the staged changes.

    Returns:
        The short hash of the new commit.

    Raises:
        GitError: If the commit fails.
    """
    try:
        # Use git commit command directly (handles initial commits better)
        repo.git.commit("-m", message)
        return repo.git.rev_parse("HEAD", short=7)
    except GitCommandError as e:
        raise GitError(f"Failed to create commit: {e}")


def unstage_all(repo: Repo) -> None:
    """Unstage all staged files (reset index to HEAD).

    Raises:
        GitError: If the index cannot be reset.
    """
    try:
        repo.head.commit
    except ValueError:
        # Fresh repo with no commits: drop everything from the index
        try:
            repo.git.rm("-r", "--cached", "--quiet", "--ignore-unmatch", ".")
        except GitCommandError as e:
            raise GitError(f"Failed to unstage files: {e}")
        return

    try:
        repo.index.reset()
    except GitCommandError as e:
        raise GitError(f"Failed to unstage files: {e}")
