"""Data models for commitsplit."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChangeKind(str, Enum):
    """How a file changed in the working directory."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


class LineKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


class DiffLine(BaseModel):
    """A single line inside a diff hunk."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Line text without the leading diff marker")
    kind: LineKind = Field(description="Whether the line was added, removed or is context")
    line_number: int | None = Field(default=None, description="1-based line number for added lines")


class Hunk(BaseModel):
    """A contiguous block of changes in one file."""

    model_config = ConfigDict(frozen=True)

    header: str = Field(description="The @@ header line of the hunk")
    lines: tuple[DiffLine, ...] = Field(default=(), description="Lines in diff order")


class ChangeRecord(BaseModel):
    """Represents a single file change in the working directory."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Path to the file relative to repo root")
    kind: ChangeKind = Field(default=ChangeKind.MODIFIED, description="Change status")
    insertions: int = Field(default=0, ge=0, description="Number of added lines")
    deletions: int = Field(default=0, ge=0, description="Number of removed lines")
    hunks: tuple[Hunk, ...] = Field(default=(), description="Parsed diff hunks")
    old_path: str | None = Field(default=None, description="Previous path for renamed files")

    @property
    def total_changes(self) -> int:
        return self.insertions + self.deletions

    @property
    def hunk_count(self) -> int:
        return len(self.hunks)

    @property
    def content(self) -> str:
        """All hunk line contents (added, removed and context) joined by newlines."""
        return "\n".join("\n".join(line.content for line in hunk.lines) for hunk in self.hunks)

    @property
    def changed_content(self) -> str:
        """Added and removed line contents only."""
        return "\n".join(
            line.content
            for hunk in self.hunks
            for line in hunk.lines
            if line.kind is not LineKind.CONTEXT
        )


class RelationshipKind(str, Enum):
    IMPORT = "import"
    TEST_PAIR = "test_pair"
    SIMILAR_CHANGES = "similar_changes"
    CONFIG_RELATED = "config_related"


class RelationshipEdge(BaseModel):
    """A scored relation between two changed files."""

    model_config = ConfigDict(frozen=True)

    file_a: str = Field(description="First file of the unordered pair")
    file_b: str = Field(description="Second file of the unordered pair")
    kind: RelationshipKind = Field(description="What kind of relation was detected")
    strength: float = Field(ge=0.0, le=1.0, description="Relation strength between 0 and 1")


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Risk(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StrategyKind(str, Enum):
    SEQUENTIAL = "sequential"
    PROGRESSIVE = "progressive"
    PARALLEL = "parallel"


class CommitBoundary(BaseModel):
    """A cluster of changes intended for one commit."""

    id: str = Field(description="Identifier, unique within one analysis run")
    files: list[ChangeRecord] = Field(min_length=1, description="Changes in this boundary")
    reasoning: str = Field(description="Why these files are grouped together")
    priority: Priority = Field(default=Priority.MEDIUM, description="Commit priority")
    estimated_complexity: float = Field(default=0, ge=0, description="Size-based complexity score")
    dependencies: list[str] = Field(
        default_factory=list,
        description="Paths outside this boundary that its files reference",
    )
    theme: str = Field(default="code changes", description="Free-form label for the change")

    @property
    def file_paths(self) -> list[str]:
        return [f.path for f in self.files]


class SuggestedMessage(BaseModel):
    """A conventional commit message skeleton."""

    title: str = Field(description="Subject line, e.g. 'feat(auth): add login'")
    type: str = Field(description="Conventional commit type")
    body: str | None = Field(default=None, description="Optional message body")


class CommitPlan(BaseModel):
    """One planned commit in a staging strategy."""

    boundary: CommitBoundary
    suggested_message: SuggestedMessage
    rationale: str
    risk: Risk
    estimated_time: str = Field(description="Human-readable time estimate")


class StagingStrategy(BaseModel):
    """The full recommendation for committing a set of boundaries."""

    strategy: StrategyKind = Field(default=StrategyKind.PARALLEL)
    commits: list[CommitPlan] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    overall_risk: Risk = Field(default=Risk.LOW)


class SuggestedBoundary(BaseModel):
    """A boundary as returned by the AI model, before files are resolved."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str | None = None
    files: list[str] = Field(default_factory=list)
    theme: str | None = None
    reasoning: str | None = None
    priority: Priority | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def _lenient_priority(cls, value: object) -> object:
        # Unknown labels fall back to the default instead of rejecting the whole answer
        if isinstance(value, str) and value.strip().lower() in {p.value for p in Priority}:
            return value.strip().lower()
        return None


class BoundarySuggestion(BaseModel):
    """Result from the AI boundary request."""

    boundaries: list[SuggestedBoundary] = Field(description="Proposed commit boundaries")


class CategorySuggestion(BaseModel):
    """Result from the AI per-file categorization request."""

    categories: list[str] = Field(default_factory=list)


class PlannedCommit(BaseModel):
    """A commit from a staging strategy, as cached between commands."""

    index: int = Field(description="1-based index for user reference")
    message: str = Field(description="Suggested commit message")
    type: str = Field(description="Conventional commit type")
    files: list[str] = Field(description="List of file paths in this commit")
    reasoning: str = Field(description="Explanation of why these files are grouped together")


class CachedPlan(BaseModel):
    """The last computed plan, stored in the repository root."""

    commits: list[PlannedCommit] = Field(description="Commits still to be made")
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_strategy(cls, strategy: StagingStrategy) -> "CachedPlan":
        return cls(
            commits=[
                PlannedCommit(
                    index=index,
                    message=_full_message(plan.suggested_message),
                    type=plan.suggested_message.type,
                    files=plan.boundary.file_paths,
                    reasoning=plan.rationale,
                )
                for index, plan in enumerate(strategy.commits, start=1)
            ],
            warnings=list(strategy.warnings),
        )


def _full_message(message: SuggestedMessage) -> str:
    if message.body:
        return f"{message.title}\n\n{message.body}"
    return message.title
