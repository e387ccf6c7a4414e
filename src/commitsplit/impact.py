"""Impact categorization and theme detection for changed files.

Impact types decide how the heuristic detector seeds its boundaries.
Themes are the human-readable labels attached to each boundary.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from commitsplit.models import ChangeRecord

TESTS = "tests"
DOCUMENTATION = "documentation"
CONFIGURATION = "configuration"
UI = "ui"
BUSINESS_LOGIC = "business_logic"
DATABASE = "database"
API = "api"
MIXED = "mixed"

# First match wins; files matching nothing are MIXED.
IMPACT_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (DOCUMENTATION, (".md", "readme", "docs/")),
    (CONFIGURATION, ("config", ".json", ".yml")),
    (UI, (".css", ".scss", "style", "component")),
    (BUSINESS_LOGIC, ("service", "controller", "model")),
    (DATABASE, ("migration", "schema", "database")),
    (API, ("route", "api", "endpoint")),
)

# Categories the AI model may return in addition to the heuristic label.
AI_CATEGORIES = (
    API,
    UI,
    BUSINESS_LOGIC,
    DATABASE,
    TESTS,
    CONFIGURATION,
    DOCUMENTATION,
    "build",
    "utilities",
    "security",
    "performance",
)

BUG_FIX_MARKERS = ("fix", "bug", "patch", "hotfix")

# Source-file themes and the path fragments that score them.
SOURCE_THEMES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("authentication", ("auth", "login", "signin", "jwt")),
    ("user interface", ("component", "ui/", "frontend", "style", "css")),
    ("backend development", ("api/", "route", "endpoint", "controller", "service")),
    ("database", ("model", "schema", "migration", "database")),
    ("security", ("security", "permission", "role", "csrf", "xss")),
    ("performance", ("optimize", "cache", "performance", "lazy", "bundle")),
)

UI_EXTENSIONS = (".vue", ".jsx", ".tsx")

TEST_INFIXES = (".test.", ".spec.", "__tests__")
TEST_DIRECTORIES = ("test", "tests", "spec")


def looks_like_test(path: str) -> bool:
    """Test files by infix (`login.test.ts`), directory (`tests/`) or pytest naming."""
    lower = path.lower()
    if any(infix in lower for infix in TEST_INFIXES):
        return True
    parts = PurePosixPath(lower).parts
    name = parts[-1] if parts else ""
    return (
        any(part in TEST_DIRECTORIES for part in parts[:-1])
        or name.startswith("test_")
        or PurePosixPath(name).stem.endswith("_test")
    )


def categorize_impact(change: ChangeRecord) -> str:
    """Return the primary impact type of a change from its path."""
    path = change.path.lower()
    if looks_like_test(path):
        return TESTS
    for impact_type, patterns in IMPACT_PATTERNS:
        if any(pattern in path for pattern in patterns):
            return impact_type
    return MIXED


def group_by_impact(
    changes: list[ChangeRecord],
    extra_categories: list[list[str]] | None = None,
) -> dict[str, list[ChangeRecord]]:
    """Group changes by impact type.

    ``extra_categories`` holds, per change, additional labels (usually
    suggested by the AI model) that are unioned with the heuristic one.
    A change listed under several types appears in each of those groups.
    Group order follows the first occurrence of each type in ``changes``.
    """
    groups: dict[str, list[ChangeRecord]] = {}
    for index, change in enumerate(changes):
        labels = [categorize_impact(change)]
        if extra_categories is not None and index < len(extra_categories):
            for label in extra_categories[index]:
                if label not in labels:
                    labels.append(label)
        for label in labels:
            groups.setdefault(label, []).append(change)
    return groups


def is_documentation_file(path: str) -> bool:
    lower = path.lower()
    return (
        any(marker in lower for marker in ("readme", "doc", "changelog", "license", "contributing", "guide"))
        or lower.endswith((".md", ".rst"))
    )


def is_test_file(path: str) -> bool:
    lower = path.lower()
    return any(marker in lower for marker in ("test", "spec", "__tests__", "cypress", "jest"))


def is_config_file(path: str) -> bool:
    lower = path.lower()
    name = PurePosixPath(lower).name
    return (
        "config" in lower
        or "env" in lower
        or name.startswith(".env")
        or name in ("package.json", "tsconfig.json", "pyproject.toml", "setup.cfg", "tox.ini")
        or any(tool in name for tool in ("webpack", "babel", "eslint", "prettier"))
    )


def is_bug_fix(change: ChangeRecord) -> bool:
    """Small changes in files whose path mentions a fix."""
    path = change.path.lower()
    return change.total_changes < 50 and any(marker in path for marker in BUG_FIX_MARKERS)


def score_themes(files: list[ChangeRecord]) -> dict[str, float]:
    """Accumulate theme weights for a set of files."""
    scores: dict[str, float] = {}

    doc_files = [f for f in files if is_documentation_file(f.path)]
    test_files = [f for f in files if is_test_file(f.path)]
    config_files = [f for f in files if is_config_file(f.path)]
    source_files = [
        f
        for f in files
        if not (is_documentation_file(f.path) or is_test_file(f.path) or is_config_file(f.path))
    ]

    if doc_files:
        weight = 2 if len(doc_files) == len(files) else 1
        scores["documentation"] = len(doc_files) * weight
    if test_files:
        scores["testing"] = len(test_files) * 1.5
    if config_files:
        scores["configuration"] = float(len(config_files))

    specific = {theme for theme, _ in SOURCE_THEMES}
    for change in source_files:
        path = change.path.lower()
        name = PurePosixPath(path).name

        for theme, markers in SOURCE_THEMES:
            hit = any(marker in path for marker in markers)
            if theme == "authentication":
                hit = hit or "auth" in name
            elif theme == "user interface":
                hit = hit or name.endswith(UI_EXTENSIONS)
            elif theme == "database":
                hit = hit or "db" in name
            if hit:
                scores[theme] = scores.get(theme, 0) + 2

        if is_bug_fix(change):
            scores["bug fixes"] = scores.get("bug fixes", 0) + 1.5

        if not specific & scores.keys():
            scores["feature development"] = scores.get("feature development", 0) + 1

    return scores


def detect_theme(files: list[ChangeRecord]) -> str:
    """Pick the best-scoring theme for a set of files."""
    scores = score_themes(files)
    if not scores:
        paths = [f.path for f in files]
        if paths and all(is_documentation_file(p) for p in paths):
            return "documentation updates"
        if paths and all(is_test_file(p) for p in paths):
            return "testing improvements"
        if paths and all(is_config_file(p) for p in paths):
            return "configuration changes"
        return "code improvements"

    # max() keeps the first of equal scores, i.e. the theme scored first
    return max(scores, key=scores.__getitem__)
