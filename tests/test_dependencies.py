"""Unit tests for dependencies module."""

from commitsplit.dependencies import boundary_dependencies, build_dependency_graph


class TestDependencyGraph:
    """Tests for build_dependency_graph function."""

    def test_references_by_base_name(self, make_change):
        """Should link a file to the changed files it mentions."""
        app = make_change("src/app.py", added=["from utils import x"])
        utils = make_change("src/utils.py")
        readme = make_change("README.md", added=["see app docs"])

        graph = build_dependency_graph([app, utils, readme])

        assert graph == {
            "src/app.py": ["src/utils.py"],
            "src/utils.py": [],
            "README.md": ["src/app.py"],
        }

    def test_cycles_allowed(self, make_change):
        """Should keep mutual references."""
        a = make_change("src/alpha.py", added=["import beta"])
        b = make_change("src/beta.py", added=["import alpha"])

        graph = build_dependency_graph([a, b])

        assert graph["src/alpha.py"] == ["src/beta.py"]
        assert graph["src/beta.py"] == ["src/alpha.py"]


class TestBoundaryDependencies:
    """Tests for boundary_dependencies function."""

    def test_only_external(self, make_change):
        """Should ignore dependencies inside the group."""
        app = make_change("src/app.py", added=["from utils import x"])
        utils = make_change("src/utils.py")
        readme = make_change("README.md", added=["see app docs"])
        graph = build_dependency_graph([app, utils, readme])

        assert boundary_dependencies([app, utils], graph) == []
        assert boundary_dependencies([readme], graph) == ["src/app.py"]

    def test_deduplicated(self, make_change):
        """Should list a shared dependency once."""
        first = make_change("src/first.py", added=["import helpers"])
        second = make_change("src/second.py", added=["import helpers"])
        helpers = make_change("src/helpers.py")
        graph = build_dependency_graph([first, second, helpers])

        assert boundary_dependencies([first, second], graph) == ["src/helpers.py"]
