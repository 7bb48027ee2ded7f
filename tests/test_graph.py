"""Tests for the dependency set and tree data model."""

import pytest
from pathlib import Path

from graph.model import (
    DependencyReport,
    DependencySet,
    FileInfo,
    NodeStatus,
    TreeAnalysis,
    TreeNode,
)


ROOT = Path("/repo")


class TestDependencySet:
    """Tests for DependencySet class."""

    def test_empty_set(self):
        """Test creating empty set."""
        deps = DependencySet()

        assert deps.total == 0
        assert len(deps) == 0
        assert deps.summary() == {"total": 0, "markup": 0, "code": 0, "style": 0, "store": 0}

    def test_add_deduplicates(self):
        """Test adding the same path twice to one category."""
        deps = DependencySet()
        path = ROOT / "src" / "Button.vue"

        assert deps.add("code", path)
        assert not deps.add("code", path)
        assert deps.code == [path]

    def test_same_path_in_two_categories(self):
        """Test categories are deduplicated independently."""
        deps = DependencySet()
        path = ROOT / "src" / "logo.svg"

        deps.add("markup", path)
        deps.add("style", path)

        assert deps.total == 2
        assert deps.all_paths() == [path]

    def test_first_reference_kept(self):
        """Test the first raw reference of a path is remembered."""
        deps = DependencySet()
        path = ROOT / "src" / "Button.vue"

        deps.add("code", path, "./Button.vue")
        deps.add("code", path, "@/Button.vue")
        deps.add("style", ROOT / "a.css")

        assert deps.reference(path) == "./Button.vue"
        assert deps.reference(ROOT / "a.css") is None

    def test_unknown_category(self):
        """Test adding to an unknown category."""
        with pytest.raises(KeyError):
            DependencySet().add("fonts", ROOT / "a.woff")

    def test_store_not_in_total(self):
        """Test store files are tracked but not counted."""
        deps = DependencySet()
        deps.add("code", ROOT / "a.js")
        deps.add("store", ROOT / "store" / "user.js")

        assert deps.total == 1
        assert deps.summary()["store"] == 1

    def test_category_order(self):
        """Test iteration follows category order, then insertion order."""
        deps = DependencySet()
        deps.add("style", ROOT / "a.css")
        deps.add("code", ROOT / "b.js")
        deps.add("code", ROOT / "a.js")
        deps.add("markup", ROOT / "c.png")

        assert list(deps.iter_all()) == [
            ("markup", ROOT / "c.png"),
            ("code", ROOT / "b.js"),
            ("code", ROOT / "a.js"),
            ("style", ROOT / "a.css"),
        ]

    def test_get_returns_copy(self):
        """Test category lists cannot be modified from outside."""
        deps = DependencySet()
        deps.add("code", ROOT / "a.js")

        deps.code.append(ROOT / "b.js")

        assert deps.code == [ROOT / "a.js"]

    def test_repr(self):
        """Test string representation."""
        deps = DependencySet()
        deps.add("code", ROOT / "a.js")

        assert "code=1" in repr(deps)


class TestDependencyReport:
    """Tests for DependencyReport serialization."""

    def test_success(self):
        """Test a successful report."""
        deps = DependencySet()
        deps.add("markup", ROOT / "logo.png")
        report = DependencyReport(ROOT / "App.vue", deps, True, ["user"])

        data = report.to_dict()

        assert report.success
        assert data["filePath"] == str(ROOT / "App.vue")
        assert data["dependencies"]["markup"] == [str(ROOT / "logo.png")]
        assert data["usesLegacyStore"] is True
        assert data["usedStoreModules"] == ["user"]
        assert data["summary"]["total"] == 1

    def test_failure(self):
        """Test an unsuccessful report."""
        report = DependencyReport(ROOT / "App.vue", error="File not found")

        assert not report.success
        assert report.to_dict() == {
            "success": False,
            "filePath": str(ROOT / "App.vue"),
            "error": "File not found",
        }


class TestTreeNode:
    """Tests for TreeNode class."""

    def _tree(self) -> TreeNode:
        leaf = TreeNode(ROOT / "logo.png", 2, NodeStatus.LEAF, file_info=FileInfo(True, True, size=10))
        missing = TreeNode(ROOT / "gone", 1, NodeStatus.NOT_FOUND, reference="./gone")
        child = TreeNode(ROOT / "Card.vue", 1, children=(leaf,))
        return TreeNode(ROOT / "App.vue", 0, children=[child, missing])

    def test_children_are_immutable(self):
        """Test children are stored as a tuple."""
        tree = self._tree()

        assert isinstance(tree.children, tuple)
        with pytest.raises(AttributeError):
            tree.status = NodeStatus.ERROR

    def test_iter_nodes_preorder(self):
        """Test depth-first pre-order iteration."""
        paths = [node.path for node in self._tree().iter_nodes()]

        assert paths == [ROOT / "App.vue", ROOT / "Card.vue", ROOT / "logo.png", ROOT / "gone"]

    def test_to_dict(self):
        """Test nested serialization with optional fields."""
        data = self._tree().to_dict()

        assert data["file"] == str(ROOT / "App.vue")
        assert data["status"] == "ok"
        assert data["depth"] == 0
        card, missing = data["dependencies"]
        assert missing["status"] == "not-found"
        assert missing["originalPath"] == "./gone"
        assert "error" not in card
        assert card["dependencies"][0]["fileInfo"]["size"] == 10

    def test_status_values(self):
        """Test the serialized status names."""
        assert NodeStatus.MAX_DEPTH.value == "max-depth-reached"
        assert NodeStatus.CIRCULAR.value == "circular"


class TestTreeAnalysis:
    """Tests for TreeAnalysis serialization."""

    def test_summary(self):
        """Test the summary block."""
        back = TreeNode(ROOT / "a.js", 2, NodeStatus.CIRCULAR)
        tree = TreeNode(ROOT / "a.js", 0, children=(TreeNode(ROOT / "b.js", 1, children=(back,)),))
        analysis = TreeAnalysis(ROOT / "a.js", tree, [ROOT / "a.js", ROOT / "b.js"], [ROOT / "a.js"], 2)

        summary = analysis.to_dict()["summary"]

        assert summary == {
            "totalFiles": 2,
            "maxDepth": 2,
            "circularDependencies": [str(ROOT / "a.js")],
            "hasCircularDependencies": True,
        }

    def test_file_info_missing(self):
        """Test FileInfo serialization of a missing file."""
        assert FileInfo(False, error="gone").to_dict() == {"exists": False, "error": "gone"}
