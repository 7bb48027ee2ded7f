"""Tests for path, alias and extension resolution."""

import os
import tempfile
from pathlib import Path

import pytest

from scanner.errors import InvalidInputError
from scanner.resolver import (
    check_file,
    get_relative_path,
    is_supported_file,
    is_within,
    resolve_alias,
    resolve_path,
    resolve_with_extensions,
)


BASE = Path(os.path.abspath(os.sep)) / "project"


class TestResolvePath:
    """Tests for resolve_path."""

    def test_absolute_path_is_normalized(self):
        """Test absolute paths are only normalized."""
        raw = str(BASE / "src" / "." / "components" / ".." / "App.vue")
        assert resolve_path(raw, "/elsewhere") == BASE / "src" / "App.vue"

    def test_relative_path_joins_base(self):
        """Test relative paths are joined with the base directory."""
        assert resolve_path("src/../lib/util.js", BASE) == BASE / "lib" / "util.js"

    def test_default_base_is_cwd(self):
        """Test the working directory is used without a base."""
        assert resolve_path("x.js") == Path(os.getcwd()) / "x.js"

    def test_empty_path_rejected(self):
        """Test empty and missing paths raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            resolve_path("", BASE)
        with pytest.raises(InvalidInputError):
            resolve_path(None, BASE)


class TestResolveAlias:
    """Tests for alias substitution."""

    def test_alias_substitution(self):
        """Test a matching alias is replaced by its target."""
        resolved = resolve_alias("@/utils/helper", {"@": "./src"}, BASE)
        assert resolved == BASE / "src" / "utils" / "helper"

    def test_longest_prefix_wins(self):
        """Test the longest matching alias takes precedence."""
        aliases = {"@": "./src", "@/components": "./special"}
        resolved = resolve_alias("@/components/Foo.vue", aliases, BASE)
        assert resolved == BASE / "special" / "Foo.vue"

    def test_alias_requires_separator_boundary(self):
        """Test an alias does not match inside a longer name."""
        assert resolve_alias("@foo/bar", {"@": "./src"}, BASE) == "@foo/bar"

    def test_exact_alias_match(self):
        """Test a reference equal to the alias resolves to its target."""
        assert resolve_alias("@", {"@": "./src"}, BASE) == BASE / "src"

    def test_backslash_separator(self):
        """Test a backslash after the alias counts as a boundary."""
        resolved = resolve_alias("@\\assets", {"@": "./src"}, BASE)
        assert isinstance(resolved, Path)

    def test_absolute_alias_target(self):
        """Test absolute alias targets ignore the base directory."""
        resolved = resolve_alias("~lib/a.js", {"~lib": str(BASE / "vendor")}, "/other")
        assert resolved == BASE / "vendor" / "a.js"

    def test_unmatched_reference_unchanged(self):
        """Test relative and bare references pass through."""
        aliases = {"@": "./src"}
        assert resolve_alias("./local.js", aliases, BASE) == "./local.js"
        assert resolve_alias("vue", aliases, BASE) == "vue"

    def test_idempotent_on_resolved_paths(self):
        """Test re-resolving an absolute path returns it unchanged."""
        aliases = {"@": "./src", "@/components": "./special"}
        first = resolve_alias("@/components/Foo.vue", aliases, BASE)
        assert resolve_alias(first, aliases, BASE) == first
        assert resolve_alias(str(first), aliases, BASE) == first

    def test_empty_reference(self):
        """Test empty references are returned as-is."""
        assert resolve_alias("", {"@": "./src"}, BASE) == ""

    def test_no_alias_map(self):
        """Test a missing alias map is treated as empty."""
        assert resolve_alias("@/x", None, BASE) == "@/x"


class TestResolveWithExtensions:
    """Tests for implicit extension and index resolution."""

    def test_existing_file_with_extension(self):
        """Test an existing file is returned unchanged."""
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "App.vue"
            target.touch()
            assert resolve_with_extensions(target) == target

    def test_extension_priority(self):
        """Test extensions are tried in priority order."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "Button.js").touch()
            (root / "Button.vue").touch()
            assert resolve_with_extensions(root / "Button") == root / "Button.vue"

    def test_directory_index(self):
        """Test a directory resolves to its index file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "utils").mkdir()
            (root / "utils" / "index.ts").touch()
            assert resolve_with_extensions(root / "utils") == root / "utils" / "index.ts"

    def test_file_beats_directory_index(self):
        """Test utils.js is preferred over utils/index.js."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "utils").mkdir()
            (root / "utils" / "index.js").touch()
            (root / "utils.js").touch()
            assert resolve_with_extensions(root / "utils") == root / "utils.js"

    def test_missing_returns_none(self):
        """Test nothing found returns None."""
        with tempfile.TemporaryDirectory() as tmpdir:
            assert resolve_with_extensions(Path(tmpdir) / "nope") is None
            assert resolve_with_extensions(Path(tmpdir) / "nope.js") is None

    def test_custom_extensions(self):
        """Test a custom extension list."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "data.json").touch()
            assert resolve_with_extensions(root / "data") is None
            assert resolve_with_extensions(root / "data", [".json"]) == root / "data.json"


class TestFileHelpers:
    """Tests for file info and location helpers."""

    def test_check_file(self):
        """Test stat information for existing and missing files."""
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "logo.png"
            target.write_bytes(b"12345")

            info = check_file(target)
            assert info.exists and info.is_file and not info.is_dir
            assert info.size == 5

            missing = check_file(Path(tmpdir) / "missing.png")
            assert not missing.exists
            assert missing.error

    def test_is_supported_file(self):
        """Test supported source extensions."""
        assert is_supported_file("App.vue")
        assert is_supported_file("main.TS")
        assert is_supported_file("theme.scss")
        assert is_supported_file("worker.mjs")
        assert is_supported_file("config.cjs")
        assert not is_supported_file("logo.png")
        assert not is_supported_file("README")

    def test_is_within(self):
        """Test checking if a path is inside a directory."""
        assert is_within(BASE / "src" / "App.vue", BASE)
        assert not is_within(BASE / ".." / "other" / "x.js", BASE)

    def test_get_relative_path(self):
        """Test relative path computation with fallback."""
        assert get_relative_path(BASE / "src" / "a.js", BASE) == Path("src") / "a.js"
        outside = Path(os.path.abspath(os.sep)) / "elsewhere" / "a.js"
        assert get_relative_path(outside, BASE) == outside
