"""
Path resolution tests

Tests the three path literal forms, the directive/read-request asymmetry,
and the path segment helpers.
"""

import os
from pathlib import Path

import pytest

from content_factory.lib.paths import (
    pathSegment_replace,
    pathStartSegments_remove,
    path_resolve,
    path_resolveFromRoot,
)


ROOT = Path("/proj")


class TestDirectivePaths:
    """Test resolution of literals inside include directives"""

    def test_absolute_verbatim(self):
        """Absolute literal is returned unchanged"""
        assert path_resolve("/elsewhere/a.md", ROOT, ROOT / "docs/main.md") == Path("/elsewhere/a.md")

    def test_root_relative(self):
        """@/ literal resolves against root"""
        assert path_resolve("@/partials/a.md", ROOT, ROOT / "docs/main.md") == Path("/proj/partials/a.md")

    def test_dot_relative(self):
        """./ literal resolves against the including file's directory"""
        assert path_resolve("./a.md", ROOT, ROOT / "docs/main.md") == Path("/proj/docs/a.md")

    def test_bare_relative(self):
        """A bare name is relative to the including file too"""
        assert path_resolve("a.md", ROOT, ROOT / "docs/main.md") == Path("/proj/docs/a.md")

    def test_parent_relative_normalized(self):
        """../ segments are collapsed"""
        assert path_resolve("../shared/a.md", ROOT, ROOT / "docs/main.md") == Path("/proj/shared/a.md")


class TestReadRequestPaths:
    """Test resolution of top-level read requests"""

    def test_bare_relative_against_root(self):
        """A bare name requested by name resolves against root"""
        assert path_resolveFromRoot("docs/a.md", ROOT) == Path("/proj/docs/a.md")

    def test_root_prefix(self):
        """@/ is accepted in read requests"""
        assert path_resolveFromRoot("@/a.md", ROOT) == Path("/proj/a.md")

    def test_absolute(self):
        """Absolute request used as-is"""
        assert path_resolveFromRoot("/x/a.md", ROOT) == Path("/x/a.md")


class TestSegmentHelpers:
    """Test leading-segment removal and segment replacement"""

    def test_remove_first_segment(self):
        assert pathStartSegments_remove("src/rules/a.md") == os.path.join("rules", "a.md")

    def test_remove_several(self):
        assert pathStartSegments_remove("a/b/c/d.md", 2) == os.path.join("c", "d.md")

    def test_remove_keeps_leading_slash(self):
        assert pathStartSegments_remove("/a/b/c") == os.sep + os.path.join("b", "c")

    @pytest.mark.parametrize("count", [3, 4])
    def test_remove_too_many(self, count):
        """Returns empty when nothing would be left"""
        assert pathStartSegments_remove("a/b/c", count) == ""

    def test_remove_mixed_separators(self):
        """Backslashes, mixed and doubled separators are tolerated"""
        assert pathStartSegments_remove("a\\b/c") == os.path.join("b", "c")
        assert pathStartSegments_remove("a//b//c") == os.path.join("b", "c")

    def test_replace_single(self):
        assert pathSegment_replace("src/rules/a.md", "rules", "out") == os.path.join("src", "out", "a.md")

    def test_replace_sequence(self):
        assert pathSegment_replace("a/b/c/d", "b/c", "x") == os.path.join("a", "x", "d")

    def test_replace_first_only(self):
        assert pathSegment_replace("a/b/a/b", "a", "z") == os.path.join("z", "b", "a", "b")

    def test_replace_with_leading_slash(self):
        assert pathSegment_replace("/a/b", "a", "z") == os.sep + os.path.join("z", "b")

    def test_replace_empty_replacement(self):
        assert pathSegment_replace("a/b/c", "b", "") == os.path.join("a", "c")

    def test_replace_no_match_normalizes(self):
        assert pathSegment_replace("a/./b", "zz", "y") == os.path.normpath("a/./b")
