"""
Visibility filter tests

Tests include/exclude retention rules, nesting, siblings, attribute
syntax variants and unclosed tags.
"""

import pytest

from content_factory.lib.log import Diagnostics
from content_factory.lib.visibility import attribute_extract, region_find, visibility_filter
from content_factory.models.diagnostics import DiagnosticKind


def tag(inner: str, attrs: str = "") -> str:
    """Build a filter region around inner text"""
    space = " " if attrs else ""
    return f"<content-factory-filter{space}{attrs}>{inner}</content-factory-filter>"


class TestRetention:
    """Test whether a single region is kept or dropped"""

    def test_untagged_content_unchanged(self):
        """Content without filter tags passes through untouched"""
        for tool in ("claude", "roo", ""):
            assert visibility_filter("Hello World\n<p>x</p>", tool) == "Hello World\n<p>x</p>"

    def test_included_tool_kept(self):
        """Region kept when tool is in include"""
        content = "Before" + tag("Inner", 'include="claude"') + "After"
        assert visibility_filter(content, "claude") == "BeforeInnerAfter"

    def test_other_tool_dropped(self):
        """Region dropped when tool is not in include"""
        content = "Before" + tag("Inner", 'include="roo"') + "After"
        assert visibility_filter(content, "claude") == "BeforeAfter"

    def test_excluded_tool_dropped(self):
        """Region dropped when tool is excluded"""
        content = "Before" + tag("Inner", 'exclude="claude"') + "After"
        assert visibility_filter(content, "claude") == "BeforeAfter"

    def test_not_excluded_tool_kept(self):
        """Region kept when exclude names another tool"""
        content = "Before" + tag("Inner", 'exclude="roo"') + "After"
        assert visibility_filter(content, "claude") == "BeforeInnerAfter"

    def test_no_attributes_always_kept(self):
        """Region without include/exclude is kept for any tool"""
        for tool in ("claude", "roo", "copilot"):
            assert visibility_filter(tag("Content"), tool) == "Content"

    def test_multiple_tools_in_include(self):
        """Comma-separated include list, with spaces"""
        assert visibility_filter(tag("Content", 'include="claude, roo, copilot"'), "roo") == "Content"

    def test_multiple_tools_in_exclude(self):
        """Comma-separated exclude list"""
        content = tag("Content", 'exclude="claude, roo"')
        assert visibility_filter(content, "copilot") == "Content"
        assert visibility_filter(content, "roo") == ""

    def test_exclude_takes_precedence(self):
        """Tool listed in both include and exclude is dropped"""
        content = tag("Content", 'include="claude, roo" exclude="claude"')
        assert visibility_filter(content, "claude") == ""
        assert visibility_filter(content, "roo") == "Content"


class TestAttributeSyntax:
    """Test attribute parsing tolerance"""

    def test_spaces_around_equals(self):
        """include = "x" is accepted"""
        assert visibility_filter(tag("Content", 'include = "claude"'), "claude") == "Content"

    def test_single_quotes(self):
        """Single-quoted values are accepted"""
        assert visibility_filter(tag("Content", "include='claude'"), "claude") == "Content"

    def test_attribute_extract_trims(self):
        """Identifiers are trimmed and empties ignored"""
        assert attribute_extract('<x include=" a ,b, ,c ">', "include") == frozenset({"a", "b", "c"})

    def test_attribute_extract_missing(self):
        """Missing attribute gives an empty set"""
        assert attribute_extract('<x include="a">', "exclude") == frozenset()

    def test_region_find_parses_attributes(self):
        """region_find reports sets, inner text and span"""
        text = "ab" + tag("X", 'include="a" exclude="b"') + "cd"
        region = region_find(text)

        assert region is not None
        assert region.include == frozenset({"a"})
        assert region.exclude == frozenset({"b"})
        assert region.inner == "X"
        assert text[region.start:region.end] == tag("X", 'include="a" exclude="b"')


class TestNestingAndSiblings:
    """Test nested and sibling regions"""

    def test_nested_same_tool(self):
        """Nested regions both kept"""
        content = tag("X" + tag("Y", 'include="A"') + "Z", 'include="A"')
        assert visibility_filter(content, "A") == "XYZ"

    def test_nested_inner_dropped(self):
        """Inner region for another tool is removed from kept outer"""
        content = tag("X" + tag("Y", 'include="B"') + "Z", 'include="A"')
        assert visibility_filter(content, "A") == "XZ"

    def test_nested_outer_dropped(self):
        """Dropping the outer region drops everything inside"""
        content = "S" + tag("X" + tag("Y", 'include="B"') + "Z", 'include="A"') + "E"
        assert visibility_filter(content, "B") == "SE"

    def test_deep_nesting(self):
        """Several levels of nesting resolve correctly"""
        content = tag("1" + tag("2" + tag("3", 'include="A"') + "2") + "1")
        assert visibility_filter(content, "A") == "12321"
        assert visibility_filter(content, "B") == "1221"

    def test_siblings_keep_order(self):
        """Sibling regions A, B, A for tool A yield first and third"""
        content = tag("A", 'include="claude"') + tag("B", 'include="roo"') + tag("C", 'include="claude"')
        assert visibility_filter(content, "claude") == "AC"
        assert visibility_filter(content, "roo") == "B"

    def test_many_siblings(self):
        """A long run of siblings does not exhaust recursion"""
        content = "".join(tag(str(i % 10), 'include="a"' if i % 2 else 'include="b"') for i in range(3000))
        expected = "".join(str(i % 10) for i in range(3000) if i % 2)
        assert visibility_filter(content, "a") == expected

    def test_dropped_region_discards_include_directive(self):
        """Directives inside a dropped region are removed with it"""
        content = tag('<content-factory-include-file path="./x.md" />', 'include="roo"')
        assert visibility_filter(content, "claude") == ""


class TestUnclosed:
    """Test unclosed filter tags"""

    def test_unclosed_left_unmodified(self):
        """Unclosed tag returns the text unchanged"""
        content = 'Before<content-factory-filter include="roo">Never closed'
        assert visibility_filter(content, "claude") == content

    def test_unclosed_reported(self):
        """Unclosed tag produces an UNCLOSED_FILTER_TAG warning"""
        diagnostics = Diagnostics(echo=False)
        visibility_filter('<content-factory-filter include="a">X', "a", diagnostics)

        assert len(diagnostics.of_kind(DiagnosticKind.UNCLOSED_FILTER_TAG)) == 1

    def test_unclosed_after_closed_region(self):
        """Earlier complete regions are still filtered"""
        content = tag("A", 'include="roo"') + 'mid<content-factory-filter include="roo">tail'
        assert visibility_filter(content, "claude") == 'mid<content-factory-filter include="roo">tail'

    def test_outer_unclosed_with_closed_inner(self):
        """Outer tag lacking its close is left as-is"""
        content = '<content-factory-filter include="roo">X' + tag("Y", 'include="roo"')
        assert visibility_filter(content, "claude") == content


@pytest.mark.parametrize("tool", ["claude", "roo", "copilot", "x"])
def test_identity_on_plain_text(tool):
    """Identity holds for any tool on untagged text"""
    text = "# Title\n\nSome <b>html</b> and text.\n"
    assert visibility_filter(text, tool) == text
