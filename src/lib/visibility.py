"""
Visibility filter for <content-factory-filter> regions

Strips or keeps regions of a document depending on the tool the document
is being generated for:

    Common
    <content-factory-filter include="claude, roo" exclude="roo">
    Only claude sees this.
    </content-factory-filter>

Regions may nest and may sit side by side. Matching closes are found by
depth tracking over the literal open/close markers rather than by a full
markup parser, so anything else in the document is left untouched.

The filter is pure: it never reads files, and an include directive inside
a dropped region disappears with the region before inclusion runs.
"""

import re
from typing import FrozenSet, Optional

from ..config import appsettings
from ..models.diagnostics import DiagnosticKind
from ..models.directives import FilterRegion
from .log import Diagnostics

_QUOTES = "\"'"


def attribute_extract(tag: str, name: str) -> FrozenSet[str]:
    """
    Read a comma-separated attribute from an opening tag.

    Whitespace around '=' and either quote style are accepted. Each listed
    identifier is trimmed; a missing attribute yields an empty set.

    Example:
        >>> sorted(attribute_extract('<f include = "a, b">', 'include'))
        ['a', 'b']
    """
    match = re.search(rf'\b{name}\s*=\s*[{_QUOTES}]([^{_QUOTES}]+)[{_QUOTES}]', tag)
    if not match:
        return frozenset()
    return frozenset(item.strip() for item in match.group(1).split(",") if item.strip())


def closeTag_findMatching(text: str, start: int) -> int:
    """
    Find the close marker matching the opening marker at ``start``.

    Scans forward alternately taking whichever of the next opening marker
    and the next closing marker comes first. An opening marker increases
    the depth, a closing marker decreases it; the close that brings the
    depth back to zero is the match.

    Returns:
        Position of the matching close marker, or -1 if the tag is unclosed

    Depth tracking for 'A<f>B<f>C</f>D</f>' starting at the first <f:
        <f 1  <f 2  </f 1  </f 0 -> match
    """
    open_marker = f"<{appsettings.filter_tag}"
    close_marker = f"</{appsettings.filter_tag}>"

    depth = 0
    cursor = start
    while cursor < len(text):
        next_open = text.find(open_marker, cursor)
        next_close = text.find(close_marker, cursor)

        if next_close == -1:
            return -1

        if next_open != -1 and next_open < next_close:
            depth += 1
            cursor = next_open + len(open_marker)
        else:
            depth -= 1
            cursor = next_close + len(close_marker)
            if depth == 0:
                return next_close

    return -1


def region_find(text: str, start: int = 0) -> Optional[FilterRegion]:
    """
    Parse the first filter region at or after ``start``.

    Returns:
        FilterRegion for the first opening tag and its matching close,
        or None if there is no opening tag or it is unclosed
    """
    open_marker = f"<{appsettings.filter_tag}"
    close_marker = f"</{appsettings.filter_tag}>"

    tag_start = text.find(open_marker, start)
    if tag_start == -1:
        return None

    closing = closeTag_findMatching(text, tag_start)
    if closing == -1:
        return None

    tag_end = text.find(">", tag_start)
    if tag_end == -1 or tag_end > closing:
        return None

    opening_tag = text[tag_start:tag_end + 1]
    return FilterRegion(
        include=attribute_extract(opening_tag, "include"),
        exclude=attribute_extract(opening_tag, "exclude"),
        inner=text[tag_end + 1:closing],
        start=tag_start,
        end=closing + len(close_marker),
    )


def visibility_filter(
    text: str, tool: str, diagnostics: Optional[Diagnostics] = None
) -> str:
    """
    Strip every filter region not meant for ``tool``.

    The result is (text before the first region) + (the region's inner
    text, itself filtered, if kept; nothing if dropped) + (the rest of the
    text, filtered the same way). Sibling regions are handled left to
    right; nested regions by recursion on the kept inner text.

    An opening tag with no matching close is reported as a warning and the
    text from that tag onward is returned unmodified.

    Args:
        text: Content to filter
        tool: Requesting tool identifier
        diagnostics: Sink for the unclosed-tag warning

    Returns:
        Filtered content

    Example:
        >>> visibility_filter('<content-factory-filter include="a">X</content-factory-filter>Y', 'b')
        'Y'
    """
    open_marker = f"<{appsettings.filter_tag}"
    parts = []
    position = 0

    while True:
        tag_start = text.find(open_marker, position)
        if tag_start == -1:
            parts.append(text[position:])
            break

        region = region_find(text, tag_start)
        if region is None:
            if diagnostics is not None:
                diagnostics.warn(
                    DiagnosticKind.UNCLOSED_FILTER_TAG,
                    f"Unclosed <{appsettings.filter_tag}> tag found.",
                )
            parts.append(text[position:])
            break

        parts.append(text[position:region.start])
        if region.keeps(tool):
            parts.append(visibility_filter(region.inner, tool, diagnostics))
        position = region.end

    return "".join(parts)
