"""
Directive data models

Type-safe records produced while scanning content for the two directive
tags (visibility filter and file inclusion), and the parsed form of a
pipeline specification.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional


@dataclass(frozen=True)
class FilterRegion:
    """
    A parsed occurrence of a visibility filter tag

    Built by the visibility filter for the first opening tag in a scan pass
    and discarded once that region is spliced.

    Attributes:
        include: Tool identifiers the region is meant for (empty means all)
        exclude: Tool identifiers the region is hidden from
        inner: Raw text between the opening tag and its matching close
        start: Position of the opening tag in the scanned text
        end: Position just past the matching closing tag

    Example:
        For '<content-factory-filter include="a, b">X</content-factory-filter>':
        FilterRegion(include={"a", "b"}, exclude=set(), inner="X", ...)
    """
    include: FrozenSet[str]
    exclude: FrozenSet[str]
    inner: str
    start: int
    end: int

    def keeps(self, tool: str) -> bool:
        """Exclude always wins over include when both name the tool"""
        included = not self.include or tool in self.include
        return included and tool not in self.exclude


@dataclass(frozen=True)
class IncludeDirective:
    """
    A parsed occurrence of an include tag

    Attributes:
        path: Path literal exactly as written in the ``path`` attribute
        pipelines: Optional pipeline specification string
        span: The exact matched source text, used for substitution
        start: Position of the match in the scanned text
        end: Position just past the match

    Example:
        For '<content-factory-include-file path="./a.md" pipelines="trim" />':
        IncludeDirective(path="./a.md", pipelines="trim", span='<content-...', ...)
    """
    path: str
    pipelines: Optional[str]
    span: str
    start: int
    end: int


@dataclass(frozen=True)
class PipelineStage:
    """
    One named, parameterized step of a pipeline chain

    Example:
        "adjust-headings(2)" -> PipelineStage(name="adjust-headings", params=["2"])
    """
    name: str
    params: List[str] = field(default_factory=list)
