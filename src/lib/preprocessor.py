"""
Directive processor: the entry point of directive resolution

Runs the two directive passes over a piece of content in a fixed order:

    1. visibility filter over the entire raw content
    2. include resolution over what survived

Filtering always completes before inclusion at every recursion level, so
an include directive inside a region dropped for the requesting tool is
never read.
"""

from pathlib import Path
from typing import Any, Callable, Optional

from ..models.visitation import VisitationSet
from .includes import includes_resolve
from .log import Diagnostics
from .paths import PathLike
from .pipelines import PipelineRegistry
from .visibility import visibility_filter


def directives_process(
    content: str,
    tool: str,
    strategy: str,
    registry: Optional[PipelineRegistry],
    root: PathLike,
    current_file: PathLike,
    visited: Optional[VisitationSet] = None,
    engine: Any = None,
    diagnostics: Optional[Diagnostics] = None,
    reader: Optional[Callable[[Path], str]] = None,
) -> str:
    """
    Fully resolve the directives in ``content``.

    Args:
        content: Raw content of ``current_file``
        tool: Requesting tool identifier
        strategy: Requesting strategy name
        registry: Pipeline stages available to include directives
        root: Project root
        current_file: Path the content was read from
        visited: In-flight set for this top-level document; a fresh one is
            created when omitted. Never share one across unrelated documents.
        engine: Read capability handed to pipeline stages
        diagnostics: Sink for recoverable conditions
        reader: Raw read function used for included files

    Returns:
        Content with filters applied and includes expanded

    Raises:
        CircularDependencyError: If ``current_file`` is already in flight
    """
    if visited is None:
        visited = VisitationSet()

    text = visibility_filter(content, tool, diagnostics)
    return includes_resolve(
        text,
        tool=tool,
        strategy=strategy,
        root=root,
        current_file=current_file,
        visited=visited,
        registry=registry,
        engine=engine,
        diagnostics=diagnostics,
        reader=reader,
    )


class Preprocessor:
    """
    Directive processor bound to one tool/strategy identity

    Convenience wrapper used by the engine: the identity, root, pipeline
    registry and diagnostics sink are fixed at construction and each call
    to process() starts a fresh visitation set.

    Example:
        >>> pre = Preprocessor(tool="claude", strategy="rules", root="/proj")
        >>> pre.process("Hello", "/proj/a.md")
        'Hello'
    """

    def __init__(
        self,
        tool: str,
        strategy: str,
        root: PathLike,
        registry: Optional[PipelineRegistry] = None,
        engine: Any = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> None:
        self.tool = tool
        self.strategy = strategy
        self.root = root
        self.registry = registry if registry is not None else PipelineRegistry()
        self.engine = engine
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def process(self, content: str, current_file: PathLike) -> str:
        """Resolve one top-level document"""
        return directives_process(
            content,
            tool=self.tool,
            strategy=self.strategy,
            registry=self.registry,
            root=self.root,
            current_file=current_file,
            visited=VisitationSet(),
            engine=self.engine,
            diagnostics=self.diagnostics,
        )
