"""
Include resolution for <content-factory-include-file> directives

    <content-factory-include-file path="@/partials/footer.md" />
    <content-factory-include-file path="./a.md" pipelines="trim"></content-factory-include-file>

Each directive is replaced by the referenced file's fully resolved content:
the included file goes through the whole directive processor (visibility
filter, then its own includes) before an optional pipeline chain runs
over it. Directives are handled one at a time, left to right, and each
recursive expansion completes before the next sibling starts.

Cycles are caught with a VisitationSet shared by reference across the
recursion for one top-level document. A file that cannot be read is
replaced by a missing-file marker and the rest of the document carries on.
"""

import re
from pathlib import Path
from typing import Any, Callable, List, Optional, Pattern

from ..config import appsettings
from ..models.diagnostics import DiagnosticKind
from ..models.directives import IncludeDirective
from ..models.visitation import VisitationSet
from .fileio import raw_read
from .log import Diagnostics
from .paths import PathLike, path_normalize, path_resolve
from .pipelines import PipelineRegistry, pipelines_execute

_QUOTES = "\"'"


def includePattern_make(tag: str) -> Pattern[str]:
    """
    Regex for one include directive with a mandatory path attribute and
    an optional pipelines attribute, self-closing or explicitly closed.
    """
    escaped = re.escape(tag)
    return re.compile(
        rf'<{escaped}\s+path\s*=\s*[{_QUOTES}]([^{_QUOTES}]+)[{_QUOTES}]'
        rf'(?:\s+pipelines\s*=\s*[{_QUOTES}]([^{_QUOTES}]+)[{_QUOTES}])?'
        rf'\s*(?:/>|></{escaped}>)'
    )


def includeDirectives_find(text: str) -> List[IncludeDirective]:
    """
    Every include directive in ``text``, in left-to-right order.

    Example:
        >>> [d.path for d in includeDirectives_find(
        ...     '<content-factory-include-file path="a" />'
        ...     '<content-factory-include-file path="b" />')]
        ['a', 'b']
    """
    pattern = includePattern_make(appsettings.include_tag)
    return [
        IncludeDirective(
            path=match.group(1),
            pipelines=match.group(2),
            span=match.group(0),
            start=match.start(),
            end=match.end(),
        )
        for match in pattern.finditer(text)
    ]


def includes_resolve(
    text: str,
    tool: str,
    strategy: str,
    root: PathLike,
    current_file: PathLike,
    visited: VisitationSet,
    registry: Optional[PipelineRegistry] = None,
    engine: Any = None,
    diagnostics: Optional[Diagnostics] = None,
    reader: Optional[Callable[[Path], str]] = None,
) -> str:
    """
    Expand every include directive in ``text``.

    ``current_file`` is marked in flight in ``visited`` for the duration of
    the call and released afterwards, even on failure.

    Args:
        text: Content already passed through the visibility filter
        tool: Requesting tool identifier
        strategy: Requesting strategy name
        root: Project root (for @/ paths)
        current_file: File the content came from (for relative paths)
        visited: In-flight paths for this top-level document
        registry: Pipeline stages; no chain runs when None
        engine: Read capability handed to pipeline stages
        diagnostics: Sink for missing files and pipeline problems
        reader: Raw read function (absolute path -> text)

    Returns:
        Content with every directive replaced

    Raises:
        CircularDependencyError: If ``current_file`` is already in flight,
            here or anywhere below
    """
    from .preprocessor import directives_process

    read = reader or raw_read

    with visited.visiting(path_normalize(current_file)) as current:
        parts = []
        position = 0

        for directive in includeDirectives_find(text):
            parts.append(text[position:directive.start])
            position = directive.end

            resolved = path_resolve(directive.path, root, current)
            try:
                raw = read(resolved)
            except (OSError, UnicodeDecodeError):
                if diagnostics is not None:
                    diagnostics.error(
                        DiagnosticKind.MISSING_INCLUDED_FILE,
                        f"Failed to include file '{directive.path}' (resolved to '{resolved}')",
                        path=str(resolved),
                    )
                parts.append(appsettings.missingFile_make(directive.path))
                continue

            content = directives_process(
                raw,
                tool=tool,
                strategy=strategy,
                registry=registry,
                root=root,
                current_file=resolved,
                visited=visited,
                engine=engine,
                diagnostics=diagnostics,
                reader=read,
            )

            if directive.pipelines and registry is not None:
                content = pipelines_execute(
                    content,
                    directive.pipelines,
                    registry,
                    tool,
                    strategy,
                    engine=engine,
                    diagnostics=diagnostics,
                )

            parts.append(content)

        parts.append(text[position:])

    return "".join(parts)
