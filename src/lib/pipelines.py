"""
Pipeline chains applied to included content

An include directive may name a chain of stages:

    <content-factory-include-file path="./a.md" pipelines="adjust-headings(2), wrap-example" />

The specification is split on top-level commas into stages; each stage is
looked up by name in a PipelineRegistry and run in order, each stage
receiving the previous stage's output.
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..models.config import PipelineContext, PipelineFn, PipelineResult
from ..models.diagnostics import DiagnosticKind
from ..models.directives import PipelineStage
from .log import Diagnostics


class PipelineRegistry:
    """
    Registry of pipeline stages by name

    Built-in stages are registered first; stages supplied by the user
    configuration are registered over them and win on a name clash.
    """

    def __init__(self, pipelines: Optional[Mapping[str, PipelineFn]] = None) -> None:
        """Initialize the registry with built-ins, then the given stages"""
        self.stages: Dict[str, PipelineFn] = {}
        self.builtinStages_register()
        for name, fn in (pipelines or {}).items():
            self.register(name, fn)

    def register(self, name: str, fn: PipelineFn) -> None:
        """Register (or replace) a stage"""
        self.stages[name] = fn

    def get(self, name: str) -> Optional[PipelineFn]:
        """Stage callable by name, or None if unknown"""
        return self.stages.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.stages

    def builtinStages_register(self) -> None:
        """Register the stages every configuration gets for free"""

        def adjustHeadings_stage(context: PipelineContext) -> PipelineResult:
            """Shift Markdown ATX headings by params[0] levels (clamped to 1..6)"""
            shift = int(context.params[0]) if context.params else 1
            lines = context.content.split("\n")
            in_fence = False
            for index, line in enumerate(lines):
                if line.lstrip().startswith(("```", "~~~")):
                    in_fence = not in_fence
                    continue
                if in_fence:
                    continue
                match = re.match(r"^(#{1,6})(\s)", line)
                if match:
                    level = min(6, max(1, len(match.group(1)) + shift))
                    lines[index] = "#" * level + line[len(match.group(1)):]
            return PipelineResult(content="\n".join(lines))

        def wrapExample_stage(context: PipelineContext) -> PipelineResult:
            """Wrap content in a fenced code block, optionally tagged with params[0]"""
            language = context.params[0] if context.params else ""
            body = context.content if context.content.endswith("\n") else context.content + "\n"
            return PipelineResult(content=f"```{language}\n{body}```")

        def removeNthLine_stage(context: PipelineContext) -> Optional[PipelineResult]:
            """Drop the 1-based line params[0]"""
            if not context.params:
                return None
            number = int(context.params[0])
            lines = context.content.split("\n")
            if 1 <= number <= len(lines):
                del lines[number - 1]
            return PipelineResult(content="\n".join(lines))

        def trim_stage(context: PipelineContext) -> PipelineResult:
            return PipelineResult(content=context.content.strip())

        self.register("adjust-headings", adjustHeadings_stage)
        self.register("wrap-example", wrapExample_stage)
        self.register("remove-nth-line", removeNthLine_stage)
        self.register("trim", trim_stage)


def stage_parse(segment: str) -> Optional[PipelineStage]:
    """
    Parse one top-level segment of a pipeline specification.

    Example:
        >>> stage_parse(" a(1, 2) ")
        PipelineStage(name='a', params=['1', '2'])
        >>> stage_parse("b")
        PipelineStage(name='b', params=[])
    """
    trimmed = segment.strip()
    if not trimmed:
        return None

    paren = trimmed.find("(")
    if paren != -1 and trimmed.endswith(")"):
        name = trimmed[:paren].strip()
        params = [p.strip() for p in trimmed[paren + 1:-1].split(",")]
        return PipelineStage(name=name, params=[p for p in params if p])

    return PipelineStage(name=trimmed, params=[])


def pipelineString_parse(spec: str) -> List[PipelineStage]:
    """
    Split a pipeline specification into ordered stages.

    Commas inside parentheses do not split stages; paren depth is tracked
    for that. Quotes are not special.

    Example:
        >>> pipelineString_parse("a(1,2), b")
        [PipelineStage(name='a', params=['1', '2']), PipelineStage(name='b', params=[])]
    """
    stages: List[PipelineStage] = []
    current: List[str] = []
    depth = 0

    def flush() -> None:
        stage = stage_parse("".join(current))
        if stage is not None:
            stages.append(stage)
        current.clear()

    for char in spec:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1

        if char == "," and depth == 0:
            flush()
        else:
            current.append(char)
    flush()

    return stages


def stageResult_content(result: Any) -> Optional[str]:
    """Content carried by a stage's return value, or None to keep the input"""
    if result is None:
        return None
    if isinstance(result, str):
        return result
    if isinstance(result, PipelineResult):
        return result.content
    if isinstance(result, Mapping) and isinstance(result.get("content"), str):
        return result["content"]
    content = getattr(result, "content", None)
    return content if isinstance(content, str) else None


def pipelines_execute(
    content: str,
    spec: str,
    registry: PipelineRegistry,
    tool: str,
    strategy: str,
    engine: Any = None,
    diagnostics: Optional[Diagnostics] = None,
) -> str:
    """
    Run a pipeline chain over content.

    Stages run strictly in parse order and each one sees the output of the
    stage before it. Unknown stage names are skipped with a warning; a
    stage that raises is logged and skipped, leaving the content as it was
    before that stage.

    Args:
        content: Content entering the chain
        spec: Pipeline specification (e.g., "adjust-headings(2), trim")
        registry: Where stage names are looked up
        tool: Requesting tool identifier
        strategy: Requesting strategy name
        engine: Read capability handed to every stage
        diagnostics: Sink for skipped stages

    Returns:
        Content after the last stage
    """
    current = content

    for stage in pipelineString_parse(spec):
        fn: Optional[Callable[[PipelineContext], Any]] = registry.get(stage.name)
        if fn is None:
            if diagnostics is not None:
                diagnostics.warn(
                    DiagnosticKind.UNKNOWN_PIPELINE_STAGE,
                    f"Pipeline '{stage.name}' not found.",
                )
            continue

        context = PipelineContext(
            content=current,
            pipeline_name=stage.name,
            tool_name=tool,
            strategy_name=strategy,
            params=list(stage.params),
            engine=engine,
        )
        try:
            produced = stageResult_content(fn(context))
        except Exception as e:
            if diagnostics is not None:
                diagnostics.error(
                    DiagnosticKind.PIPELINE_STAGE_FAILURE,
                    f"Error executing pipeline '{stage.name}': {e}",
                )
            continue

        if produced is not None:
            current = produced

    return current
