"""
User configuration and orchestration records

Structures exchanged between the engine and user-supplied callbacks:
the tool/strategy configuration itself, the files handed to a transform,
and the files a transform or finish callback asks to write or delete.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.engine import Engine


@dataclass
class SourceFile:
    """
    A discovered or requested file after directive resolution

    Attributes:
        name: Base file name (e.g., "rules.md")
        content: Fully resolved content
        path: Absolute path
        relative_path: Path relative to the project root
        extension: File suffix including the dot (e.g., ".md")
    """
    name: str
    content: str
    path: str
    relative_path: str
    extension: str


@dataclass
class OutputFile:
    """A file to write; relative paths land under the engine's output root"""
    path: str
    content: str


@dataclass
class ReadFileOptions:
    """Identity of the requesting tool/strategy and an optional pipeline chain"""
    tool_name: str
    strategy_name: str
    pipelines: Optional[str] = None


@dataclass
class PipelineContext:
    """
    Everything a pipeline stage is given

    Attributes:
        content: Content entering this stage
        pipeline_name: Registered name the stage was looked up by
        tool_name: Requesting tool identifier
        strategy_name: Requesting strategy name
        params: Positional parameters parsed from the specification
        engine: Read capability (``file_read``/``files_read``), may be None
    """
    content: str
    pipeline_name: str
    tool_name: str
    strategy_name: str
    params: List[str] = field(default_factory=list)
    engine: Optional["Engine"] = None


@dataclass
class PipelineResult:
    """Content produced by a pipeline stage"""
    content: str


PipelineFn = Callable[[PipelineContext], Union[PipelineResult, Mapping[str, Any], str, None]]


@dataclass
class TransformContext:
    """
    Input to a strategy's transform callback: one directory batch

    Attributes:
        files: Resolved source files found in ``dir``
        dir: Absolute directory the batch was grouped by
        root: Project root
        config: The full factory configuration
        engine: The running engine (read capability)
    """
    files: List[SourceFile]
    dir: str
    root: str
    config: "FactoryConfig"
    engine: Optional["Engine"] = None


@dataclass
class TransformResult:
    """Files to write, glob patterns to delete, and metadata for on_finish"""
    files: List[OutputFile] = field(default_factory=list)
    delete_files: List[str] = field(default_factory=list)
    metadata: Any = None


@dataclass
class OnFinishContext:
    """Metadata collected from every transform of one tool"""
    metadata: List[Any]
    engine: Optional["Engine"] = None


@dataclass
class OnFinishResult:
    """Files to write and glob patterns to delete once a tool is finished"""
    files: List[OutputFile] = field(default_factory=list)
    delete_files: List[str] = field(default_factory=list)


TransformFn = Callable[[TransformContext], Union[TransformResult, Mapping[str, Any]]]
OnFinishFn = Callable[[OnFinishContext], Union[OnFinishResult, Mapping[str, Any], None]]


@dataclass
class Strategy:
    """
    A named set of glob patterns and the transform applied to its matches

    Example:
        Strategy(name="rules", matches=["rules/**/*.md"], transform=rules_build)
    """
    name: str
    matches: List[str]
    transform: TransformFn


@dataclass
class ToolConfig:
    """Strategies run for one tool, plus an optional finishing callback"""
    strategies: List[Strategy] = field(default_factory=list)
    on_finish: Optional[OnFinishFn] = None


@dataclass
class FactoryConfig:
    """
    Top-level user configuration

    Attributes:
        tools: Tool identifier -> ToolConfig, processed in insertion order
        pipelines: Stage name -> pipeline callable, merged over the built-ins
        use_logs: Emit progress messages; None defers to AppSettings.use_logs
    """
    tools: Dict[str, ToolConfig] = field(default_factory=dict)
    pipelines: Dict[str, PipelineFn] = field(default_factory=dict)
    use_logs: Optional[bool] = None


def config_define(config: FactoryConfig) -> FactoryConfig:
    """Return ``config`` unchanged; a typed anchor for configuration modules"""
    return config


def tool_define(tool: ToolConfig) -> ToolConfig:
    """Return ``tool`` unchanged; a typed anchor for configuration modules"""
    return tool


def outputFile_coerce(item: Union[OutputFile, Mapping[str, Any]]) -> OutputFile:
    """Accept an OutputFile or a {"path", "content"} mapping"""
    if isinstance(item, OutputFile):
        return item
    return OutputFile(path=str(item["path"]), content=str(item["content"]))


def transformResult_coerce(result: Any) -> TransformResult:
    """
    Normalize whatever a transform returned into a TransformResult

    Accepts the dataclass, a mapping with ``files``/``delete_files``
    (or ``deleteFiles``)/``metadata`` keys, or None.
    """
    if result is None:
        return TransformResult()
    if isinstance(result, TransformResult):
        return TransformResult(
            files=[outputFile_coerce(f) for f in result.files],
            delete_files=list(result.delete_files),
            metadata=result.metadata,
        )
    return TransformResult(
        files=[outputFile_coerce(f) for f in result.get("files") or []],
        delete_files=list(result.get("delete_files") or result.get("deleteFiles") or []),
        metadata=result.get("metadata"),
    )


def onFinishResult_coerce(result: Any) -> OnFinishResult:
    """Normalize an on_finish return value (dataclass, mapping, list of files or None)"""
    if result is None:
        return OnFinishResult()
    if isinstance(result, OnFinishResult):
        return OnFinishResult(
            files=[outputFile_coerce(f) for f in result.files],
            delete_files=list(result.delete_files),
        )
    if isinstance(result, (list, tuple)):
        return OnFinishResult(files=[outputFile_coerce(f) for f in result])
    return OnFinishResult(
        files=[outputFile_coerce(f) for f in result.get("files") or []],
        delete_files=list(result.get("delete_files") or result.get("deleteFiles") or []),
    )
