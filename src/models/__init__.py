"""
Models package for content-factory

Contains data structures and type definitions for directive resolution
and orchestration.
"""

from .state import ProgramState, pipeline
from .directives import FilterRegion, IncludeDirective, PipelineStage
from .diagnostics import Diagnostic, DiagnosticKind
from .visitation import VisitationSet
from .config import (
    FactoryConfig,
    ToolConfig,
    Strategy,
    SourceFile,
    OutputFile,
    ReadFileOptions,
    PipelineContext,
    PipelineResult,
    TransformContext,
    TransformResult,
    OnFinishContext,
    OnFinishResult,
    config_define,
    tool_define,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "FilterRegion",
    "IncludeDirective",
    "PipelineStage",
    "Diagnostic",
    "DiagnosticKind",
    "VisitationSet",
    "FactoryConfig",
    "ToolConfig",
    "Strategy",
    "SourceFile",
    "OutputFile",
    "ReadFileOptions",
    "PipelineContext",
    "PipelineResult",
    "TransformContext",
    "TransformResult",
    "OnFinishContext",
    "OnFinishResult",
    "config_define",
    "tool_define",
]
