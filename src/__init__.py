"""
content-factory - One annotated source, many tool-specific documents

Authors write a single file with inline directives; the engine produces a
separate resolved document for every configured tool.
"""

__version__ = "1.0.0"

from .lib import (
    Engine,
    Preprocessor,
    PipelineRegistry,
    Diagnostics,
    CircularDependencyError,
    ConfigLoadError,
    directives_process,
    config_load,
    LOG,
    state_connectToLogger,
)
from .models import (
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
from .lib.paths import pathSegment_replace, pathStartSegments_remove

__all__ = [
    "Engine",
    "Preprocessor",
    "PipelineRegistry",
    "Diagnostics",
    "CircularDependencyError",
    "ConfigLoadError",
    "directives_process",
    "config_load",
    "LOG",
    "state_connectToLogger",
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
    "pathStartSegments_remove",
    "pathSegment_replace",
    "__version__",
]
