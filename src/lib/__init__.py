"""
content-factory - One annotated source, many tool-specific documents

Directive resolution (visibility filters, recursive includes, pipeline
chains) and the engine that runs configured tools over a project.
"""

__version__ = "1.0.0"

from .preprocessor import Preprocessor, directives_process
from .visibility import visibility_filter
from .includes import includes_resolve
from .pipelines import PipelineRegistry, pipelineString_parse, pipelines_execute
from .engine import Engine
from .loader import config_load
from .errors import CircularDependencyError, ConfigLoadError
from .log import LOG, Diagnostics, state_connectToLogger

__all__ = [
    "Preprocessor",
    "directives_process",
    "visibility_filter",
    "includes_resolve",
    "PipelineRegistry",
    "pipelineString_parse",
    "pipelines_execute",
    "Engine",
    "config_load",
    "CircularDependencyError",
    "ConfigLoadError",
    "LOG",
    "Diagnostics",
    "state_connectToLogger",
    "__version__",
]
