"""
Diagnostic records emitted by the directive engine and the orchestrator
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DiagnosticKind(Enum):
    """
    Conditions the engine reports without aborting the document

    CIRCULAR_DEPENDENCY is the only kind that is also raised to the caller.
    """
    MISSING_INCLUDED_FILE = "missing-included-file"
    UNKNOWN_PIPELINE_STAGE = "unknown-pipeline-stage"
    PIPELINE_STAGE_FAILURE = "pipeline-stage-failure"
    UNCLOSED_FILTER_TAG = "unclosed-filter-tag"
    CIRCULAR_DEPENDENCY = "circular-dependency"
    TRANSFORM_FAILURE = "transform-failure"
    ON_FINISH_FAILURE = "on-finish-failure"
    DELETE_FAILURE = "delete-failure"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single reported condition

    Attributes:
        kind: What happened
        message: Human-readable description
        path: File the condition relates to, when known
    """
    kind: DiagnosticKind
    message: str
    path: Optional[str] = None
