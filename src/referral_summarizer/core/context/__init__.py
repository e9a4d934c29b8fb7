# ============================================================================
# src/referral_summarizer/core/context/__init__.py
# ============================================================================
"""
Per-request value types shared by every pipeline stage.
"""

from .enums import (
    InputType,
    SourceMethod,
    ErrorKind,
    PipelineState,
    METHOD_TEXT,
    METHOD_VISION,
)
from .request import SummarizationRequest
from .result import ExtractedContent, SummarizationResult, TaggedResult

__all__ = [
    "InputType",
    "SourceMethod",
    "ErrorKind",
    "PipelineState",
    "METHOD_TEXT",
    "METHOD_VISION",
    "SummarizationRequest",
    "ExtractedContent",
    "SummarizationResult",
    "TaggedResult",
]
