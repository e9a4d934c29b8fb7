# ============================================================================
# src/referral_summarizer/core/__init__.py
# ============================================================================
"""
Core components for the referral summarizer.

Only the per-request value types are re-exported here. Import pipeline
stages from their modules (core.pipeline, core.service, core.metrics).
"""

from .context import (
    InputType,
    SourceMethod,
    ErrorKind,
    PipelineState,
    METHOD_TEXT,
    METHOD_VISION,
    SummarizationRequest,
    ExtractedContent,
    SummarizationResult,
    TaggedResult,
)

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
