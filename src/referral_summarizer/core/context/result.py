# ============================================================================
# src/referral_summarizer/core/context/result.py
# ============================================================================
"""
Pipeline value types
- ExtractedContent: output of an extractor
- SummarizationResult: typed success/failure returned to the caller
- TaggedResult: result plus policy-assigned confidence and model label
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .enums import ErrorKind, SourceMethod


@dataclass(frozen=True)
class ExtractedContent:
    text: str
    source_method: SourceMethod
    # True when a "no readable text" sentence replaced near-empty output
    is_placeholder: bool = False

    @property
    def char_count(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class SummarizationResult:
    success: bool
    summary: Optional[str] = None
    method: Optional[str] = None  # "text" | "vision"
    error: Optional[ErrorKind] = None
    error_detail: Optional[str] = None

    # Quality metadata (success only)
    source_method: Optional[SourceMethod] = None
    content_chars: int = 0

    def __post_init__(self):
        if self.success:
            if not self.summary or not self.summary.strip():
                raise ValueError("Successful result requires a non-empty summary")
            if self.method is None:
                raise ValueError("Successful result requires a method tag")
        elif self.summary is not None:
            raise ValueError("Failed result must not carry a summary")

    @classmethod
    def ok(
        cls,
        summary: str,
        method: str,
        source_method: Optional[SourceMethod] = None,
        content_chars: int = 0,
    ) -> "SummarizationResult":
        return cls(
            success=True,
            summary=summary,
            method=method,
            source_method=source_method,
            content_chars=content_chars,
        )

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str) -> "SummarizationResult":
        return cls(success=False, error=kind, error_detail=detail)

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape for the HTTP layer."""
        return {
            "success": self.success,
            "summary": self.summary,
            "method": self.method,
            "error": self.error.value if self.error else None,
            "error_detail": self.error_detail,
            "source_method": self.source_method.value if self.source_method else None,
            "content_chars": self.content_chars,
        }


@dataclass(frozen=True)
class TaggedResult:
    result: SummarizationResult
    confidence: Optional[int] = None
    model_used: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data["confidence"] = self.confidence
        data["model_used"] = self.model_used
        return data
