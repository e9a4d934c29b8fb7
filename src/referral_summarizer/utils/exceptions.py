# ============================================================================
# src/referral_summarizer/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the referral summarizer.

Every request-level failure maps to exactly one ErrorKind so the pipeline
can turn it into a typed SummarizationResult.
"""

from typing import Iterable, Optional

from ..core.context.enums import ErrorKind


class ReferralSummarizerError(Exception):
    """Base exception for all referral summarizer errors."""
    pass


class ConfigurationError(ReferralSummarizerError):
    """Invalid configuration (raised at construction time, never per request)."""
    pass


class SummarizationError(ReferralSummarizerError):
    """Request-level failure carrying an ErrorKind and a user-facing detail."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class EmptyInputError(SummarizationError):
    """Required input field missing or blank."""
    kind = ErrorKind.EMPTY_INPUT


class InvalidUrlError(SummarizationError):
    """URL is not a well-formed absolute http(s) URL."""
    kind = ErrorKind.INVALID_URL

    def __init__(self, url: str, reason: Optional[str] = None):
        detail = f"Invalid URL: {url!r}"
        if reason:
            detail += f" ({reason})"
        super().__init__(detail)
        self.url = url


class UnsupportedFileTypeError(SummarizationError):
    """File extension has no extractor."""
    kind = ErrorKind.UNSUPPORTED_FILE_TYPE

    def __init__(self, extension: str, supported: Iterable[str]):
        supported_list = ", ".join(sorted(s.upper() for s in supported if s))
        super().__init__(
            f"Unsupported file format (.{extension}). Supported: {supported_list}"
        )
        self.extension = extension


class FetchFailedError(SummarizationError):
    """Remote fetch returned non-2xx or could not complete."""
    kind = ErrorKind.FETCH_FAILED

    def __init__(self, url: str, status_code: Optional[int] = None, reason: Optional[str] = None):
        if status_code is not None:
            detail = f"Failed to fetch URL (HTTP {status_code})"
        else:
            detail = "Failed to fetch URL"
        if reason:
            detail += f": {reason}"
        super().__init__(detail)
        self.url = url
        self.status_code = status_code


class InsufficientContentError(SummarizationError):
    """Fetched page has too little readable text."""
    kind = ErrorKind.INSUFFICIENT_CONTENT

    def __init__(self, length: int, minimum: int):
        super().__init__(
            f"The webpage did not contain enough readable content "
            f"({length} characters, minimum {minimum})."
        )
        self.length = length
        self.minimum = minimum


class NoUsableContentError(SummarizationError):
    """Extraction produced nothing worth summarizing."""
    kind = ErrorKind.NO_USABLE_CONTENT


class ImageProcessingError(SummarizationError):
    """Neither vision nor OCR produced a result for an image."""
    kind = ErrorKind.IMAGE_PROCESSING_FAILED


class SummarizationFailedError(SummarizationError):
    """Text-completion call failed, timed out or returned nothing."""
    kind = ErrorKind.SUMMARIZATION_FAILED


class DeadlineExceededError(SummarizationError):
    """Caller-owned request deadline elapsed."""
    kind = ErrorKind.DEADLINE_EXCEEDED

    def __init__(self, deadline: float):
        super().__init__(f"Request did not complete within {deadline:g}s")
        self.deadline = deadline
