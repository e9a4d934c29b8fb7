# ============================================================================
# src/referral_summarizer/utils/__init__.py
# ============================================================================
"""
Utility modules for the referral summarizer.
"""

from .exceptions import (
    ReferralSummarizerError,
    ConfigurationError,
    SummarizationError,
    EmptyInputError,
    InvalidUrlError,
    UnsupportedFileTypeError,
    FetchFailedError,
    InsufficientContentError,
    NoUsableContentError,
    ImageProcessingError,
    SummarizationFailedError,
    DeadlineExceededError,
)

from .logging import (
    setup_logging,
    JsonFormatter,
    LogAdapter,
    log_performance,
)
