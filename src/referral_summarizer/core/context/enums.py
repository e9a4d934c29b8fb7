# ============================================================================
# src/referral_summarizer/core/context/enums.py
# ============================================================================
"""
Pipeline Enums
- Input modes
- Extraction source methods
- Error kinds
- Per-request pipeline states
"""

from enum import Enum


class InputType(str, Enum):
    TEXT = "text"
    FILE = "file"
    URL = "url"
    IMAGE = "image"


class SourceMethod(str, Enum):
    DIRECT = "direct"                  # text input, plain-text files
    DOCUMENT_PARSE = "document_parse"  # Word / PDF text layer
    WEB_SCRAPE = "web_scrape"
    VISION = "vision"
    OCR = "ocr"


class ErrorKind(str, Enum):
    EMPTY_INPUT = "empty_input"
    INVALID_URL = "invalid_url"
    UNSUPPORTED_FILE_TYPE = "unsupported_file_type"
    FETCH_FAILED = "fetch_failed"
    INSUFFICIENT_CONTENT = "insufficient_content"
    NO_USABLE_CONTENT = "no_usable_content"
    IMAGE_PROCESSING_FAILED = "image_processing_failed"
    SUMMARIZATION_FAILED = "summarization_failed"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    INTERNAL_ERROR = "internal_error"


class PipelineState(str, Enum):
    RECEIVED = "received"
    CLASSIFIED = "classified"
    EXTRACTING = "extracting"
    VALIDATED = "validated"
    SUMMARIZING = "summarizing"
    TAGGED = "tagged"
    DONE = "done"
    FAILED = "failed"


# Method tags returned to the caller
METHOD_TEXT = "text"
METHOD_VISION = "vision"
