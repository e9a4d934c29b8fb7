# ============================================================================
# src/referral_summarizer/config/extraction_config.py
# ============================================================================
"""
Extraction Thresholds & Limits
- Content validity floors (URL, documents, final gate)
- Remote fetch limits
- OCR
- Request deadline
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class ExtractionSettings(BaseSettings):
    URL_MIN_CONTENT_CHARS: int = Field(
        default=50,
        ge=0,
        description="Pages with less visible text than this are rejected (JS-rendered shells, error pages)"
    )
    URL_FETCH_TIMEOUT: float = Field(
        default=15.0,
        gt=0,
        description="Total timeout for fetching a remote page (seconds)"
    )
    URL_MAX_BYTES: int = Field(
        default=5 * 1024 * 1024,
        gt=0,
        description="Maximum response body read from a remote page"
    )
    DOCUMENT_MIN_CHARS: int = Field(
        default=20,
        ge=0,
        description="Below this, a parsed Word/PDF document is replaced by a 'no readable text' placeholder"
    )
    MIN_CONTENT_CHARS: int = Field(
        default=1,
        ge=1,
        description="Final gate: minimum non-whitespace characters before summarization"
    )
    MAX_INPUT_CHARS: int = Field(
        default=24000,
        gt=0,
        description="Extracted text beyond this is truncated before the completion call"
    )
    OCR_ENABLED: bool = Field(
        default=True,
        description="Use Tesseract OCR as the image fallback"
    )
    OCR_LANGUAGE: str = Field(
        default="eng",
        description="Tesseract language hint"
    )
    OCR_TIMEOUT: float = Field(
        default=60.0,
        gt=0,
        description="OCR timeout (seconds)"
    )
    REQUEST_DEADLINE: float = Field(
        default=180.0,
        gt=0,
        description="Overall deadline applied by the HTTP layer to one summarization request"
    )

extraction_settings = ExtractionSettings()
