# ============================================================================
# src/referral_summarizer/config/confidence_config.py
# ============================================================================
"""
Confidence Policy
- Caller-facing confidence per method tag
- Model label recorded with each summary
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class ConfidenceSettings(BaseSettings):
    VISION_CONFIDENCE: int = Field(
        default=92,
        ge=0, le=100,
        description="Confidence shown for summaries produced by the vision model"
    )
    VISION_MODEL_LABEL: str = Field(
        default="openai-gpt-4o",
        description="Model label recorded for vision summaries"
    )
    TEXT_CONFIDENCE: int = Field(
        default=88,
        ge=0, le=100,
        description="Confidence shown for summaries produced by the text summarizer"
    )
    TEXT_MODEL_LABEL: str = Field(
        default="groq-llama-3.3-70b",
        description="Model label recorded for text summaries"
    )
