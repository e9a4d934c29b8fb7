# ============================================================================
# src/referral_summarizer/config/llm_config.py
# ============================================================================
"""
Model Backend Configuration
- Text-completion backend (summarizer)
- Vision backend (image findings)
- Provider credentials and endpoints
- Token limits, temperatures, timeouts
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

class LLMSettings(BaseSettings):
    # Summarizer
    SUMMARY_BACKEND: str = Field(
        default="groq",
        description="Text-completion backend: groq | openai | ollama"
    )
    SUMMARY_MODEL: str = Field(
        default="llama-3.3-70b-versatile",
        description="Model used for clinical text summarization"
    )
    SUMMARY_MAX_TOKENS: int = Field(
        default=400,
        gt=0,
        description="Upper bound on summary length"
    )
    SUMMARY_TEMPERATURE: float = Field(
        default=0.2,
        ge=0.0, le=2.0,
        description="Low temperature favors determinism over creative phrasing"
    )
    SUMMARY_TIMEOUT: float = Field(
        default=60.0,
        gt=0,
        description="Per-call timeout for the completion request (seconds)"
    )

    # Vision
    VISION_BACKEND: str = Field(
        default="openai",
        description="Vision backend: openai | ollama | none"
    )
    VISION_MODEL: str = Field(
        default="gpt-4o",
        description="Vision-capable model for medical image findings"
    )
    VISION_MAX_TOKENS: int = Field(
        default=500,
        gt=0,
        description="Upper bound on vision findings length"
    )
    VISION_TEMPERATURE: float = Field(
        default=0.2,
        ge=0.0, le=2.0,
        description="Sampling temperature for the vision call"
    )
    VISION_TIMEOUT: float = Field(
        default=60.0,
        gt=0,
        description="Per-call timeout for the vision request (seconds)"
    )

    # Providers
    GROQ_API_KEY: Optional[str] = Field(default=None, description="Groq API key")
    GROQ_BASE_URL: str = Field(
        default="https://api.groq.com/openai/v1",
        description="Groq OpenAI-compatible endpoint"
    )
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API key")
    OPENAI_BASE_URL: Optional[str] = Field(
        default=None,
        description="Override for OpenAI-compatible gateways"
    )
    OLLAMA_HOST: str = Field(
        default="http://localhost:11434",
        description="Ollama server URL"
    )
