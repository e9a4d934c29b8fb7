# ============================================================================
# src/referral_summarizer/core/config.py
# ============================================================================
"""
Pipeline Configuration

The pipeline never reads the environment itself. Settings are loaded once
(.env + environment via pydantic-settings) and frozen into a PipelineConfig
that is passed to the pipeline constructor.

Usage:
    from referral_summarizer.core.config import load_pipeline_config

    config = load_pipeline_config()
    print(config.url_min_content_chars)

    # Tests and callers can override any field
    strict = config.replace(url_min_content_chars=200)
"""

from dataclasses import dataclass, replace as dataclass_replace
from pathlib import Path

from dotenv import load_dotenv


def _load_dotenv() -> bool:
    """Load .env file if it exists."""
    # Look for .env in project root
    env_path = Path(__file__).parent.parent.parent.parent / '.env'
    if env_path.exists():
        load_dotenv(env_path)
        return True

    # Also check current working directory
    cwd_env = Path.cwd() / '.env'
    if cwd_env.exists():
        load_dotenv(cwd_env)
        return True

    return False


@dataclass(frozen=True)
class PipelineConfig:
    """
    Thresholds, limits and timeouts for one pipeline instance.

    Defaults mirror the settings defaults so a bare PipelineConfig() is usable
    in tests without touching the environment.
    """

    # Content validity floors
    url_min_content_chars: int = 50
    document_min_chars: int = 20
    min_content_chars: int = 1
    max_input_chars: int = 24000

    # Remote fetch
    url_fetch_timeout: float = 15.0
    url_max_bytes: int = 5 * 1024 * 1024

    # Summarizer
    summary_max_tokens: int = 400
    summary_temperature: float = 0.2
    summary_timeout: float = 60.0

    # Vision
    vision_max_tokens: int = 500
    vision_temperature: float = 0.2
    vision_timeout: float = 60.0

    # OCR
    ocr_language: str = "eng"
    ocr_timeout: float = 60.0

    def replace(self, **changes) -> "PipelineConfig":
        return dataclass_replace(self, **changes)


def load_pipeline_config() -> PipelineConfig:
    """
    Build a PipelineConfig from .env and environment variables.

    Settings classes are instantiated here (not the module singletons) so
    values loaded from .env are picked up.
    """
    _load_dotenv()

    from ..config.extraction_config import ExtractionSettings
    from ..config.llm_config import LLMSettings

    extraction = ExtractionSettings()
    llm = LLMSettings()

    return PipelineConfig(
        url_min_content_chars=extraction.URL_MIN_CONTENT_CHARS,
        document_min_chars=extraction.DOCUMENT_MIN_CHARS,
        min_content_chars=extraction.MIN_CONTENT_CHARS,
        max_input_chars=extraction.MAX_INPUT_CHARS,
        url_fetch_timeout=extraction.URL_FETCH_TIMEOUT,
        url_max_bytes=extraction.URL_MAX_BYTES,
        summary_max_tokens=llm.SUMMARY_MAX_TOKENS,
        summary_temperature=llm.SUMMARY_TEMPERATURE,
        summary_timeout=llm.SUMMARY_TIMEOUT,
        vision_max_tokens=llm.VISION_MAX_TOKENS,
        vision_temperature=llm.VISION_TEMPERATURE,
        vision_timeout=llm.VISION_TIMEOUT,
        ocr_language=extraction.OCR_LANGUAGE,
        ocr_timeout=extraction.OCR_TIMEOUT,
    )
