# ============================================================================
# FILE: tests/unit/test_configuration.py
# ============================================================================
"""
Unit tests for settings and pipeline configuration
"""

import pytest
from pydantic import ValidationError

from referral_summarizer.config.confidence_config import ConfidenceSettings
from referral_summarizer.config.extraction_config import ExtractionSettings
from referral_summarizer.config.llm_config import LLMSettings
from referral_summarizer.core.config import PipelineConfig, load_pipeline_config
from referral_summarizer.core.tagger import ConfidencePolicy


def test_extraction_defaults():
    """Thresholds ship with their documented defaults"""
    settings = ExtractionSettings()
    assert settings.URL_MIN_CONTENT_CHARS == 50
    assert settings.DOCUMENT_MIN_CHARS == 20
    assert settings.MIN_CONTENT_CHARS == 1


def test_llm_defaults(monkeypatch):
    """Summarizer and vision defaults"""
    for name in ("SUMMARY_BACKEND", "SUMMARY_MAX_TOKENS", "SUMMARY_TEMPERATURE", "VISION_BACKEND"):
        monkeypatch.delenv(name, raising=False)

    settings = LLMSettings()
    assert settings.SUMMARY_BACKEND == "groq"
    assert settings.SUMMARY_MAX_TOKENS == 400
    assert settings.SUMMARY_TEMPERATURE == 0.2
    assert settings.VISION_BACKEND == "openai"


def test_settings_read_environment(monkeypatch):
    """Environment variables override defaults"""
    monkeypatch.setenv("URL_MIN_CONTENT_CHARS", "200")
    monkeypatch.setenv("SUMMARY_MAX_TOKENS", "250")

    assert ExtractionSettings().URL_MIN_CONTENT_CHARS == 200
    assert LLMSettings().SUMMARY_MAX_TOKENS == 250


def test_settings_reject_invalid_values(monkeypatch):
    """Out-of-range values fail at load time"""
    monkeypatch.setenv("TEXT_CONFIDENCE", "150")
    with pytest.raises(ValidationError):
        ConfidenceSettings()


def test_load_pipeline_config_from_environment(monkeypatch):
    """load_pipeline_config freezes settings into a PipelineConfig"""
    monkeypatch.setenv("DOCUMENT_MIN_CHARS", "35")
    monkeypatch.setenv("VISION_TIMEOUT", "12.5")

    config = load_pipeline_config()
    assert config.document_min_chars == 35
    assert config.vision_timeout == 12.5


def test_pipeline_config_replace():
    """replace returns a new frozen config"""
    config = PipelineConfig()
    strict = config.replace(url_min_content_chars=500)

    assert strict.url_min_content_chars == 500
    assert config.url_min_content_chars == 50


def test_confidence_policy_from_settings(monkeypatch):
    """Policy table is built from settings and can be overridden"""
    monkeypatch.setenv("VISION_CONFIDENCE", "80")
    monkeypatch.setenv("TEXT_MODEL_LABEL", "local-llama")

    policy = ConfidencePolicy.from_settings(ConfidenceSettings())
    assert policy.lookup("vision").confidence == 80
    assert policy.lookup("text").model_used == "local-llama"
    assert policy.lookup("text").confidence == 88
    assert policy.lookup(None) is None


def test_create_pipeline_reads_environment_at_construction(monkeypatch):
    """Backends and the confidence table come from settings read when the pipeline is built"""
    from referral_summarizer.core.pipeline import create_pipeline
    from referral_summarizer.llm.client import clear_client_cache
    from referral_summarizer.llm.ollama_client import OllamaClient

    monkeypatch.setenv("SUMMARY_BACKEND", "ollama")
    monkeypatch.setenv("SUMMARY_MODEL", "llama3.1:8b")
    monkeypatch.setenv("VISION_BACKEND", "none")
    monkeypatch.setenv("OCR_ENABLED", "false")
    monkeypatch.setenv("TEXT_CONFIDENCE", "75")
    monkeypatch.setenv("TEXT_MODEL_LABEL", "ollama-llama3.1")
    clear_client_cache()

    try:
        pipeline = create_pipeline()
    finally:
        clear_client_cache()

    assert isinstance(pipeline.completion_client, OllamaClient)
    assert pipeline.vision_client is None
    assert pipeline.ocr_engine is None
    assert pipeline.tagger.policy.lookup("text").confidence == 75
    assert pipeline.tagger.policy.lookup("text").model_used == "ollama-llama3.1"
