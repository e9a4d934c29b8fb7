# ============================================================================
# src/referral_summarizer/llm/client.py
# ============================================================================
"""
LLM Client Factory

Provides a unified interface for creating completion and vision clients.
Supports multiple backends:
- groq: Groq OpenAI-compatible endpoint (default summarizer)
- openai: OpenAI Chat Completions (default vision model)
- ollama: Ollama server (local, offline)

Usage:
    from referral_summarizer.llm.client import create_client, create_summary_client

    # Explicit backend
    client = create_client({'backend': 'ollama', 'model': 'llama3.1:8b'})

    # From settings (.env / environment)
    summarizer = create_summary_client()
    vision = create_vision_client()   # None when vision is not configured
"""

import logging
from typing import Any, Dict, Optional

from .base import BaseLLMClient, BackendType
from .ollama_client import OllamaClient, DEFAULT_OLLAMA_MODEL
from .openai_client import OpenAIChatClient
from ..config.llm_config import LLMSettings
from ..utils.exceptions import ConfigurationError

_logger = logging.getLogger(__name__)

# Singleton cache keyed by (backend, endpoint, model) so HTTP sessions are
# reused across requests.
_client_cache: Dict[tuple, BaseLLMClient] = {}

SUPPORTED_BACKENDS = tuple(b.value for b in BackendType)


def create_client(config: Dict[str, Any]) -> BaseLLMClient:
    """
    Factory function to create an LLM client.

    Args:
        config: Configuration dict with at minimum:
            - backend: "groq" | "openai" | "ollama"
            - model: Model name

            OpenAI/Groq-specific:
            - api_key: Provider API key
            - base_url: Endpoint override

            Ollama-specific:
            - ollama_host: Server URL

            Common:
            - max_tokens, temperature, timeout

    Returns:
        Configured client instance (cached per backend + endpoint + model)

    Raises:
        ConfigurationError: Unknown backend or missing credentials
    """
    backend = str(config.get('backend', '')).lower()

    if backend == "ollama":
        cache_key = (backend, config.get('ollama_host'), config.get('model'))
    elif backend in ("openai", "groq"):
        cache_key = (backend, config.get('base_url'), config.get('model'), config.get('api_key'))
    else:
        raise ConfigurationError(
            f"Unknown backend: {backend or '<empty>'}. "
            f"Supported backends: {', '.join(SUPPORTED_BACKENDS)}"
        )

    if cache_key in _client_cache:
        _logger.debug(f"Reusing cached {backend} client: {config.get('model')}")
        return _client_cache[cache_key]

    if backend == "ollama":
        client = OllamaClient(config)
    else:
        client = OpenAIChatClient(config)

    _client_cache[cache_key] = client
    _logger.info(f"Created and cached {backend} client: {config.get('model')}")
    return client


def _provider_config(backend: str, settings: LLMSettings) -> Dict[str, Any]:
    if backend == "groq":
        return {'api_key': settings.GROQ_API_KEY, 'base_url': settings.GROQ_BASE_URL}
    if backend == "openai":
        return {'api_key': settings.OPENAI_API_KEY, 'base_url': settings.OPENAI_BASE_URL}
    if backend == "ollama":
        return {'ollama_host': settings.OLLAMA_HOST}
    return {}


def create_summary_client(settings: Optional[LLMSettings] = None) -> BaseLLMClient:
    """
    Build the text-completion client used by the summarizer.

    Raises:
        ConfigurationError: backend unknown or its API key is missing
    """
    settings = settings or LLMSettings()
    backend = settings.SUMMARY_BACKEND.lower()

    config = {
        'backend': backend,
        'model': settings.SUMMARY_MODEL,
        'max_tokens': settings.SUMMARY_MAX_TOKENS,
        'temperature': settings.SUMMARY_TEMPERATURE,
        'timeout': settings.SUMMARY_TIMEOUT,
        **_provider_config(backend, settings),
    }
    return create_client(config)


def create_vision_client(settings: Optional[LLMSettings] = None) -> Optional[BaseLLMClient]:
    """
    Build the vision client, or None when vision is not configured.

    Vision is optional: images fall back to OCR without it. A hosted
    backend without an API key counts as not configured.
    """
    settings = settings or LLMSettings()
    backend = settings.VISION_BACKEND.lower()

    if backend in ("", "none"):
        _logger.info("Vision backend disabled; images will use OCR only")
        return None

    if backend == "openai" and not settings.OPENAI_API_KEY:
        _logger.warning("VISION_BACKEND=openai but OPENAI_API_KEY is not set; images will use OCR only")
        return None

    config = {
        'backend': backend,
        'model': settings.VISION_MODEL,
        'max_tokens': settings.VISION_MAX_TOKENS,
        'temperature': settings.VISION_TEMPERATURE,
        'timeout': settings.VISION_TIMEOUT,
        **_provider_config(backend, settings),
    }
    return create_client(config)


def clear_client_cache():
    """Drop cached clients (tests, settings reload)."""
    _client_cache.clear()


__all__ = [
    "create_client",
    "create_summary_client",
    "create_vision_client",
    "clear_client_cache",
    "BaseLLMClient",
    "BackendType",
    "OllamaClient",
    "OpenAIChatClient",
    "DEFAULT_OLLAMA_MODEL",
    "SUPPORTED_BACKENDS",
]
