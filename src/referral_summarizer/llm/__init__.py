# ============================================================================
# src/referral_summarizer/llm/__init__.py
# ============================================================================
"""
LLM Inference Clients

Text completion (summarizer) and vision (image findings) backends behind
one async interface.

Usage:
    from referral_summarizer.llm import create_summary_client

    client = create_summary_client()
    result = await client.generate("...", system_prompt="...")
    print(result["text"])
"""

from .base import BaseLLMClient, BackendType
from .client import (
    create_client,
    create_summary_client,
    create_vision_client,
    clear_client_cache,
)
from .ollama_client import OllamaClient
from .openai_client import OpenAIChatClient

__all__ = [
    "BaseLLMClient",
    "BackendType",
    "create_client",
    "create_summary_client",
    "create_vision_client",
    "clear_client_cache",
    "OllamaClient",
    "OpenAIChatClient",
]
