# ============================================================================
# src/referral_summarizer/core/summarizer.py
# ============================================================================
"""
Summarization Engine

One text-completion call per request: fixed clinical system prompt,
bounded output, low temperature. No retry; a failed call fails the
request and the caller decides whether to resubmit.
"""

import asyncio
import logging

from .prompts import SUMMARY_SYSTEM_PROMPT, build_summary_prompt
from ..llm.base import BaseLLMClient
from ..utils.exceptions import SummarizationFailedError


class SummarizationEngine:
    """
    Args:
        client: Text-completion backend
        max_tokens: Output bound
        temperature: Sampling temperature
        timeout: Per-call timeout (seconds)
        max_input_chars: Longer input is truncated before the call
    """

    def __init__(
        self,
        client: BaseLLMClient,
        max_tokens: int = 400,
        temperature: float = 0.2,
        timeout: float = 60.0,
        max_input_chars: int = 24000,
        system_prompt: str = SUMMARY_SYSTEM_PROMPT,
    ):
        self.client = client
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.max_input_chars = max_input_chars
        self.system_prompt = system_prompt
        self.logger = logging.getLogger(__name__)

    async def summarize(self, text: str) -> str:
        """
        Raises:
            SummarizationFailedError: call raised, timed out or returned blank text
        """
        if len(text) > self.max_input_chars:
            self.logger.info(f"Truncating input from {len(text)} to {self.max_input_chars} chars")

        prompt = build_summary_prompt(text, self.max_input_chars)

        try:
            response = await asyncio.wait_for(
                self.client.generate(
                    prompt,
                    system_prompt=self.system_prompt,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            self.logger.error(f"Summarization timed out after {self.timeout:g}s")
            raise SummarizationFailedError(
                f"The summarization model did not respond within {self.timeout:g}s."
            ) from e
        except Exception as e:
            self.logger.error(f"Summarization call failed: {e.__class__.__name__}: {e}")
            raise SummarizationFailedError(f"The summarization model call failed: {e}") from e

        summary = (response.get("text") or "").strip()
        if not summary:
            raise SummarizationFailedError("The summarization model returned an empty summary.")

        return summary
