# ============================================================================
# src/referral_summarizer/llm/openai_client.py
# ============================================================================
"""
OpenAI-Compatible Chat Client

Serves two roles through the same Chat Completions protocol:
- OpenAI GPT-4o: vision findings from medical images
- Groq (OpenAI-compatible endpoint): fast Llama text summarization

Images are sent as base64 data URLs in the user message content.

Usage:
    from referral_summarizer.llm.openai_client import OpenAIChatClient

    client = OpenAIChatClient({
        'backend': 'groq',
        'api_key': '...',
        'base_url': 'https://api.groq.com/openai/v1',
        'model': 'llama-3.3-70b-versatile',
    })
    result = await client.generate("Summarize ...", system_prompt="...")
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI

from .base import BaseLLMClient, BackendType
from ..utils.exceptions import ConfigurationError
from ..utils.image_utils import encode_image_base64


class OpenAIChatClient(BaseLLMClient):
    """
    Async Chat Completions client for OpenAI and Groq.

    Config options:
        backend: "openai" | "groq" (default: openai)
        api_key: Provider API key (required)
        base_url: Endpoint override (Groq, gateways)
        model: Model name (default: gpt-4o)
        max_tokens: Default max tokens (default: 400)
        temperature: Default temperature (default: 0.2)
        timeout: Per-request timeout in seconds (default: 60)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)

        self._backend = BackendType(self.config.get('backend', 'openai').lower())
        if self._backend not in (BackendType.OPENAI, BackendType.GROQ):
            raise ConfigurationError(
                f"OpenAIChatClient does not serve backend '{self._backend.value}'"
            )

        self.api_key = self.config.get('api_key')
        if not self.api_key:
            raise ConfigurationError(f"No API key configured for backend '{self._backend.value}'")

        self.base_url = self.config.get('base_url')
        self._model_name = self.config.get('model', 'gpt-4o')
        self.default_max_tokens = self.config.get('max_tokens', 400)
        self.default_temperature = self.config.get('temperature', 0.2)
        self.timeout = self.config.get('timeout', 60)

        self._client: Optional[AsyncOpenAI] = None

        self.logger.info(
            f"Initialized {self._backend.value} client: {self._model_name}"
            + (f" @ {self.base_url}" if self.base_url else "")
        )

    @property
    def backend_type(self) -> BackendType:
        return self._backend

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-initialize the SDK client."""
        if self._client is None:
            # The SDK retries twice by default; retry policy belongs to the caller
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def _build_messages(
        self,
        prompt: str,
        system_prompt: Optional[str],
        images: Optional[List[bytes]],
    ) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        if images:
            content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
            for image in images:
                b64, mime = encode_image_base64(image)
                content.append({
                    "type": "image_url",
                    "image_url": {"url": f"data:{mime};base64,{b64}"},
                })
            messages.append({"role": "user", "content": content})
        else:
            messages.append({"role": "user", "content": prompt})

        return messages

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        images: Optional[List[bytes]] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Generate a chat completion."""
        start_time = datetime.now()

        max_tokens = max_tokens or self.default_max_tokens
        temperature = temperature if temperature is not None else self.default_temperature

        try:
            response = await self.client.chat.completions.create(
                model=self._model_name,
                messages=self._build_messages(prompt, system_prompt, images),
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except APITimeoutError:
            self.logger.error(
                f"{self._backend.value} request timed out after {self.timeout}s "
                f"(model={self._model_name})"
            )
            raise TimeoutError(f"LLM request timed out after {self.timeout}s")
        except APIConnectionError as e:
            raise ConnectionError(f"Cannot reach {self._backend.value} endpoint: {e}")

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""

        usage = response.usage
        prompt_tokens = usage.prompt_tokens if usage else 0
        generated_tokens = usage.completion_tokens if usage else 0

        inference_time = (datetime.now() - start_time).total_seconds()
        self._record_inference(inference_time)
        self.logger.info(
            f"Generated {generated_tokens} tokens in {inference_time:.2f}s "
            f"(backend={self._backend.value}, model={self._model_name}, images={len(images or [])})"
        )

        return {
            "text": text.strip(),
            "prompt_tokens": prompt_tokens,
            "generated_tokens": generated_tokens,
            "model": self._model_name,
            "backend": self._backend.value,
            "inference_time": inference_time,
        }

    async def health_check(self) -> Dict[str, Any]:
        """Check that the endpoint accepts our credentials."""
        try:
            await self.client.models.retrieve(self._model_name)
            return {
                "healthy": True,
                "backend": self._backend.value,
                "model": self._model_name,
                "details": "Endpoint reachable and model available"
            }
        except Exception as e:
            return {
                "healthy": False,
                "backend": self._backend.value,
                "model": self._model_name,
                "details": f"Health check failed: {e}"
            }

    async def close(self):
        if self._client is not None:
            await self._client.close()
            self._client = None
