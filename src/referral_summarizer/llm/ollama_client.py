# ============================================================================
# src/referral_summarizer/llm/ollama_client.py
# ============================================================================
"""
Ollama Client

Uses Ollama for local inference over its HTTP API. Vision-capable models
(llava, minicpm-v, llama3.2-vision) accept base64 images in the
'images' field of /api/generate.

Setup:
    1. Install Ollama: https://ollama.ai
    2. Pull a model: ollama pull llama3.1:8b
    3. Start server: ollama serve (or it runs automatically)
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp

from .base import BaseLLMClient, BackendType
from ..utils.image_utils import encode_image_base64


DEFAULT_OLLAMA_MODEL = "llama3.1:8b"


class OllamaClient(BaseLLMClient):
    """
    Ollama-based inference client.

    Config options:
        ollama_host: Ollama server URL (default: http://localhost:11434)
        model: Model name (default: llama3.1:8b)
        max_tokens: Default max tokens (default: 400)
        temperature: Default temperature (default: 0.2)
        timeout: Per-request timeout in seconds (default: 120)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)

        self.host = self.config.get('ollama_host', 'http://localhost:11434').rstrip('/')
        self._model_name = self.config.get('model', DEFAULT_OLLAMA_MODEL)

        self.default_max_tokens = self.config.get('max_tokens', 400)
        self.default_temperature = self.config.get('temperature', 0.2)
        self.timeout = self.config.get('timeout', 120)

        # HTTP session (created lazily, tied to event loop)
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_loop: Optional[asyncio.AbstractEventLoop] = None

        self.logger.info(f"Initialized Ollama client: {self.host} / {self._model_name}")

    @property
    def backend_type(self) -> BackendType:
        return BackendType.OLLAMA

    @property
    def model_name(self) -> str:
        return self._model_name

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session for current event loop."""
        current_loop = asyncio.get_running_loop()

        needs_new_session = (
            self._session is None
            or self._session.closed
            or self._session_loop is not current_loop
        )

        if needs_new_session:
            if self._session is not None and not self._session.closed:
                await self._session.close()

            timeout = aiohttp.ClientTimeout(
                total=self.timeout,
                sock_connect=30,
            )
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._session_loop = current_loop

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._session_loop = None

    async def health_check(self) -> Dict[str, Any]:
        """Check that the Ollama server is running and the model is pulled."""
        try:
            session = await self._get_session()

            async with session.get(f"{self.host}/api/tags") as response:
                if response.status != 200:
                    return {
                        "healthy": False,
                        "backend": "ollama",
                        "model": self._model_name,
                        "details": f"Ollama server returned status {response.status}"
                    }

                data = await response.json()
                models = [m.get('name', '') for m in data.get('models', [])]

                if not any(self._model_name in m for m in models):
                    return {
                        "healthy": False,
                        "backend": "ollama",
                        "model": self._model_name,
                        "details": f"Model not found. Available: {models}. Run: ollama pull {self._model_name}"
                    }

                return {
                    "healthy": True,
                    "backend": "ollama",
                    "model": self._model_name,
                    "details": "Ollama server running and model available"
                }

        except aiohttp.ClientConnectorError:
            return {
                "healthy": False,
                "backend": "ollama",
                "model": self._model_name,
                "details": f"Cannot connect to Ollama at {self.host}. Is it running? Try: ollama serve"
            }
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            return {
                "healthy": False,
                "backend": "ollama",
                "model": self._model_name,
                "details": f"Health check failed: {e}"
            }

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        images: Optional[List[bytes]] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Generate a response using Ollama's /api/generate."""
        start_time = datetime.now()

        max_tokens = max_tokens or self.default_max_tokens
        temperature = temperature if temperature is not None else self.default_temperature

        payload: Dict[str, Any] = {
            "model": self._model_name,
            "prompt": prompt,
            "stream": False,
            "options": {
                "num_predict": max_tokens,
                "temperature": temperature,
            }
        }
        if system_prompt:
            payload["system"] = system_prompt
        if images:
            payload["images"] = [encode_image_base64(image)[0] for image in images]

        session = await self._get_session()

        async def _do_request():
            async with session.post(f"{self.host}/api/generate", json=payload) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RuntimeError(f"Ollama error ({response.status}): {error_text}")
                return await response.json()

        try:
            data = await asyncio.wait_for(_do_request(), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.logger.error(
                f"Ollama request timed out after {self.timeout}s "
                f"(model={self._model_name}, max_tokens={max_tokens})"
            )
            raise TimeoutError(f"LLM request timed out after {self.timeout}s")
        except aiohttp.ClientConnectorError:
            raise ConnectionError(
                f"Cannot connect to Ollama at {self.host}. "
                "Make sure Ollama is running: ollama serve"
            )

        generated_text = data.get('response', '')
        inference_time = (datetime.now() - start_time).total_seconds()
        generated_tokens = data.get('eval_count', 0)

        self._record_inference(inference_time)
        self.logger.info(
            f"Generated {generated_tokens} tokens in {inference_time:.2f}s "
            f"(model={self._model_name}, images={len(images or [])})"
        )

        return {
            "text": generated_text.strip(),
            "prompt_tokens": data.get('prompt_eval_count', 0),
            "generated_tokens": generated_tokens,
            "model": self._model_name,
            "backend": "ollama",
            "inference_time": inference_time,
        }

    def get_statistics(self) -> Dict[str, Any]:
        stats = super().get_statistics()
        stats["ollama_host"] = self.host
        return stats
