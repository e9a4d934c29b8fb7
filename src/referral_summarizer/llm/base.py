# ============================================================================
# src/referral_summarizer/llm/base.py
# ============================================================================
"""
Base LLM Client Interface

Defines the abstract interface that every completion/vision backend must
implement. Supported backends:
- openai: OpenAI Chat Completions (GPT-4o, vision capable)
- groq: Groq's OpenAI-compatible endpoint (Llama text completion)
- ollama: Ollama server (local models, vision via the images field)
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional
import logging


class BackendType(Enum):
    """Supported inference backends."""
    OPENAI = "openai"
    GROQ = "groq"
    OLLAMA = "ollama"


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM inference clients.

    All backends must implement:
    - generate(): Async text generation, optionally with images
    - health_check(): Verify backend is available
    - close(): Release network resources
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

        # Common statistics
        self._inference_count = 0
        self._total_inference_time = 0.0

    @property
    @abstractmethod
    def backend_type(self) -> BackendType:
        """Return the backend type."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier."""
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        images: Optional[List[bytes]] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Generate a response.

        Args:
            prompt: User prompt
            system_prompt: Optional system instruction
            images: Optional raw image bytes (vision-capable models only)
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 = deterministic)

        Returns:
            {
                "text": str,              # Generated text
                "prompt_tokens": int,     # Input token count
                "generated_tokens": int,  # Output token count
                "model": str,             # Model identifier
                "backend": str,           # Backend type
                "inference_time": float,  # Seconds
            }
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """
        Check if the backend is available and ready.

        Returns:
            {
                "healthy": bool,
                "backend": str,
                "model": str,
                "details": str
            }
        """
        pass

    async def close(self):
        """Release network resources. Default: nothing to release."""
        return None

    def _record_inference(self, inference_time: float):
        self._inference_count += 1
        self._total_inference_time += inference_time

    def get_statistics(self) -> Dict[str, Any]:
        """Get inference statistics."""
        avg_time = (
            self._total_inference_time / self._inference_count
            if self._inference_count > 0
            else 0.0
        )

        return {
            "backend": self.backend_type.value,
            "model": self.model_name,
            "inference_count": self._inference_count,
            "total_inference_time": self._total_inference_time,
            "average_inference_time": avg_time,
        }
