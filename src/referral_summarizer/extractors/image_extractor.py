# ============================================================================
# src/referral_summarizer/extractors/image_extractor.py
# ============================================================================
"""
Medical image extraction.

Ordered strategy list, evaluated sequentially with short-circuit on the
first success:
1. Vision model: describes the image directly. Its output is the final
   summary (method "vision"); no text summarization follows.
2. OCR: recognizes any text in the image. Output goes through the normal
   text summarization path.

Strategies never run concurrently.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .base import OCREngine
from ..core.context import ExtractedContent, SourceMethod
from ..core.prompts import VISION_PROMPT
from ..llm.base import BaseLLMClient
from ..utils.exceptions import ImageProcessingError

logger = logging.getLogger(__name__)

OCR_PLACEHOLDER = "No readable text detected in image."


class StrategyUnavailable(Exception):
    """The strategy has no configured backend."""
    pass


class ImageStrategy(ABC):
    name: str = "image"

    @abstractmethod
    async def run(self, image_bytes: bytes) -> ExtractedContent:
        """Return content or raise; the extractor decides what happens next."""
        pass


class VisionStrategy(ImageStrategy):
    name = "vision"

    def __init__(
        self,
        client: Optional[BaseLLMClient],
        max_tokens: int = 500,
        temperature: float = 0.2,
        timeout: float = 60.0,
        prompt: str = VISION_PROMPT,
    ):
        self.client = client
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.prompt = prompt

    async def run(self, image_bytes: bytes) -> ExtractedContent:
        if self.client is None:
            raise StrategyUnavailable("no vision backend configured")

        response = await asyncio.wait_for(
            self.client.generate(
                self.prompt,
                images=[image_bytes],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            ),
            timeout=self.timeout,
        )

        text = (response.get("text") or "").strip()
        if not text:
            raise ValueError("vision model returned empty text")

        return ExtractedContent(text=text, source_method=SourceMethod.VISION)


class OcrStrategy(ImageStrategy):
    name = "ocr"

    def __init__(self, engine: Optional[OCREngine], language: str = "eng", timeout: float = 60.0):
        self.engine = engine
        self.language = language
        self.timeout = timeout

    async def run(self, image_bytes: bytes) -> ExtractedContent:
        if self.engine is None:
            raise StrategyUnavailable("no OCR backend configured")

        text = await asyncio.wait_for(
            asyncio.to_thread(self.engine.recognize, image_bytes, self.language),
            timeout=self.timeout,
        )

        text = (text or "").strip()
        if not text:
            return ExtractedContent(
                text=OCR_PLACEHOLDER,
                source_method=SourceMethod.OCR,
                is_placeholder=True,
            )

        return ExtractedContent(text=text, source_method=SourceMethod.OCR)


class ImageExtractor:
    """
    Runs image strategies in order until one succeeds.

    Failures of every strategy but the last are logged and absorbed. If
    none succeeds, ImageProcessingError lists what each attempt hit.
    """

    def __init__(self, strategies: List[ImageStrategy]):
        self.strategies = strategies
        self.logger = logging.getLogger(__name__)

    async def extract(self, image_bytes: bytes) -> ExtractedContent:
        attempts = []

        for strategy in self.strategies:
            try:
                content = await strategy.run(image_bytes)
            except StrategyUnavailable as e:
                self.logger.info(f"Skipping {strategy.name}: {e}")
                attempts.append(f"{strategy.name}: {e}")
                continue
            except asyncio.TimeoutError:
                self.logger.warning(f"{strategy.name} timed out; trying next strategy")
                attempts.append(f"{strategy.name}: timed out")
                continue
            except Exception as e:
                self.logger.warning(f"{strategy.name} failed ({e.__class__.__name__}: {e}); trying next strategy")
                attempts.append(f"{strategy.name}: {e}")
                continue

            self.logger.info(
                f"Image processed by {strategy.name} "
                f"({content.char_count} chars{', placeholder' if content.is_placeholder else ''})"
            )
            return content

        raise ImageProcessingError(
            "Could not process the image. " + "; ".join(attempts)
        )


def build_image_extractor(
    vision_client: Optional[BaseLLMClient],
    ocr_engine: Optional[OCREngine],
    vision_max_tokens: int = 500,
    vision_temperature: float = 0.2,
    vision_timeout: float = 60.0,
    ocr_language: str = "eng",
    ocr_timeout: float = 60.0,
) -> ImageExtractor:
    """Standard [vision, ocr] chain."""
    return ImageExtractor([
        VisionStrategy(
            vision_client,
            max_tokens=vision_max_tokens,
            temperature=vision_temperature,
            timeout=vision_timeout,
        ),
        OcrStrategy(ocr_engine, language=ocr_language, timeout=ocr_timeout),
    ])
