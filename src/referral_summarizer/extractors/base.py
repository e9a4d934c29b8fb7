# ============================================================================
# src/referral_summarizer/extractors/base.py
# ============================================================================
"""
Backend contracts used by the extractors.

Every concrete backend (python-docx, pypdfium2, Tesseract, aiohttp) sits
behind one of these so tests can swap in fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional


class DocumentTextBackend(ABC):
    """Turns a document's raw bytes into plain text. Blocking."""

    name: str = "document"

    @abstractmethod
    def extract(self, data: bytes) -> str:
        """
        Raises:
            Any library error when the document cannot be opened. The
            FileExtractor substitutes the document placeholder.
        """
        pass


class OCREngine(ABC):
    """Recognizes text in an image. Blocking."""

    name: str = "ocr"

    @abstractmethod
    def recognize(self, image_bytes: bytes, language: str = "eng") -> str:
        pass


@dataclass(frozen=True)
class FetchResponse:
    status: int
    body: bytes
    content_type: Optional[str] = None


# fetch(url, timeout_seconds, max_bytes) -> FetchResponse
Fetcher = Callable[[str, float, int], Awaitable[FetchResponse]]
