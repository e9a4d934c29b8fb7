# ============================================================================
# src/referral_summarizer/extractors/__init__.py
# ============================================================================
"""
Extraction Module

One extractor per input mode:
- Text: trimmed pass-through
- File: plain text, Word (python-docx), PDF (pypdfium2)
- URL: aiohttp fetch + BeautifulSoup visible text
- Image: vision model, then Tesseract OCR
"""

from .base import DocumentTextBackend, OCREngine, FetchResponse, Fetcher
from .text_extractor import TextExtractor
from .file_extractor import (
    FileExtractor,
    DocxTextBackend,
    PdfTextBackend,
    SUPPORTED_EXTENSIONS,
    WORD_PLACEHOLDER,
    PDF_PLACEHOLDER,
)
from .url_extractor import UrlExtractor, fetch_url, html_to_text
from .ocr_extractor import TesseractOCR, create_ocr_engine
from .image_extractor import (
    ImageExtractor,
    ImageStrategy,
    VisionStrategy,
    OcrStrategy,
    StrategyUnavailable,
    build_image_extractor,
    OCR_PLACEHOLDER,
)

__all__ = [
    "DocumentTextBackend",
    "OCREngine",
    "FetchResponse",
    "Fetcher",
    "TextExtractor",
    "FileExtractor",
    "DocxTextBackend",
    "PdfTextBackend",
    "SUPPORTED_EXTENSIONS",
    "WORD_PLACEHOLDER",
    "PDF_PLACEHOLDER",
    "UrlExtractor",
    "fetch_url",
    "html_to_text",
    "TesseractOCR",
    "create_ocr_engine",
    "ImageExtractor",
    "ImageStrategy",
    "VisionStrategy",
    "OcrStrategy",
    "StrategyUnavailable",
    "build_image_extractor",
    "OCR_PLACEHOLDER",
]
