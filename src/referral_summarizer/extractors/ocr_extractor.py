# ============================================================================
# src/referral_summarizer/extractors/ocr_extractor.py
# ============================================================================
"""
OCR for medical images and photographed documents.

Tesseract (via pytesseract) behind the OCREngine contract. Images are
EXIF-corrected, downscaled and contrast-enhanced before recognition.
"""

import logging
import shutil
from typing import Optional

import pytesseract
from PIL import Image, ImageEnhance, ImageFilter

from .base import OCREngine
from ..utils.image_utils import OCR_MAX_DIMENSION, load_image

logger = logging.getLogger(__name__)


class TesseractOCR(OCREngine):
    """
    Tesseract OCR engine.

    Args:
        timeout: Seconds before the tesseract subprocess is killed
        enhance: Grayscale + contrast + sharpen before recognition
    """

    name = "tesseract"

    def __init__(self, timeout: float = 60.0, enhance: bool = True):
        self.timeout = timeout
        self.enhance = enhance
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def is_available() -> bool:
        """Check if the Tesseract binary is installed."""
        return shutil.which(pytesseract.pytesseract.tesseract_cmd) is not None

    def _enhance_for_ocr(self, image: Image.Image) -> Image.Image:
        gray = image.convert('L') if image.mode != 'L' else image

        enhanced = ImageEnhance.Contrast(gray).enhance(1.5)
        enhanced = enhanced.filter(ImageFilter.SHARPEN)

        self.logger.debug(f"Image enhanced for OCR: {image.size}")
        return enhanced

    def recognize(self, image_bytes: bytes, language: str = "eng") -> str:
        """
        Raises:
            PIL.UnidentifiedImageError: bytes are not an image
            RuntimeError: tesseract timed out
            pytesseract.TesseractError / TesseractNotFoundError
        """
        image = load_image(image_bytes, max_dimension=OCR_MAX_DIMENSION)
        if self.enhance:
            image = self._enhance_for_ocr(image)

        text = pytesseract.image_to_string(image, lang=language, timeout=self.timeout)
        text = text.strip()

        self.logger.info(f"Tesseract recognized {len(text)} chars ({image.size[0]}x{image.size[1]})")
        return text


def create_ocr_engine(enabled: bool = True, timeout: float = 60.0) -> Optional[OCREngine]:
    """Tesseract when enabled and installed, else None (OCR not configured)."""
    if not enabled:
        logger.info("OCR disabled by configuration")
        return None

    if not TesseractOCR.is_available():
        logger.warning("Tesseract OCR not found; image fallback is unavailable")
        return None

    return TesseractOCR(timeout=timeout)
