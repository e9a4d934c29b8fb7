# ============================================================================
# src/referral_summarizer/utils/image_utils.py
# ============================================================================
"""
Image utilities for the referral summarizer.

Provides:
- Image format detection from magic bytes
- EXIF orientation correction (critical for phone camera photos)
- Downscaling for vision models and OCR
- Base64 encoding for vision backends
"""

import base64
import logging
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

# Vision models tile images into fixed-size patches; 1024px keeps tile count low
VISION_MAX_DIMENSION = 1024

# Most OCR engines work best at 1500-2500px
OCR_MAX_DIMENSION = 2500

JPEG_QUALITY = 85


def detect_image_type(data: bytes) -> Optional[str]:
    """
    Detect image type by reading magic bytes.

    Returns:
        Image type string ('png', 'jpeg', 'gif', 'tiff', 'bmp', 'webp', 'heic') or None
    """
    header = data[:32]

    if header.startswith(b'\x89PNG'):
        return 'png'
    if header.startswith(b'\xff\xd8\xff'):
        return 'jpeg'
    if header.startswith(b'GIF87a') or header.startswith(b'GIF89a'):
        return 'gif'
    if header.startswith(b'II*\x00') or header.startswith(b'MM\x00*'):
        return 'tiff'
    if header.startswith(b'BM'):
        return 'bmp'
    if header.startswith(b'RIFF') and header[8:12] == b'WEBP':
        return 'webp'
    # HEIC/HEIF: ftyp box with heic/heix/mif1 brand
    if len(header) >= 12 and header[4:8] == b'ftyp':
        brand = header[8:12]
        if brand in (b'heic', b'heix', b'mif1', b'hevc'):
            return 'heic'

    return None


def load_image(
    data: bytes,
    max_dimension: int = OCR_MAX_DIMENSION,
    ensure_rgb: bool = True,
) -> Image.Image:
    """
    Load image bytes with the corrections needed for OCR and vision.

    1. EXIF orientation correction
    2. Downscaling oversized images
    3. Color mode conversion to RGB

    Raises:
        PIL.UnidentifiedImageError: bytes are not a readable image
    """
    image = Image.open(BytesIO(data))

    # Phones store landscape pixels plus a rotate tag; without this OCR sees sideways text
    try:
        image = ImageOps.exif_transpose(image)
    except Exception as e:
        logger.warning(f"EXIF transpose failed (non-fatal): {e}")

    w, h = image.size
    if max(w, h) > max_dimension:
        scale = max_dimension / max(w, h)
        new_w, new_h = int(w * scale), int(h * scale)
        image = image.resize((new_w, new_h), Image.LANCZOS)
        logger.info(f"Resized {w}x{h} -> {new_w}x{new_h}")

    if ensure_rgb and image.mode not in ('RGB', 'L'):
        image = image.convert('RGB')

    return image


def encode_image_base64(data: bytes, max_dimension: int = VISION_MAX_DIMENSION) -> Tuple[str, str]:
    """
    Prepare image bytes for a vision backend.

    Returns:
        (base64_payload, mime_type). Falls back to the original bytes when
        Pillow cannot re-encode the image.
    """
    try:
        image = load_image(data, max_dimension=max_dimension, ensure_rgb=True)
        buf = BytesIO()
        image.save(buf, format='JPEG', quality=JPEG_QUALITY)
        return base64.b64encode(buf.getvalue()).decode('utf-8'), 'image/jpeg'
    except Exception as e:
        logger.warning(f"Image re-encode failed ({e}), sending original")
        kind = detect_image_type(data) or 'jpeg'
        return base64.b64encode(data).decode('utf-8'), f'image/{kind}'
