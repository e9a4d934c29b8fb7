# ============================================================================
# src/referral_summarizer/core/classifier.py
# ============================================================================
"""
Input Classifier

Decides which extraction path a request takes and performs cheap upfront
validation, so malformed requests fail before any I/O.

Pure: no network, no filesystem, no model calls.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from .context import InputType, SummarizationRequest
from ..utils.exceptions import EmptyInputError, InvalidUrlError

logger = logging.getLogger(__name__)

_HTTP_URL = TypeAdapter(AnyHttpUrl)


@dataclass(frozen=True)
class ClassifiedRequest:
    mode: InputType
    # Lower-cased extension without the dot; "" when the name has none. File mode only.
    extension: Optional[str] = None


def file_extension(file_name: str) -> str:
    """Text after the final '.', lower-cased; '' when there is no dot."""
    base = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in base:
        return ""
    return base.rsplit(".", 1)[-1].strip().lower()


def _validate_url(url: str) -> None:
    try:
        _HTTP_URL.validate_python(url)
    except ValidationError as e:
        reason = e.errors()[0].get("msg") if e.errors() else None
        raise InvalidUrlError(url, reason) from e


class InputClassifier:
    """Validate a request and pick its extraction mode."""

    def classify(self, request: SummarizationRequest) -> ClassifiedRequest:
        """
        Raises:
            EmptyInputError: required field missing or blank
            InvalidUrlError: URL is not an absolute http(s) URL
        """
        mode = request.input_type

        if mode == InputType.TEXT:
            if not request.text or not request.text.strip():
                raise EmptyInputError("No text provided.")
            return ClassifiedRequest(mode=mode)

        if mode == InputType.FILE:
            if not request.file_bytes or not request.file_name:
                raise EmptyInputError("No file uploaded.")
            return ClassifiedRequest(mode=mode, extension=file_extension(request.file_name))

        if mode == InputType.URL:
            url = (request.url or "").strip()
            if not url:
                raise EmptyInputError("No URL provided.")
            _validate_url(url)
            return ClassifiedRequest(mode=mode)

        if mode == InputType.IMAGE:
            if not request.file_bytes:
                raise EmptyInputError("No image uploaded.")
            return ClassifiedRequest(mode=mode)

        raise EmptyInputError(f"Unknown input type: {mode!r}")
