# ============================================================================
# src/referral_summarizer/core/context/request.py
# ============================================================================
"""
Summarization request
- One immutable value per call
- Only the fields relevant to the input type are populated
"""

from dataclasses import dataclass
from typing import Optional

from .enums import InputType


@dataclass(frozen=True)
class SummarizationRequest:
    input_type: InputType
    text: Optional[str] = None
    file_bytes: Optional[bytes] = None
    file_name: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def from_text(cls, text: str) -> "SummarizationRequest":
        return cls(input_type=InputType.TEXT, text=text)

    @classmethod
    def from_file(cls, file_bytes: bytes, file_name: str) -> "SummarizationRequest":
        return cls(input_type=InputType.FILE, file_bytes=file_bytes, file_name=file_name)

    @classmethod
    def from_url(cls, url: str) -> "SummarizationRequest":
        return cls(input_type=InputType.URL, url=url)

    @classmethod
    def from_image(cls, image_bytes: bytes, file_name: Optional[str] = None) -> "SummarizationRequest":
        return cls(input_type=InputType.IMAGE, file_bytes=image_bytes, file_name=file_name)

    def __repr__(self) -> str:
        # Never dump raw payloads (PHI, large byte strings) into logs
        size = len(self.file_bytes) if self.file_bytes else 0
        return (
            f"SummarizationRequest(input_type={self.input_type.value}, "
            f"text_chars={len(self.text or '')}, file_bytes={size}, "
            f"file_name={self.file_name!r}, url={self.url!r})"
        )
