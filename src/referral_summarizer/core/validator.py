# ============================================================================
# src/referral_summarizer/core/validator.py
# ============================================================================
"""
Content Validator

Single choke point between extraction and summarization: nothing blank or
below the content floor reaches the completion model, whatever its source.
"""

import logging

from .context import ExtractedContent
from ..utils.exceptions import NoUsableContentError


class ContentValidator:

    def __init__(self, min_content_chars: int = 1):
        self.min_content_chars = max(1, min_content_chars)
        self.logger = logging.getLogger(__name__)

    def validate(self, content: ExtractedContent) -> ExtractedContent:
        """
        Raises:
            NoUsableContentError: blank, or shorter than min_content_chars
        """
        text = content.text.strip() if content.text else ""

        if not text:
            raise NoUsableContentError("No usable content was extracted from the input.")

        if len(text) < self.min_content_chars:
            raise NoUsableContentError(
                f"Extracted content is too short to summarize "
                f"({len(text)} characters, minimum {self.min_content_chars})."
            )

        self.logger.debug(
            f"Content accepted: {len(text)} chars via {content.source_method.value}"
        )
        return content
