# ============================================================================
# src/referral_summarizer/extractors/text_extractor.py
# ============================================================================
"""
Pasted clinical text: trimmed pass-through.
"""

from ..core.context import ExtractedContent, SourceMethod


class TextExtractor:

    async def extract(self, text: str) -> ExtractedContent:
        return ExtractedContent(text=text.strip(), source_method=SourceMethod.DIRECT)
