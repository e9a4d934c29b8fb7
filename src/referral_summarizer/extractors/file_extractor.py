# ============================================================================
# src/referral_summarizer/extractors/file_extractor.py
# ============================================================================
"""
Uploaded file extraction.

Dispatch on extension:
1. txt / no extension: UTF-8 decode (undecodable bytes replaced)
2. doc / docx: python-docx (paragraphs + table cells); legacy OLE2 .doc
   files python-docx cannot open get the Word placeholder
3. pdf: pypdfium2 text layer
4. anything else: UnsupportedFileTypeError

Near-empty Word/PDF output is replaced by a fixed placeholder sentence so
the summarizer can still report "nothing found" instead of the request
failing.
"""

import asyncio
import logging
from io import BytesIO
from typing import Optional

import pypdfium2
from docx import Document

from .base import DocumentTextBackend
from ..core.context import ExtractedContent, SourceMethod
from ..utils.exceptions import NoUsableContentError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

PLAIN_TEXT_EXTENSIONS = ("txt", "")
WORD_EXTENSIONS = ("doc", "docx")
PDF_EXTENSIONS = ("pdf",)
SUPPORTED_EXTENSIONS = ("txt",) + WORD_EXTENSIONS + PDF_EXTENSIONS

WORD_PLACEHOLDER = "No readable text could be extracted from this Word document."
PDF_PLACEHOLDER = "No readable text could be extracted from this PDF document."


class DocxTextBackend(DocumentTextBackend):
    """Word documents via python-docx."""

    name = "python-docx"

    def extract(self, data: bytes) -> str:
        document = Document(BytesIO(data))

        parts = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]

        # Referral letters often keep vitals and medication lists in tables
        for table in document.tables:
            for row in table.rows:
                cells = [(c.text or "").strip() for c in row.cells]
                row_text = " | ".join(c for c in cells if c)
                if row_text:
                    parts.append(row_text)

        return "\n".join(parts)


class PdfTextBackend(DocumentTextBackend):
    """PDF text layer via pypdfium2. Scanned PDFs come back empty."""

    name = "pypdfium2"

    def extract(self, data: bytes) -> str:
        pdf = pypdfium2.PdfDocument(data)
        try:
            texts = []
            for page_num in range(len(pdf)):
                page = pdf[page_num]
                textpage = page.get_textpage()
                text = textpage.get_text_range()
                texts.append(text.strip() if text else "")
                textpage.close()
                page.close()
        finally:
            pdf.close()

        return "\n\n".join(t for t in texts if t)


class FileExtractor:
    """
    Extract plain text from an uploaded file.

    Args:
        document_min_chars: Below this, Word/PDF output becomes a placeholder
        word_backend: Backend for .doc/.docx (default: python-docx)
        pdf_backend: Backend for .pdf (default: pypdfium2)
    """

    def __init__(
        self,
        document_min_chars: int = 20,
        word_backend: Optional[DocumentTextBackend] = None,
        pdf_backend: Optional[DocumentTextBackend] = None,
    ):
        self.document_min_chars = document_min_chars
        self.word_backend = word_backend or DocxTextBackend()
        self.pdf_backend = pdf_backend or PdfTextBackend()
        self.logger = logging.getLogger(__name__)

    async def extract(self, file_bytes: bytes, extension: str) -> ExtractedContent:
        """
        Args:
            file_bytes: Raw upload
            extension: Lower-cased extension without the dot ("" if none)

        Raises:
            UnsupportedFileTypeError: no extractor for the extension
            NoUsableContentError: blank text file
        """
        if extension in PLAIN_TEXT_EXTENSIONS:
            return self._extract_plain_text(file_bytes)

        if extension in WORD_EXTENSIONS:
            return await self._extract_document(
                file_bytes, extension, self.word_backend, WORD_PLACEHOLDER, "Word document"
            )

        if extension in PDF_EXTENSIONS:
            return await self._extract_document(
                file_bytes, extension, self.pdf_backend, PDF_PLACEHOLDER, "PDF document"
            )

        raise UnsupportedFileTypeError(extension, SUPPORTED_EXTENSIONS)

    def _extract_plain_text(self, file_bytes: bytes) -> ExtractedContent:
        text = file_bytes.decode("utf-8", errors="replace").strip()
        if not text:
            raise NoUsableContentError("The uploaded text file is empty.")
        return ExtractedContent(text=text, source_method=SourceMethod.DIRECT)

    async def _extract_document(
        self,
        file_bytes: bytes,
        extension: str,
        backend: DocumentTextBackend,
        placeholder: str,
        label: str,
    ) -> ExtractedContent:
        try:
            text = await asyncio.to_thread(backend.extract, file_bytes)
        except Exception as e:
            # Legacy OLE2 .doc files, encrypted or truncated uploads
            self.logger.warning(f"{backend.name} could not open .{extension} upload as a {label}: {e}")
            return self._placeholder(placeholder)

        text = (text or "").strip()
        if len(text) < self.document_min_chars:
            self.logger.info(
                f"{backend.name} produced {len(text)} chars from .{extension} "
                f"(< {self.document_min_chars}); using placeholder"
            )
            return self._placeholder(placeholder)

        self.logger.debug(f"{backend.name} extracted {len(text)} chars from .{extension}")
        return ExtractedContent(text=text, source_method=SourceMethod.DOCUMENT_PARSE)

    @staticmethod
    def _placeholder(text: str) -> ExtractedContent:
        return ExtractedContent(
            text=text,
            source_method=SourceMethod.DOCUMENT_PARSE,
            is_placeholder=True,
        )
