# ============================================================================
# FILE: tests/unit/test_extractors.py
# ============================================================================
"""
Unit tests for text, file, URL and image extractors
"""

import asyncio

import aiohttp
import pytest

from referral_summarizer.core.context import SourceMethod, SummarizationRequest
from referral_summarizer.extractors.file_extractor import (
    FileExtractor,
    PDF_PLACEHOLDER,
    WORD_PLACEHOLDER,
)
from referral_summarizer.extractors.image_extractor import (
    OCR_PLACEHOLDER,
    build_image_extractor,
)
from referral_summarizer.extractors.ocr_extractor import TesseractOCR, create_ocr_engine
from referral_summarizer.extractors.text_extractor import TextExtractor
from referral_summarizer.extractors.url_extractor import UrlExtractor, html_to_text
from referral_summarizer.llm.base import BackendType
from referral_summarizer.utils.exceptions import (
    FetchFailedError,
    ImageProcessingError,
    InsufficientContentError,
    NoUsableContentError,
    UnsupportedFileTypeError,
)


# ============================================================================
# TEXT EXTRACTOR TESTS
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("raw", [
    "BP 180/100",
    "  chest pain x2h  \n",
    "\tNo prior cardiac history.\n\n",
])
async def test_text_round_trip_is_trimmed_input(raw):
    """Extracted text equals the trimmed input"""
    content = await TextExtractor().extract(raw)
    assert content.text == raw.strip()
    assert content.source_method == SourceMethod.DIRECT


# ============================================================================
# FILE EXTRACTOR TESTS
# ============================================================================

@pytest.mark.asyncio
async def test_plain_text_file():
    content = await FileExtractor().extract("  Référé pour douleur thoracique \n".encode("utf-8"), "txt")
    assert content.text == "Référé pour douleur thoracique"
    assert content.source_method == SourceMethod.DIRECT


@pytest.mark.asyncio
async def test_file_without_extension_is_plain_text():
    content = await FileExtractor().extract(b"HR 104 bpm", "")
    assert content.text == "HR 104 bpm"


@pytest.mark.asyncio
async def test_undecodable_bytes_are_replaced():
    """Invalid UTF-8 never aborts a text upload"""
    content = await FileExtractor().extract(b"BP \xff\xfe 120/80", "txt")
    assert "BP" in content.text and "120/80" in content.text


@pytest.mark.asyncio
async def test_blank_text_file_is_no_usable_content():
    with pytest.raises(NoUsableContentError):
        await FileExtractor().extract(b"   \n\n  ", "txt")


@pytest.mark.asyncio
async def test_docx_paragraphs_and_tables(docx_factory):
    """Word extraction keeps paragraphs and table rows"""
    data = docx_factory(
        ["Referral to cardiology", "Chest pain for two hours, no prior cardiac history."],
        table_rows=[["BP", "180/100"], ["HR", "104"]],
    )

    content = await FileExtractor().extract(data, "docx")

    assert content.source_method == SourceMethod.DOCUMENT_PARSE
    assert content.is_placeholder is False
    assert "Referral to cardiology" in content.text
    assert "BP | 180/100" in content.text


@pytest.mark.asyncio
async def test_empty_docx_yields_placeholder(docx_factory):
    """Near-empty Word output becomes the documented placeholder"""
    content = await FileExtractor().extract(docx_factory([]), "docx")

    assert content.text == WORD_PLACEHOLDER
    assert content.is_placeholder is True


@pytest.mark.asyncio
async def test_short_docx_below_floor_yields_placeholder(docx_factory):
    extractor = FileExtractor(document_min_chars=20)
    content = await extractor.extract(docx_factory(["BP ok"]), "docx")
    assert content.is_placeholder is True


@pytest.mark.asyncio
async def test_legacy_ole2_doc_yields_placeholder(legacy_doc_bytes):
    """Word 97-2003 files are OLE2 containers python-docx cannot open"""
    content = await FileExtractor().extract(legacy_doc_bytes, "doc")

    assert content.text == WORD_PLACEHOLDER
    assert content.is_placeholder is True
    assert content.source_method == SourceMethod.DOCUMENT_PARSE


@pytest.mark.asyncio
async def test_corrupt_pdf_yields_placeholder():
    content = await FileExtractor().extract(b"%PDF-1.7 truncated", "pdf")

    assert content.text == PDF_PLACEHOLDER
    assert content.is_placeholder is True


@pytest.mark.asyncio
async def test_legacy_doc_upload_still_summarized(make_pipeline, legacy_doc_bytes):
    result = await make_pipeline().run(SummarizationRequest.from_file(legacy_doc_bytes, "referral.doc"))

    assert result.success is True
    assert result.source_method == SourceMethod.DOCUMENT_PARSE


@pytest.mark.asyncio
async def test_pdf_text_layer(pdf_factory):
    data = pdf_factory(["Discharge summary", "Troponin pending, ECG ST depression V4-V6"])

    content = await FileExtractor().extract(data, "pdf")

    assert content.source_method == SourceMethod.DOCUMENT_PARSE
    assert "Troponin pending" in content.text


@pytest.mark.asyncio
async def test_pdf_without_text_layer_yields_placeholder(pdf_factory):
    content = await FileExtractor().extract(pdf_factory([]), "pdf")

    assert content.text == PDF_PLACEHOLDER
    assert content.is_placeholder is True


@pytest.mark.asyncio
@pytest.mark.parametrize("extension", ["txt", "", "docx", "doc", "pdf"])
async def test_supported_extensions_never_return_empty(extension, docx_factory, pdf_factory, legacy_doc_bytes):
    """Every supported type yields text or a placeholder"""
    payloads = {
        "txt": b"note",
        "": b"note",
        "docx": docx_factory([]),
        "doc": legacy_doc_bytes,
        "pdf": pdf_factory([]),
    }

    content = await FileExtractor().extract(payloads[extension], extension)
    assert content.text.strip()


@pytest.mark.asyncio
@pytest.mark.parametrize("extension", ["xlsx", "exe", "odt"])
async def test_unsupported_extension_names_extension(extension):
    with pytest.raises(UnsupportedFileTypeError) as exc_info:
        await FileExtractor().extract(b"data", extension)

    assert exc_info.value.extension == extension
    assert f".{extension}" in exc_info.value.detail
    assert "DOCX" in exc_info.value.detail


# ============================================================================
# URL EXTRACTOR TESTS
# ============================================================================

def test_html_to_text_drops_invisible_markup(referral_page_html):
    text = html_to_text(referral_page_html)

    assert "BP 180/100" in text
    assert "tracking" not in text
    assert "color: red" not in text
    assert "Enable JavaScript" not in text
    assert "hidden template text" not in text
    assert "  " not in text


def test_html_head_is_not_page_text():
    body = (
        b"<html><head><title>Login required - Hospital Portal</title>"
        b"<meta name='description' content='portal'></head></html>"
    )
    assert html_to_text(body) == ""


def test_html_without_body_keeps_visible_text():
    body = b"<title>Ward 4B</title><p>BP 180/100, chest pain x2h</p>"
    assert html_to_text(body) == "BP 180/100, chest pain x2h"


@pytest.mark.asyncio
async def test_head_only_page_is_insufficient_content(fetcher_factory):
    page = b"<html><head><title>Login required - Hospital Portal for referring physicians</title></head></html>"
    extractor = UrlExtractor(min_content_chars=10, fetcher=fetcher_factory(status=200, body=page))

    with pytest.raises(InsufficientContentError):
        await extractor.extract("https://portal.example.org/referral/42")


@pytest.mark.asyncio
async def test_url_extraction(fetcher_factory, referral_page_html):
    fetcher = fetcher_factory(status=200, body=referral_page_html)
    extractor = UrlExtractor(fetch_timeout=7.0, max_bytes=1024 * 1024, fetcher=fetcher)

    content = await extractor.extract("https://example.org/referral")

    assert content.source_method == SourceMethod.WEB_SCRAPE
    assert "chest pain" in content.text
    assert fetcher.calls == [{"url": "https://example.org/referral", "timeout": 7.0, "max_bytes": 1024 * 1024}]


@pytest.mark.asyncio
async def test_short_page_is_insufficient_content(fetcher_factory):
    fetcher = fetcher_factory(body=b"<html><body>Loading...</body></html>")

    with pytest.raises(InsufficientContentError) as exc_info:
        await UrlExtractor(min_content_chars=50, fetcher=fetcher).extract("https://example.org")

    assert exc_info.value.length == len("Loading...")


@pytest.mark.asyncio
async def test_non_2xx_is_fetch_failed_with_status(fetcher_factory):
    fetcher = fetcher_factory(status=404, body=b"<html><body>Not found</body></html>")

    with pytest.raises(FetchFailedError) as exc_info:
        await UrlExtractor(fetcher=fetcher).extract("https://example.org/missing")

    assert exc_info.value.status_code == 404
    assert "HTTP 404" in exc_info.value.detail


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    aiohttp.ClientConnectionError("connection refused"),
    asyncio.TimeoutError(),
])
async def test_transport_errors_are_fetch_failed_without_status(fetcher_factory, error):
    fetcher = fetcher_factory(error=error)

    with pytest.raises(FetchFailedError) as exc_info:
        await UrlExtractor(fetcher=fetcher).extract("https://example.org")

    assert exc_info.value.status_code is None


# ============================================================================
# IMAGE EXTRACTOR TESTS
# ============================================================================

@pytest.mark.asyncio
async def test_vision_success_skips_ocr(llm_factory, ocr_factory, png_bytes):
    """OCR is never invoked once vision succeeds"""
    vision = llm_factory(text="- Chest radiograph\n- No pneumothorax", backend=BackendType.OPENAI)
    ocr = ocr_factory(text="should not be used")
    extractor = build_image_extractor(vision, ocr, vision_max_tokens=500, vision_temperature=0.2)

    content = await extractor.extract(png_bytes)

    assert content.source_method == SourceMethod.VISION
    assert vision.call_count == 1
    assert ocr.call_count == 0
    assert vision.calls[0]["images"] == [png_bytes]
    assert vision.calls[0]["max_tokens"] == 500
    assert vision.calls[0]["temperature"] == 0.2


@pytest.mark.asyncio
async def test_vision_failure_falls_back_to_ocr_once(llm_factory, ocr_factory, png_bytes):
    vision = llm_factory(error=RuntimeError("rate limited"))
    ocr = ocr_factory(text="Hb 9.1 g/dL")

    content = await build_image_extractor(vision, ocr).extract(png_bytes)

    assert content.source_method == SourceMethod.OCR
    assert content.text == "Hb 9.1 g/dL"
    assert ocr.call_count == 1


@pytest.mark.asyncio
async def test_vision_timeout_falls_back_to_ocr(llm_factory, ocr_factory, png_bytes):
    vision = llm_factory(delay=1.0)
    ocr = ocr_factory(text="WBC 14.2")

    content = await build_image_extractor(vision, ocr, vision_timeout=0.05).extract(png_bytes)

    assert content.source_method == SourceMethod.OCR
    assert ocr.call_count == 1


@pytest.mark.asyncio
async def test_blank_vision_reply_falls_back_to_ocr(llm_factory, ocr_factory, png_bytes):
    vision = llm_factory(text="   ")
    ocr = ocr_factory(text="K 5.9")

    content = await build_image_extractor(vision, ocr).extract(png_bytes)
    assert content.source_method == SourceMethod.OCR


@pytest.mark.asyncio
async def test_no_vision_uses_ocr(ocr_factory, png_bytes):
    ocr = ocr_factory(text="Na 128")
    content = await build_image_extractor(None, ocr, ocr_language="fra").extract(png_bytes)

    assert content.text == "Na 128"
    assert ocr.calls == ["fra"]


@pytest.mark.asyncio
async def test_blank_ocr_yields_placeholder(ocr_factory, png_bytes):
    content = await build_image_extractor(None, ocr_factory(text="  ")).extract(png_bytes)

    assert content.text == OCR_PLACEHOLDER
    assert content.is_placeholder is True


@pytest.mark.asyncio
async def test_vision_fails_and_no_ocr_is_image_processing_failed(llm_factory, png_bytes):
    vision = llm_factory(error=RuntimeError("model overloaded"))

    with pytest.raises(ImageProcessingError) as exc_info:
        await build_image_extractor(vision, None).extract(png_bytes)

    assert "no OCR backend configured" in exc_info.value.detail


@pytest.mark.asyncio
async def test_both_backends_fail(llm_factory, ocr_factory, png_bytes):
    vision = llm_factory(error=RuntimeError("model overloaded"))
    ocr = ocr_factory(error=RuntimeError("tesseract crashed"))

    with pytest.raises(ImageProcessingError):
        await build_image_extractor(vision, ocr).extract(png_bytes)

    assert vision.call_count == 1
    assert ocr.call_count == 1


@pytest.mark.asyncio
async def test_nothing_configured_is_image_processing_failed(png_bytes):
    with pytest.raises(ImageProcessingError):
        await build_image_extractor(None, None).extract(png_bytes)


# ============================================================================
# TESSERACT TESTS
# ============================================================================

def test_tesseract_recognize_passes_language_and_timeout(monkeypatch, png_bytes):
    """Image is preprocessed and handed to pytesseract with our limits"""
    captured = {}

    def fake_image_to_string(image, lang=None, timeout=None):
        captured.update({"mode": image.mode, "lang": lang, "timeout": timeout})
        return "  Creatinine 180 umol/L \n"

    monkeypatch.setattr(
        "referral_summarizer.extractors.ocr_extractor.pytesseract.image_to_string",
        fake_image_to_string,
    )

    text = TesseractOCR(timeout=30).recognize(png_bytes, language="eng")

    assert text == "Creatinine 180 umol/L"
    assert captured == {"mode": "L", "lang": "eng", "timeout": 30}


def test_create_ocr_engine_disabled():
    assert create_ocr_engine(enabled=False) is None


def test_create_ocr_engine_without_binary(monkeypatch):
    monkeypatch.setattr(TesseractOCR, "is_available", staticmethod(lambda: False))
    assert create_ocr_engine(enabled=True) is None


def test_create_ocr_engine_with_binary(monkeypatch):
    monkeypatch.setattr(TesseractOCR, "is_available", staticmethod(lambda: True))
    engine = create_ocr_engine(enabled=True, timeout=12)
    assert isinstance(engine, TesseractOCR)
    assert engine.timeout == 12
