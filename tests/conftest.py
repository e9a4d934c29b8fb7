# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.

Every external backend (completion model, vision model, OCR, web fetch)
is replaced by an in-process fake that counts its calls.
"""

import asyncio
from io import BytesIO
from typing import Any, Callable, Dict, List, Optional, Union

import pytest
from PIL import Image, ImageDraw

from referral_summarizer.core.config import PipelineConfig
from referral_summarizer.core.metrics import MetricsRecorder
from referral_summarizer.core.pipeline import SummarizationPipeline
from referral_summarizer.core.tagger import ConfidencePolicy, PolicyEntry
from referral_summarizer.extractors.base import FetchResponse, OCREngine
from referral_summarizer.llm.base import BackendType, BaseLLMClient


# ============================================================================
# FAKE BACKENDS
# ============================================================================

class FakeLLMClient(BaseLLMClient):
    """
    Deterministic completion/vision backend.

    text: fixed reply, or a callable receiving the prompt
    error: raised from generate() when set
    delay: seconds to sleep before replying
    """

    def __init__(
        self,
        text: Union[str, Callable[[str], str]] = "- Summary bullet",
        error: Optional[BaseException] = None,
        delay: float = 0.0,
        backend: BackendType = BackendType.GROQ,
        model: str = "fake-model",
    ):
        super().__init__({})
        self.text = text
        self.error = error
        self.delay = delay
        self._backend = backend
        self._model = model
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    @property
    def backend_type(self) -> BackendType:
        return self._backend

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def generate(self, prompt, system_prompt=None, images=None, max_tokens=None, temperature=None):
        self.calls.append({
            "prompt": prompt,
            "system_prompt": system_prompt,
            "images": images,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

        text = self.text(prompt) if callable(self.text) else self.text
        return {
            "text": text,
            "prompt_tokens": len(prompt.split()),
            "generated_tokens": len(text.split()),
            "model": self._model,
            "backend": self._backend.value,
            "inference_time": 0.0,
        }

    async def health_check(self):
        return {"healthy": True, "backend": self._backend.value, "model": self._model, "details": "fake"}

    async def close(self):
        self.closed = True


class FakeOCR(OCREngine):
    name = "fake-ocr"

    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[str] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def recognize(self, image_bytes: bytes, language: str = "eng") -> str:
        self.calls.append(language)
        if self.error is not None:
            raise self.error
        return self.text


class FakeFetcher:
    """Records calls; replies with a fixed status/body or raises."""

    def __init__(self, status: int = 200, body: bytes = b"", error: Optional[BaseException] = None):
        self.status = status
        self.body = body
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def __call__(self, url: str, timeout: float, max_bytes: int) -> FetchResponse:
        self.calls.append({"url": url, "timeout": timeout, "max_bytes": max_bytes})
        if self.error is not None:
            raise self.error
        return FetchResponse(status=self.status, body=self.body, content_type="text/html")


# ============================================================================
# SAMPLE INPUTS
# ============================================================================

@pytest.fixture
def sample_referral_text():
    """Emergency referral note"""
    return """
    Patient: Jane Roe, 58F, MRN 448812
    Presenting complaint: central chest pain x2h radiating to left arm
    Vitals: BP 180/100, HR 104, SpO2 95% RA, T 36.8
    PMH: type 2 diabetes. No prior cardiac history.
    Meds: metformin 500 mg BD. Allergies: penicillin.
    ECG: ST depression V4-V6. Troponin pending.
    Plan: transfer to cardiology for urgent assessment.
    """


@pytest.fixture
def referral_page_html(sample_referral_text):
    """A web page carrying the referral note plus invisible markup"""
    return f"""
    <html>
      <head>
        <title>Referral</title>
        <style>body {{ color: red; }}</style>
        <script>var tracking = "should never be summarized";</script>
      </head>
      <body>
        <noscript>Enable JavaScript</noscript>
        <h1>Referral letter</h1>
        <p>{sample_referral_text}</p>
        <template><p>hidden template text</p></template>
      </body>
    </html>
    """.encode("utf-8")


def make_docx(paragraphs: List[str], table_rows: Optional[List[List[str]]] = None) -> bytes:
    from docx import Document

    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    if table_rows:
        table = document.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for r, row in enumerate(table_rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value

    buf = BytesIO()
    document.save(buf)
    return buf.getvalue()


def make_pdf(lines: List[str]) -> bytes:
    from reportlab.pdfgen import canvas
    from reportlab.lib.pagesizes import letter

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = 750
    for line in lines:
        c.drawString(72, y, line)
        y -= 20
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture
def legacy_doc_bytes():
    """Word 97-2003 upload: OLE2 compound file header plus an empty sector"""
    return bytes.fromhex("d0cf11e0a1b11ae1") + b"\x00" * 504


@pytest.fixture
def png_bytes():
    """Small PNG with some dark strokes"""
    image = Image.new("RGB", (200, 120), "white")
    draw = ImageDraw.Draw(image)
    draw.rectangle([20, 20, 180, 100], outline="black", width=3)
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


# ============================================================================
# PIPELINE FIXTURES
# ============================================================================

@pytest.fixture
def completion_client():
    return FakeLLMClient(text="- Summary bullet")


@pytest.fixture
def policy():
    return ConfidencePolicy({
        "vision": PolicyEntry(92, "openai-gpt-4o"),
        "text": PolicyEntry(88, "groq-llama-3.3-70b"),
    })


@pytest.fixture
def make_pipeline(completion_client, policy):
    """Factory: pipeline with fakes; any collaborator can be overridden."""

    def _make(**overrides) -> SummarizationPipeline:
        kwargs = {
            "completion_client": completion_client,
            "config": PipelineConfig(),
            "policy": policy,
        }
        kwargs.update(overrides)
        return SummarizationPipeline(**kwargs)

    return _make


@pytest.fixture
def recorder(tmp_path):
    return MetricsRecorder(db_path=tmp_path / "metrics" / "summaries.db")


# ============================================================================
# FACTORY FIXTURES
# ============================================================================

@pytest.fixture
def llm_factory():
    return FakeLLMClient


@pytest.fixture
def ocr_factory():
    return FakeOCR


@pytest.fixture
def fetcher_factory():
    return FakeFetcher


@pytest.fixture
def docx_factory():
    return make_docx


@pytest.fixture
def pdf_factory():
    return make_pdf
