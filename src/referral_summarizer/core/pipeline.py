# ============================================================================
# src/referral_summarizer/core/pipeline.py
# ============================================================================
"""
Summarization Pipeline

This is the MAIN entry point for summarizing patient documentation.

Flow:
1. Classify the input (text | file | url | image) and validate it
2. Extract readable content with the mode's extractor
3. Validate content against the content floor
4. Summarize (skipped when the vision model already produced the summary)
5. Tag the result with policy confidence and model label

Per-request states:
    received -> classified -> extracting -> validated -> [summarizing] -> tagged -> done
    any state -> failed

Every failure comes back as a typed SummarizationResult; run() never
raises for request-level problems. Caller cancellation propagates.
"""

import asyncio
import logging
import uuid
from typing import Optional

from .classifier import ClassifiedRequest, InputClassifier
from .config import PipelineConfig, load_pipeline_config
from .context import (
    ErrorKind,
    ExtractedContent,
    InputType,
    METHOD_TEXT,
    METHOD_VISION,
    PipelineState,
    SourceMethod,
    SummarizationRequest,
    SummarizationResult,
    TaggedResult,
)
from .summarizer import SummarizationEngine
from .tagger import ConfidencePolicy, ResultTagger
from .validator import ContentValidator
from ..extractors.base import DocumentTextBackend, Fetcher, OCREngine
from ..extractors.file_extractor import FileExtractor
from ..extractors.image_extractor import build_image_extractor
from ..extractors.text_extractor import TextExtractor
from ..extractors.url_extractor import UrlExtractor
from ..llm.base import BaseLLMClient
from ..utils.exceptions import DeadlineExceededError, SummarizationError
from ..utils.logging import LogAdapter, log_performance

logger = logging.getLogger(__name__)


# Legal forward transitions; FAILED is reachable from any non-terminal state
_TRANSITIONS = {
    PipelineState.RECEIVED: {PipelineState.CLASSIFIED},
    PipelineState.CLASSIFIED: {PipelineState.EXTRACTING},
    PipelineState.EXTRACTING: {PipelineState.VALIDATED},
    PipelineState.VALIDATED: {PipelineState.SUMMARIZING, PipelineState.TAGGED},
    PipelineState.SUMMARIZING: {PipelineState.TAGGED},
    PipelineState.TAGGED: {PipelineState.DONE},
    PipelineState.DONE: set(),
    PipelineState.FAILED: set(),
}


class RequestState:
    """Tracks and logs one request's progress through the pipeline."""

    def __init__(self, log: logging.LoggerAdapter):
        self.state = PipelineState.RECEIVED
        self.log = log
        self.history = [PipelineState.RECEIVED]

    def advance(self, new_state: PipelineState, note: str = ""):
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} -> {new_state.value}")
        self.log.info(
            f"{self.state.value} -> {new_state.value}" + (f" ({note})" if note else ""),
            extra={"stage": new_state.value},
        )
        self.state = new_state
        self.history.append(new_state)

    def fail(self, kind: ErrorKind, detail: str):
        if self.state in (PipelineState.DONE, PipelineState.FAILED):
            raise RuntimeError(f"Cannot fail a request already in {self.state.value}")
        self.log.warning(
            f"{self.state.value} -> failed ({kind.value}: {detail})",
            extra={"stage": PipelineState.FAILED.value},
        )
        self.state = PipelineState.FAILED
        self.history.append(PipelineState.FAILED)


class SummarizationPipeline:
    """
    Multi-modal clinical summarization pipeline.

    Every backend is injected; nothing here reads the environment.

    Args:
        completion_client: Text-completion backend for the summarizer
        config: Thresholds, limits and timeouts
        vision_client: Optional vision backend (images fall back to OCR without it)
        ocr_engine: Optional OCR backend
        fetcher: Replaces the aiohttp URL fetcher
        word_backend / pdf_backend: Replace the document-text backends
        policy: Confidence policy table
    """

    def __init__(
        self,
        completion_client: BaseLLMClient,
        config: Optional[PipelineConfig] = None,
        vision_client: Optional[BaseLLMClient] = None,
        ocr_engine: Optional[OCREngine] = None,
        fetcher: Optional[Fetcher] = None,
        word_backend: Optional[DocumentTextBackend] = None,
        pdf_backend: Optional[DocumentTextBackend] = None,
        policy: Optional[ConfidencePolicy] = None,
    ):
        self.config = config or PipelineConfig()
        self.logger = logging.getLogger(__name__)

        self.completion_client = completion_client
        self.vision_client = vision_client
        self.ocr_engine = ocr_engine

        self.classifier = InputClassifier()
        self.text_extractor = TextExtractor()
        self.file_extractor = FileExtractor(
            document_min_chars=self.config.document_min_chars,
            word_backend=word_backend,
            pdf_backend=pdf_backend,
        )
        self.url_extractor = UrlExtractor(
            min_content_chars=self.config.url_min_content_chars,
            fetch_timeout=self.config.url_fetch_timeout,
            max_bytes=self.config.url_max_bytes,
            fetcher=fetcher,
        )
        self.image_extractor = build_image_extractor(
            vision_client,
            ocr_engine,
            vision_max_tokens=self.config.vision_max_tokens,
            vision_temperature=self.config.vision_temperature,
            vision_timeout=self.config.vision_timeout,
            ocr_language=self.config.ocr_language,
            ocr_timeout=self.config.ocr_timeout,
        )
        self.validator = ContentValidator(self.config.min_content_chars)
        self.summarizer = SummarizationEngine(
            completion_client,
            max_tokens=self.config.summary_max_tokens,
            temperature=self.config.summary_temperature,
            timeout=self.config.summary_timeout,
            max_input_chars=self.config.max_input_chars,
        )
        self.tagger = ResultTagger(policy)

        self.logger.info(
            f"Pipeline initialized (vision={'on' if vision_client else 'off'}, "
            f"ocr={'on' if ocr_engine else 'off'})"
        )

    # ========================================================================
    # ENTRY POINTS
    # ========================================================================

    async def run(
        self,
        request: SummarizationRequest,
        deadline: Optional[float] = None,
    ) -> SummarizationResult:
        """
        Summarize one request.

        Args:
            request: The input
            deadline: Optional overall time limit in seconds

        Returns:
            SummarizationResult; failures are typed, never raised
        """
        tagged = await self.process(request, deadline)
        return tagged.result

    @log_performance(logger, "Summarization request")
    async def process(
        self,
        request: SummarizationRequest,
        deadline: Optional[float] = None,
    ) -> TaggedResult:
        """Like run(), plus the confidence/model tag the caller records."""
        log = LogAdapter(self.logger, {
            "request_id": uuid.uuid4().hex[:12],
            "input_type": request.input_type.value,
        })
        tracker = RequestState(log)
        log.info(f"Received {request!r}", extra={"stage": PipelineState.RECEIVED.value})

        if deadline is None:
            result = await self._execute(request, tracker)
        else:
            try:
                result = await asyncio.wait_for(self._execute(request, tracker), timeout=deadline)
            except asyncio.TimeoutError:
                error = DeadlineExceededError(deadline)
                tracker.fail(error.kind, error.detail)
                result = SummarizationResult.failure(error.kind, error.detail)

        if not result.success:
            return TaggedResult(result=result)

        tagged = self.tagger.tag(result)
        tracker.advance(
            PipelineState.TAGGED,
            f"confidence={tagged.confidence}, model={tagged.model_used}",
        )
        tracker.advance(PipelineState.DONE)
        return tagged

    # ========================================================================
    # STAGES
    # ========================================================================

    async def _execute(
        self,
        request: SummarizationRequest,
        tracker: RequestState,
    ) -> SummarizationResult:
        try:
            classified = self.classifier.classify(request)
            tracker.advance(
                PipelineState.CLASSIFIED,
                f"mode={classified.mode.value}"
                + (f", extension={classified.extension!r}" if classified.extension is not None else ""),
            )

            tracker.advance(PipelineState.EXTRACTING)
            content = await self._extract(request, classified)

            content = self.validator.validate(content)
            tracker.advance(
                PipelineState.VALIDATED,
                f"{content.char_count} chars via {content.source_method.value}"
                + (", placeholder" if content.is_placeholder else ""),
            )

            # Vision output is already the final summary
            if content.source_method == SourceMethod.VISION:
                return SummarizationResult.ok(
                    content.text,
                    METHOD_VISION,
                    source_method=content.source_method,
                    content_chars=content.char_count,
                )

            tracker.advance(PipelineState.SUMMARIZING)
            summary = await self.summarizer.summarize(content.text)
            return SummarizationResult.ok(
                summary,
                METHOD_TEXT,
                source_method=content.source_method,
                content_chars=content.char_count,
            )

        except SummarizationError as e:
            tracker.fail(e.kind, e.detail)
            return SummarizationResult.failure(e.kind, e.detail)

        except Exception as e:
            tracker.log.exception(f"Unexpected error: {e}")
            detail = f"Unexpected error while processing the request: {e.__class__.__name__}"
            tracker.fail(ErrorKind.INTERNAL_ERROR, detail)
            return SummarizationResult.failure(ErrorKind.INTERNAL_ERROR, detail)

    async def _extract(
        self,
        request: SummarizationRequest,
        classified: ClassifiedRequest,
    ) -> ExtractedContent:
        mode = classified.mode

        if mode == InputType.TEXT:
            return await self.text_extractor.extract(request.text)
        if mode == InputType.FILE:
            return await self.file_extractor.extract(request.file_bytes, classified.extension)
        if mode == InputType.URL:
            return await self.url_extractor.extract(request.url.strip())
        return await self.image_extractor.extract(request.file_bytes)


def create_pipeline(config: Optional[PipelineConfig] = None) -> SummarizationPipeline:
    """
    Build a pipeline from .env / environment settings.

    Raises:
        ConfigurationError: summarizer backend unknown or missing its API key
    """
    from ..config.confidence_config import ConfidenceSettings
    from ..config.extraction_config import ExtractionSettings
    from ..config.llm_config import LLMSettings
    from ..extractors.ocr_extractor import create_ocr_engine
    from ..llm.client import create_summary_client, create_vision_client

    # Also loads .env ahead of the settings below
    loaded = load_pipeline_config()
    config = config or loaded

    llm = LLMSettings()
    extraction = ExtractionSettings()

    return SummarizationPipeline(
        completion_client=create_summary_client(llm),
        config=config,
        vision_client=create_vision_client(llm),
        ocr_engine=create_ocr_engine(extraction.OCR_ENABLED, extraction.OCR_TIMEOUT),
        policy=ConfidencePolicy.from_settings(ConfidenceSettings()),
    )
