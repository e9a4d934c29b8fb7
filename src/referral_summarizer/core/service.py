# ============================================================================
# src/referral_summarizer/core/service.py
# ============================================================================
"""
Summarization Service

The pipeline's caller: runs one request, measures wall-clock processing
time, and appends exactly one metrics record per successful summary.
Failures are returned to the client and never recorded.
"""

import asyncio
import logging
import sqlite3
import time
from datetime import datetime, timezone
from typing import Optional

from .context import InputType, SummarizationRequest, TaggedResult
from .metrics import MetricsRecorder, PREVIEW_MAX_CHARS, SummaryRecord
from .pipeline import SummarizationPipeline


def build_preview(request: SummarizationRequest) -> str:
    """Short, human-readable label of the input (at most 100 chars)."""
    if request.input_type == InputType.TEXT and request.text:
        text = " ".join(request.text.split())
        if len(text) > PREVIEW_MAX_CHARS:
            return text[:PREVIEW_MAX_CHARS - 3] + "..."
        return text

    if request.input_type in (InputType.FILE, InputType.IMAGE) and request.file_name:
        return request.file_name[:PREVIEW_MAX_CHARS]

    if request.input_type == InputType.URL and request.url:
        return request.url.strip()[:PREVIEW_MAX_CHARS]

    return "Untitled"


class SummarizationService:
    """
    Args:
        pipeline: Configured pipeline
        recorder: Metrics sink; None disables recording
    """

    def __init__(self, pipeline: SummarizationPipeline, recorder: Optional[MetricsRecorder] = None):
        self.pipeline = pipeline
        self.recorder = recorder
        self.logger = logging.getLogger(__name__)

    async def summarize(
        self,
        request: SummarizationRequest,
        deadline: Optional[float] = None,
    ) -> TaggedResult:
        start = time.perf_counter()
        tagged = await self.pipeline.process(request, deadline=deadline)
        processing_time_ms = int(round((time.perf_counter() - start) * 1000))

        if tagged.result.success and self.recorder is not None:
            record = SummaryRecord(
                input_type=request.input_type,
                input_preview=build_preview(request),
                summary=tagged.result.summary,
                confidence=tagged.confidence if tagged.confidence is not None else 0,
                model_used=tagged.model_used or "unknown",
                processing_time_ms=processing_time_ms,
                created_at=datetime.now(timezone.utc),
            )
            # Metrics failures never fail the request
            try:
                await asyncio.to_thread(self.recorder.record, record)
            except sqlite3.Error as e:
                self.logger.error(f"Failed to record summary metrics: {e}")

        return tagged
