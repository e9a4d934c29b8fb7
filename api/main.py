# ============================================================================
# api/main.py
# ============================================================================
"""
FastAPI Backend for the Referral Summarizer

Provides REST API for summarizing patient documentation and reading the
summary metrics shown on the dashboard.

Run:
    uvicorn api.main:app --port 8000
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from referral_summarizer.config import base_settings, extraction_settings, logging_settings
from referral_summarizer.core.context import ErrorKind, InputType, SummarizationRequest
from referral_summarizer.core.metrics import MetricsRecorder, utc_day_window
from referral_summarizer.core.pipeline import create_pipeline
from referral_summarizer.core.service import SummarizationService
from referral_summarizer.utils.logging import setup_logging

logger = logging.getLogger(__name__)


# HTTP status per failure kind; the body is always the full result
ERROR_STATUS = {
    ErrorKind.EMPTY_INPUT: 400,
    ErrorKind.INVALID_URL: 400,
    ErrorKind.UNSUPPORTED_FILE_TYPE: 415,
    ErrorKind.FETCH_FAILED: 502,
    ErrorKind.INSUFFICIENT_CONTENT: 422,
    ErrorKind.NO_USABLE_CONTENT: 422,
    ErrorKind.IMAGE_PROCESSING_FAILED: 422,
    ErrorKind.SUMMARIZATION_FAILED: 502,
    ErrorKind.DEADLINE_EXCEEDED: 504,
    ErrorKind.INTERNAL_ERROR: 500,
}


def create_app(
    service: Optional[SummarizationService] = None,
    recorder: Optional[MetricsRecorder] = None,
    request_deadline: Optional[float] = None,
) -> FastAPI:
    """
    Build the API. Without arguments the pipeline, backends and metrics
    store are created from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(
            level=logging_settings.LOG_LEVEL,
            log_file=logging_settings.LOG_FILE,
            format_json=logging_settings.LOG_FORMAT_JSON,
        )

        if app.state.service is None:
            base_settings.create_directories()
            app.state.recorder = app.state.recorder or MetricsRecorder(base_settings.METRICS_DB_PATH)
            app.state.service = SummarizationService(create_pipeline(), app.state.recorder)
            logger.info("Summarization service initialized from settings")

        yield

        pipeline = app.state.service.pipeline
        await pipeline.completion_client.close()
        if pipeline.vision_client is not None:
            await pipeline.vision_client.close()

    app = FastAPI(
        title="Referral Summarizer API",
        description="Multi-modal clinical summarization for patient referrals",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = service
    app.state.recorder = recorder if recorder is not None else (service.recorder if service else None)
    app.state.request_deadline = (
        request_deadline if request_deadline is not None else extraction_settings.REQUEST_DEADLINE
    )

    # ========================================================================
    # Endpoints
    # ========================================================================

    @app.get("/api/health")
    async def health(request: Request):
        """Health check for monitoring."""
        pipeline = request.app.state.service.pipeline
        return {
            "status": "healthy",
            "vision_configured": pipeline.vision_client is not None,
            "ocr_configured": pipeline.ocr_engine is not None,
        }

    @app.post("/api/summarize")
    async def summarize(
        request: Request,
        input_type: str = Form(...),
        text: Optional[str] = Form(None),
        url: Optional[str] = Form(None),
        file: Optional[UploadFile] = File(None),
    ):
        """
        Summarize patient documentation.

        Form fields:
            input_type: text | file | url | image
            text: pasted clinical text (text)
            url: page to fetch (url)
            file: upload (file, image)
        """
        try:
            mode = InputType(input_type.strip().lower())
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown input_type '{input_type}'. Expected one of: "
                       + ", ".join(t.value for t in InputType),
            )

        if mode == InputType.TEXT:
            summarization_request = SummarizationRequest.from_text(text or "")
        elif mode == InputType.URL:
            summarization_request = SummarizationRequest.from_url(url or "")
        else:
            file_bytes = await file.read() if file is not None else b""
            file_name = file.filename if file is not None else None
            if mode == InputType.FILE:
                summarization_request = SummarizationRequest.from_file(file_bytes, file_name or "")
            else:
                summarization_request = SummarizationRequest.from_image(file_bytes, file_name)

        tagged = await request.app.state.service.summarize(
            summarization_request,
            deadline=request.app.state.request_deadline,
        )

        status_code = 200 if tagged.result.success else ERROR_STATUS.get(tagged.result.error, 500)
        return JSONResponse(status_code=status_code, content=tagged.to_dict())

    @app.get("/api/summaries/stats")
    def summary_stats(request: Request, day: Optional[date] = Query(None)):
        """Count, average processing time and average confidence for one UTC day."""
        recorder: Optional[MetricsRecorder] = request.app.state.recorder
        if recorder is None:
            raise HTTPException(status_code=503, detail="Metrics recording is disabled")

        moment = (
            datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
            if day is not None
            else datetime.now(timezone.utc)
        )
        start, end = utc_day_window(moment)

        avg_ms = recorder.avg_processing_time_in_window(start, end)
        avg_confidence = recorder.avg_confidence_in_window(start, end)

        return {
            "day": start.date().isoformat(),
            "count": recorder.count_in_window(start, end),
            "avg_processing_seconds": round(avg_ms / 1000, 2) if avg_ms is not None else None,
            "avg_confidence": round(avg_confidence, 1) if avg_confidence is not None else None,
        }

    @app.get("/api/summaries")
    def list_summaries(request: Request, limit: int = Query(50, ge=1, le=500)):
        """Most recent summaries, newest first."""
        recorder: Optional[MetricsRecorder] = request.app.state.recorder
        if recorder is None:
            raise HTTPException(status_code=503, detail="Metrics recording is disabled")

        return {"summaries": [r.to_dict() for r in recorder.list_recent(limit)]}

    return app


app = create_app()
