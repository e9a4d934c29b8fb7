# ============================================================================
# src/referral_summarizer/core/metrics.py
# ============================================================================
"""
Summary Metrics Recorder

Append-only log of successful summaries, stored locally in SQLite, with
time-window aggregates for the dashboard layer:
- count of summaries in a window
- average processing time (ms)
- average confidence

Timestamps are stored as UTC ISO-8601 text. Every operation opens its own
connection; the database runs in WAL mode so readers never block the writer.
"""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from .context import InputType

PREVIEW_MAX_CHARS = 100


def _to_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _to_db(moment: datetime) -> str:
    return _to_utc(moment).isoformat(timespec="microseconds")


def utc_day_window(moment: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """[start, end) of the UTC calendar day containing moment (default: now)."""
    moment = _to_utc(moment or datetime.now(timezone.utc))
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


@dataclass(frozen=True)
class SummaryRecord:
    input_type: InputType
    input_preview: str
    summary: str
    confidence: int
    model_used: str
    processing_time_ms: int
    created_at: datetime
    id: Optional[int] = None

    def __post_init__(self):
        if len(self.input_preview) > PREVIEW_MAX_CHARS:
            raise ValueError(f"input_preview exceeds {PREVIEW_MAX_CHARS} chars")
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"confidence must be 0-100, got {self.confidence}")
        if self.processing_time_ms < 0:
            raise ValueError("processing_time_ms must be non-negative")

    def to_dict(self):
        return {
            "id": self.id,
            "input_type": self.input_type.value,
            "input_preview": self.input_preview,
            "summary": self.summary,
            "confidence": self.confidence,
            "model_used": self.model_used,
            "processing_time_ms": self.processing_time_ms,
            "created_at": _to_utc(self.created_at).isoformat(),
        }


class MetricsRecorder:
    """
    SQLite-backed summary metrics.

    Records are never updated or deleted through this class.
    """

    def __init__(self, db_path: Optional[Path] = None):
        if db_path is None:
            from ..config.base_config import base_settings
            db_path = base_settings.METRICS_DB_PATH
        self.db_path = Path(db_path)
        self.logger = logging.getLogger(__name__)

        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path), timeout=10)

    def _init_database(self):
        """Create metrics schema if not exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = self._connect()
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS summaries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    input_type TEXT NOT NULL,
                    input_preview TEXT NOT NULL,
                    summary TEXT NOT NULL,
                    confidence INTEGER NOT NULL,
                    model_used TEXT NOT NULL,
                    processing_time_ms INTEGER NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_summaries_created_at
                ON summaries (created_at)
            """)
            conn.commit()
        finally:
            conn.close()

        self.logger.info(f"Metrics database initialized: {self.db_path}")

    def record(self, record: SummaryRecord) -> int:
        """Append one record; returns its row id."""
        conn = self._connect()
        try:
            cursor = conn.execute("""
                INSERT INTO summaries (
                    input_type, input_preview, summary, confidence,
                    model_used, processing_time_ms, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                record.input_type.value,
                record.input_preview,
                record.summary,
                record.confidence,
                record.model_used,
                record.processing_time_ms,
                _to_db(record.created_at),
            ))
            conn.commit()
            row_id = cursor.lastrowid
        finally:
            conn.close()

        self.logger.debug(f"Recorded summary {row_id} ({record.input_type.value}, {record.processing_time_ms}ms)")
        return row_id

    def _aggregate(self, expression: str, start: datetime, end: datetime):
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT {expression} FROM summaries WHERE created_at >= ? AND created_at < ?",
                (_to_db(start), _to_db(end)),
            ).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def count_in_window(self, start: datetime, end: datetime) -> int:
        """Summaries with start <= created_at < end."""
        return int(self._aggregate("COUNT(*)", start, end) or 0)

    def avg_processing_time_in_window(self, start: datetime, end: datetime) -> Optional[float]:
        """Average processing time in ms; None when the window is empty."""
        value = self._aggregate("AVG(processing_time_ms)", start, end)
        return float(value) if value is not None else None

    def avg_confidence_in_window(self, start: datetime, end: datetime) -> Optional[float]:
        """Average confidence; None when the window is empty."""
        value = self._aggregate("AVG(confidence)", start, end)
        return float(value) if value is not None else None

    def list_recent(self, limit: int = 50) -> List[SummaryRecord]:
        """Newest first."""
        conn = self._connect()
        try:
            rows = conn.execute("""
                SELECT id, input_type, input_preview, summary, confidence,
                       model_used, processing_time_ms, created_at
                FROM summaries
                ORDER BY created_at DESC, id DESC
                LIMIT ?
            """, (max(0, limit),)).fetchall()
        finally:
            conn.close()

        return [
            SummaryRecord(
                id=row[0],
                input_type=InputType(row[1]),
                input_preview=row[2],
                summary=row[3],
                confidence=row[4],
                model_used=row[5],
                processing_time_ms=row[6],
                created_at=datetime.fromisoformat(row[7]),
            )
            for row in rows
        ]
