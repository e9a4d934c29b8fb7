# ============================================================================
# src/referral_summarizer/core/tagger.py
# ============================================================================
"""
Result Tagger

Confidence here is policy, not measurement: a fixed number and model
label per method tag, looked up in an injectable table.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .context import METHOD_TEXT, METHOD_VISION, SummarizationResult, TaggedResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyEntry:
    confidence: int
    model_used: str


class ConfidencePolicy:
    """Method tag -> (confidence 0-100, model label)."""

    def __init__(self, table: Dict[str, PolicyEntry]):
        for method, entry in table.items():
            if not 0 <= entry.confidence <= 100:
                raise ValueError(f"Confidence for '{method}' must be 0-100, got {entry.confidence}")
        self.table = dict(table)

    @classmethod
    def from_settings(cls, settings=None) -> "ConfidencePolicy":
        if settings is None:
            from ..config.confidence_config import ConfidenceSettings
            settings = ConfidenceSettings()

        return cls({
            METHOD_VISION: PolicyEntry(settings.VISION_CONFIDENCE, settings.VISION_MODEL_LABEL),
            METHOD_TEXT: PolicyEntry(settings.TEXT_CONFIDENCE, settings.TEXT_MODEL_LABEL),
        })

    def lookup(self, method: Optional[str]) -> Optional[PolicyEntry]:
        if method is None:
            return None
        return self.table.get(method)


class ResultTagger:

    def __init__(self, policy: Optional[ConfidencePolicy] = None):
        self.policy = policy or ConfidencePolicy.from_settings()

    def tag(self, result: SummarizationResult) -> TaggedResult:
        """Failures are passed through untagged."""
        if not result.success:
            return TaggedResult(result=result)

        entry = self.policy.lookup(result.method)
        if entry is None:
            logger.warning(f"No confidence policy for method '{result.method}'")
            return TaggedResult(result=result)

        return TaggedResult(result=result, confidence=entry.confidence, model_used=entry.model_used)
