# ============================================================================
# src/referral_summarizer/config/base_config.py
# ============================================================================
"""
Base Configuration
- Metrics database location
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

class BaseSettingsConfig(BaseSettings):
    # Summary metrics store
    METRICS_DB_PATH: Path = Field(
        default=Path("data/summaries.db"),
        description="SQLite database holding one record per generated summary"
    )

    def create_directories(self):
        """Create all necessary directories if they don't exist"""
        self.METRICS_DB_PATH.parent.mkdir(parents=True, exist_ok=True)

# Global instance
base_settings = BaseSettingsConfig()
