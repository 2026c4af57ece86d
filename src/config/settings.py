"""Engine settings using Pydantic Settings.

Values come from ``TAX_ENGINE_*`` environment variables (or a ``.env``
file). The computation core never reads these itself: callers load the
settings here and pass them to ``compute_all``, and build the year's
parameters with ``config.tax_config_loader.load_configured_tax_year``.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class EngineSettings(BaseSettings):
    """Tax engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="TAX_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tax_year: int = Field(default=2025, description="Tax year to compute")

    # Quality gate tolerances
    balance_tolerance_cents: int = Field(
        default=1, ge=0, description="Allowed rounding gap in the state balance equation"
    )
    withholding_tolerance_cents: int = Field(
        default=1, ge=0, description="Allowed excess of state withholding over W-2 Box 17"
    )
    agi_deviation_threshold: float = Field(
        default=0.5, gt=0, description="Full-year state AGI deviation from federal AGI that triggers a warning"
    )

    log_level: str = Field(default="INFO", description="Root log level for CLI and scripts")
    parameters_dir: Optional[Path] = Field(
        default=None, description="Directory of tax_year_<year>.yaml files; packaged defaults when unset"
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    def configure_logging(self) -> None:
        """Apply ``log_level`` to the root logger."""
        logging.basicConfig(level=getattr(logging, self.log_level), format="%(levelname)s %(name)s: %(message)s")


@lru_cache
def get_engine_settings() -> EngineSettings:
    """
    Get cached engine settings instance.

    Returns:
        EngineSettings: Cached settings loaded from environment.
    """
    return EngineSettings()
