"""Configuration module for the tax engine."""

from .settings import EngineSettings, get_engine_settings
from .tax_config_loader import (
    TaxConfigLoader,
    clear_config_cache,
    load_configured_tax_year,
    load_tax_year_config,
)

__all__ = [
    "EngineSettings",
    "get_engine_settings",
    "TaxConfigLoader",
    "load_tax_year_config",
    "load_configured_tax_year",
    "clear_config_cache",
]
