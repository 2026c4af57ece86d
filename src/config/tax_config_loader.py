"""
Tax Configuration Loader.

Loads federal tax parameters from YAML configuration files, enabling:
- Annual updates without code changes
- Environment-specific overrides
- A TaxYearConfig built from the loaded values

The computation core never calls this module; callers build a
TaxYearConfig here and pass it in.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from calculator.tax_year_config import TaxYearConfig
from config.settings import EngineSettings, get_engine_settings

logger = logging.getLogger(__name__)

# Default config directory
CONFIG_DIR = Path(__file__).parent / "tax_parameters"

FILING_STATUS_KEYS = (
    "single",
    "married_joint",
    "married_separate",
    "head_of_household",
    "qualifying_widow",
)


@dataclass
class ConfigMetadata:
    """Metadata about a configuration file."""
    version: str
    tax_year: int
    effective_date: str
    source: str  # "IRS", "state", "custom"
    irs_references: List[str] = field(default_factory=list)
    last_updated: str = ""
    updated_by: str = ""
    notes: str = ""


class TaxConfigLoader:
    """
    Loads tax configuration from YAML files.

    Features:
    - Automatic file discovery by tax year
    - Environment variable overrides (``TAX_<year>_<PARAM>``)
    - Configuration validation
    """

    def __init__(self, config_dir: Optional[Path] = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize the config loader.

        Args:
            config_dir: Directory containing YAML config files.
                       Defaults to src/config/tax_parameters/
            environ: Environment to read overrides from. Defaults to os.environ.
        """
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self.environ = os.environ if environ is None else environ
        self._configs: Dict[int, Dict[str, Any]] = {}
        self._metadata: Dict[int, ConfigMetadata] = {}

    def load_config(self, tax_year: int) -> Dict[str, Any]:
        """
        Load configuration for a specific tax year.

        Args:
            tax_year: The tax year to load (e.g., 2025)

        Returns:
            Dictionary of tax parameters
        """
        if tax_year in self._configs:
            return self._configs[tax_year]

        config = self._load_from_files(tax_year)
        config = self._apply_env_overrides(config, tax_year)
        self._validate_config(config, tax_year)

        self._configs[tax_year] = config
        return config

    def _load_from_files(self, tax_year: int) -> Dict[str, Any]:
        """Load configuration from YAML files."""
        config: Dict[str, Any] = {}

        year_file = self.config_dir / f"tax_year_{tax_year}.yaml"
        if year_file.exists():
            logger.info("Loading tax config from %s", year_file)
            with open(year_file, "r") as f:
                year_config = yaml.safe_load(f)
                if year_config:
                    if "_metadata" in year_config:
                        self._metadata[tax_year] = ConfigMetadata(**year_config.pop("_metadata"))
                    config.update(year_config)
        else:
            logger.warning("No config file found for tax year %s, using defaults", tax_year)

        return config

    def _apply_env_overrides(self, config: Dict[str, Any], tax_year: int) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        # Environment variables like TAX_2025_STANDARD_DEDUCTION_SINGLE=15750
        prefix = f"TAX_{tax_year}_"

        for key, value in self.environ.items():
            if not key.startswith(prefix):
                continue
            param_name = key[len(prefix):].lower()
            try:
                parsed = _parse_scalar(value)
            except ValueError:
                logger.warning("Could not parse env override: %s=%s", key, value)
                continue

            base, status = _split_status(param_name)
            if status is not None:
                table = dict(config.get(base) or {})
                table[status] = parsed
                config[base] = table
            else:
                config[param_name] = parsed
            logger.info("Applied env override: %s=%s", param_name, value)

        return config

    def _validate_config(self, config: Dict[str, Any], tax_year: int) -> None:
        """Validate configuration for completeness and consistency."""
        required_params = [
            "standard_deduction",
            "ss_wage_base",
            "child_tax_credit_amount",
        ]

        missing = [p for p in required_params if p not in config]
        if missing:
            logger.warning("Missing required parameters for %s: %s", tax_year, missing)

    def get_parameter(
        self,
        param_name: str,
        tax_year: int,
        filing_status: Optional[str] = None,
        default: Any = None
    ) -> Any:
        """
        Get a specific parameter value.

        Args:
            param_name: Name of the parameter
            tax_year: Tax year
            filing_status: Optional filing status for status-specific values
            default: Default value if not found

        Returns:
            Parameter value
        """
        config = self.load_config(tax_year)
        value = config.get(param_name, default)

        if isinstance(value, dict) and filing_status:
            return value.get(filing_status, value.get("single", default))

        return value

    def get_metadata(self, tax_year: int) -> Optional[ConfigMetadata]:
        """Get metadata for a tax year's configuration."""
        self.load_config(tax_year)
        return self._metadata.get(tax_year)

    def build_tax_year_config(self, tax_year: int) -> TaxYearConfig:
        """
        Build a TaxYearConfig from the built-in defaults and the loaded parameters.

        Per-status tables are merged key by key, so a file may override a
        single filing status. Unknown parameters are logged and ignored.
        """
        base = TaxYearConfig.for_2025()
        if tax_year != base.tax_year:
            logger.warning("No built-in defaults for tax year %s; starting from %s", tax_year, base.tax_year)

        known = {f.name for f in dataclasses.fields(TaxYearConfig)}
        changes: Dict[str, Any] = {"tax_year": tax_year}
        for name, value in self.load_config(tax_year).items():
            if name not in known or name == "tax_year":
                logger.warning("Ignoring unknown tax parameter %r for %s", name, tax_year)
                continue
            current = getattr(base, name)
            if isinstance(current, dict) and isinstance(value, dict):
                merged = dict(current)
                merged.update(value)
                changes[name] = merged
            else:
                changes[name] = value

        return dataclasses.replace(base, **changes)

    def compare_years(self, year1: int, year2: int) -> Dict[str, Dict[str, Any]]:
        """
        Compare configuration between two tax years.

        Returns:
            Dictionary with 'added', 'removed', 'changed' keys
        """
        config1 = self.load_config(year1)
        config2 = self.load_config(year2)

        keys1 = set(config1.keys())
        keys2 = set(config2.keys())

        return {
            "added": {k: config2[k] for k in keys2 - keys1},
            "removed": {k: config1[k] for k in keys1 - keys2},
            "changed": {
                k: {"old": config1[k], "new": config2[k]}
                for k in keys1 & keys2
                if config1[k] != config2[k]
            },
        }


def _parse_scalar(value: str) -> Any:
    if "." in value:
        return float(value)
    if value.lstrip("-").isdigit():
        return int(value)
    return value


def _split_status(param_name: str):
    """Split ``standard_deduction_single`` into ("standard_deduction", "single")."""
    for status in FILING_STATUS_KEYS:
        suffix = "_" + status
        if param_name.endswith(suffix):
            return param_name[: -len(suffix)], status
    return param_name, None


@lru_cache(maxsize=10)
def load_tax_year_config(tax_year: int = 2025, config_dir: Optional[str] = None) -> TaxYearConfig:
    """
    Convenience function returning the TaxYearConfig for a year.

    Args:
        tax_year: Tax year
        config_dir: Optional parameters directory; the packaged one by default
    """
    loader = TaxConfigLoader(Path(config_dir) if config_dir else None)
    return loader.build_tax_year_config(tax_year)


def clear_config_cache() -> None:
    """Clear the configuration cache (useful for testing)."""
    load_tax_year_config.cache_clear()


def load_configured_tax_year(settings: Optional[EngineSettings] = None) -> TaxYearConfig:
    """
    TaxYearConfig for the engine settings.

    Reads ``tax_year`` and ``parameters_dir`` (``TAX_ENGINE_TAX_YEAR`` and
    ``TAX_ENGINE_PARAMETERS_DIR``); the cached process settings when omitted.
    """
    settings = settings or get_engine_settings()
    config_dir = str(settings.parameters_dir) if settings.parameters_dir else None
    return load_tax_year_config(settings.tax_year, config_dir)
