"""Tests for engine settings and the YAML tax parameter loader."""

import logging

import pytest
from pydantic import ValidationError

from calculator.form_1040 import compute_form_1040
from calculator.tax_year_config import TaxYearConfig
from config.settings import EngineSettings, get_engine_settings
from config.tax_config_loader import TaxConfigLoader, load_configured_tax_year, load_tax_year_config


class TestEngineSettings:
    """Environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TAX_ENGINE_LOG_LEVEL", raising=False)
        settings = EngineSettings(_env_file=None)

        assert settings.tax_year == 2025
        assert settings.balance_tolerance_cents == 1
        assert settings.agi_deviation_threshold == 0.5
        assert settings.log_level == "INFO"
        assert settings.parameters_dir is None

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("TAX_ENGINE_BALANCE_TOLERANCE_CENTS", "5")
        monkeypatch.setenv("TAX_ENGINE_AGI_DEVIATION_THRESHOLD", "0.25")

        settings = EngineSettings(_env_file=None)
        assert settings.balance_tolerance_cents == 5
        assert settings.agi_deviation_threshold == 0.25

    def test_log_level_normalized(self):
        assert EngineSettings(log_level="debug", _env_file=None).log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            EngineSettings(log_level="chatty", _env_file=None)

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ValidationError):
            EngineSettings(balance_tolerance_cents=-1, _env_file=None)

    def test_configure_logging(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        EngineSettings(log_level="warning", _env_file=None).configure_logging()
        assert calls[0]["level"] == logging.WARNING

    def test_cached(self):
        assert get_engine_settings() is get_engine_settings()


class TestTaxConfigLoader:
    """YAML parameters and TAX_<year>_* overrides."""

    def test_load_packaged_year(self):
        loader = TaxConfigLoader(environ={})
        config = loader.load_config(2025)

        assert config["standard_deduction"]["single"] == 15750.0
        assert config["ss_wage_base"] == 176100.0
        assert "_metadata" not in config

    def test_metadata(self):
        metadata = TaxConfigLoader(environ={}).get_metadata(2025)

        assert metadata.tax_year == 2025
        assert metadata.source == "IRS"
        assert "Rev. Proc. 2024-40" in metadata.irs_references

    def test_get_parameter_by_status(self):
        loader = TaxConfigLoader(environ={})

        assert loader.get_parameter("standard_deduction", 2025, "married_joint") == 31500.0
        assert loader.get_parameter("salt_base_cap", 2025, "married_separate") == 20000.0
        assert loader.get_parameter("salt_phaseout_rate", 2025) == 0.30
        assert loader.get_parameter("not_a_parameter", 2025, default=7) == 7

    def test_env_override_with_status_suffix(self):
        loader = TaxConfigLoader(environ={"TAX_2025_STANDARD_DEDUCTION_SINGLE": "16000"})
        table = loader.load_config(2025)["standard_deduction"]

        assert table["single"] == 16000
        assert table["married_joint"] == 31500.0

    def test_env_override_scalar(self):
        loader = TaxConfigLoader(environ={"TAX_2025_SALT_PHASEOUT_RATE": "0.25", "OTHER": "1"})
        assert loader.load_config(2025)["salt_phaseout_rate"] == 0.25

    def test_unparseable_override_kept_as_string(self):
        loader = TaxConfigLoader(environ={"TAX_2025_SS_WAGE_BASE": "n/a"})
        assert loader.load_config(2025)["ss_wage_base"] == "n/a"

    def test_missing_year_file(self, tmp_path, caplog):
        loader = TaxConfigLoader(tmp_path, environ={})
        with caplog.at_level(logging.WARNING, logger="config.tax_config_loader"):
            assert loader.load_config(2030) == {}
        assert "No config file found" in caplog.text
        assert "Missing required parameters" in caplog.text


class TestBuildTaxYearConfig:
    """TaxYearConfig built from defaults plus the loaded file."""

    def test_packaged_file_matches_defaults(self):
        built = TaxConfigLoader(environ={}).build_tax_year_config(2025)
        assert built == TaxYearConfig.for_2025()

    def test_partial_status_table_merged(self, tmp_path):
        (tmp_path / "tax_year_2025.yaml").write_text(
            "standard_deduction:\n  single: 16000.0\nsalt_base_cap:\n  single: 30000.0\n"
        )
        built = TaxConfigLoader(tmp_path, environ={}).build_tax_year_config(2025)

        assert built.standard_deduction["single"] == 16000.0
        assert built.standard_deduction["married_joint"] == 31500.0
        assert built.salt_base_cap["single"] == 30000.0
        assert built.salt_base_cap["married_separate"] == 20000.0

    def test_unknown_parameter_ignored(self, tmp_path, caplog):
        (tmp_path / "tax_year_2025.yaml").write_text("flux_capacitor: 1.21\n")

        with caplog.at_level(logging.WARNING, logger="config.tax_config_loader"):
            built = TaxConfigLoader(tmp_path, environ={}).build_tax_year_config(2025)

        assert "flux_capacitor" in caplog.text
        assert not hasattr(built, "flux_capacitor")

    def test_load_tax_year_config_cached(self):
        assert load_tax_year_config(2025) is load_tax_year_config(2025)
        assert load_tax_year_config(2025).standard_deduction["single"] == 15750.0


class TestConfiguredTaxYear:
    """TaxYearConfig chosen by TAX_ENGINE_TAX_YEAR and TAX_ENGINE_PARAMETERS_DIR."""

    def test_packaged_defaults(self, monkeypatch):
        monkeypatch.delenv("TAX_ENGINE_TAX_YEAR", raising=False)
        monkeypatch.delenv("TAX_ENGINE_PARAMETERS_DIR", raising=False)

        built = load_configured_tax_year(EngineSettings(_env_file=None))
        assert built == TaxYearConfig.for_2025()

    def test_parameters_dir_from_env(self, monkeypatch, tmp_path, single_75k):
        (tmp_path / "tax_year_2025.yaml").write_text("standard_deduction:\n  single: 16000.0\n")
        monkeypatch.setenv("TAX_ENGINE_PARAMETERS_DIR", str(tmp_path))

        built = load_configured_tax_year()

        assert built.standard_deduction["single"] == 16000.0
        assert compute_form_1040(single_75k, built).deduction == 1600000

    def test_tax_year_from_env(self, monkeypatch, tmp_path):
        (tmp_path / "tax_year_2026.yaml").write_text("ss_wage_base: 184500.0\n")
        monkeypatch.setenv("TAX_ENGINE_TAX_YEAR", "2026")
        monkeypatch.setenv("TAX_ENGINE_PARAMETERS_DIR", str(tmp_path))

        built = load_configured_tax_year()

        assert get_engine_settings().tax_year == 2026
        assert built.tax_year == 2026
        assert built.ss_wage_base == 184500.0

    def test_explicit_settings(self, tmp_path):
        (tmp_path / "tax_year_2025.yaml").write_text("ss_wage_base: 180000.0\n")
        settings = EngineSettings(parameters_dir=tmp_path, _env_file=None)

        assert load_configured_tax_year(settings).ss_wage_base == 180000.0
