"""Pytest configuration and fixtures for test suite."""

import pytest


@pytest.fixture
def tax_config():
    """2025 federal parameters."""
    from calculator.tax_year_config import TaxYearConfig
    return TaxYearConfig.for_2025()


@pytest.fixture(autouse=True)
def clear_tax_config_cache():
    """Loaded configs are cached per process; start every test clean."""
    from config.tax_config_loader import clear_config_cache
    from config.settings import get_engine_settings

    clear_config_cache()
    get_engine_settings.cache_clear()
    yield
    clear_config_cache()
    get_engine_settings.cache_clear()


@pytest.fixture
def single_75k():
    """Single filer with one $75,000 W-2 and no state returns."""
    from helpers import create_test_return
    return create_test_return(wages=75000.0, federal_withholding=9000.0)
