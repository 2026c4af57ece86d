"""State tax configurations by year."""

from calculator.state.configs.state_2025 import (
    CALIFORNIA_2025,
    ILLINOIS_2025,
    PENNSYLVANIA_2025,
    STATE_CONFIGS_2025,
)

__all__ = ["CALIFORNIA_2025", "ILLINOIS_2025", "PENNSYLVANIA_2025", "STATE_CONFIGS_2025"]
