"""State return models."""

from .state_return import ResidencyType, StateReturnConfig

__all__ = [
    "ResidencyType",
    "StateReturnConfig",
]
