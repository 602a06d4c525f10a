"""
Core module for the treatment pricing engine.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
"""

from .exceptions import (
    PricingEngineError,
    ConfigurationError,
    GridConfigurationError,
    EmptyGridError,
    MalformedGridError,
    GridNotFoundError,
    MarkupConfigurationError,
    MissingFabricWidthError,
    InvalidDimensionsError,
    UnsupportedServiceUnitError,
)

__all__ = [
    "PricingEngineError",
    "ConfigurationError",
    "GridConfigurationError",
    "EmptyGridError",
    "MalformedGridError",
    "GridNotFoundError",
    "MarkupConfigurationError",
    "MissingFabricWidthError",
    "InvalidDimensionsError",
    "UnsupportedServiceUnitError",
]
