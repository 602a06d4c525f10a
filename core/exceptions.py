"""
Custom exceptions for the treatment pricing engine.

Exception Hierarchy:
    PricingEngineError (base)
    └── ConfigurationError            - Bad or missing configuration (fail loud)
        ├── GridConfigurationError    - Pricing grid cannot be used
        │   ├── EmptyGridError        - Grid has no columns or no rows
        │   ├── MalformedGridError    - Row/column mismatch or unknown format
        │   └── GridNotFoundError     - Named grid missing from the snapshot
        ├── MarkupConfigurationError  - Markup rules invalid or absent (strict)
        ├── MissingFabricWidthError   - Fabric width not configured
        ├── InvalidDimensionsError    - Treatment dimensions unusable
        └── UnsupportedServiceUnitError - Service unit outside the enumeration

Usage:
    Configuration errors propagate to the caller unmodified. The UI turns them
    into a blocking message. Resolution misses (no matching markup rule, no
    heading override) are NOT errors and never raise.
"""

from typing import Optional, Dict, Any, Iterable


class PricingEngineError(Exception):
    """
    Base exception for all pricing engine errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all engine-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON error responses."""
        return {
            "error": self.message,
            "type": type(self).__name__,
            "details": dict(self.details),
        }


class ConfigurationError(PricingEngineError):
    """
    Configuration supplied to a calculation is missing or invalid.

    Never defaulted silently: a guessed value would produce a wrong quote.
    """


# =============================================================================
# PRICING GRID ERRORS
# =============================================================================

class GridConfigurationError(ConfigurationError):
    """Base class for pricing grids that cannot be used for a lookup."""


class EmptyGridError(GridConfigurationError):
    """
    The pricing grid has no width columns or no drop rows.

    Typical causes:
    - Grid uploaded without data
    - CSV import produced only a header row
    """

    def __init__(self, width_count: int = 0, row_count: int = 0):
        message = "Pricing grid is empty"
        details = {
            "width_columns": width_count,
            "drop_rows": row_count,
            "resolution": "Upload a pricing grid with at least one width column and one drop row",
        }
        super().__init__(message, details)
        self.width_count = width_count
        self.row_count = row_count


class MalformedGridError(GridConfigurationError):
    """
    The pricing grid's shape is inconsistent or unrecognised.

    Raised when a drop row's price count differs from the width column count,
    or when raw grid data matches none of the known formats.
    """

    def __init__(self, message: str, problems: Optional[Iterable[str]] = None):
        problem_list = list(problems or [])
        details: Dict[str, Any] = {
            "resolution": "Re-upload the grid so every drop row has one price per width column",
        }
        if problem_list:
            details["problems"] = problem_list
        super().__init__(message, details)
        self.problems = problem_list


class GridNotFoundError(GridConfigurationError):
    """The requested pricing grid is not present in the pricing snapshot."""

    def __init__(self, grid_name: str):
        message = f"Pricing grid not found: {grid_name}"
        details = {
            "grid_name": grid_name,
            "resolution": "Assign a pricing grid to this product before quoting",
        }
        super().__init__(message, details)
        self.grid_name = grid_name


# =============================================================================
# MARKUP ERRORS
# =============================================================================

class MarkupConfigurationError(ConfigurationError):
    """
    Markup rules are invalid, or absent when a rule set is required.

    Typical causes:
    - Non-numeric or negative percentage in a rule record
    - Strict resolution requested against an empty rule set with no default
    """

    def __init__(self, message: str, rule: Optional[Dict[str, Any]] = None):
        details: Dict[str, Any] = {
            "resolution": "Review markup settings and set a default markup percentage",
        }
        if rule is not None:
            details["rule"] = rule
        super().__init__(message, details)
        self.rule = rule


# =============================================================================
# FABRIC ERRORS
# =============================================================================

class MissingFabricWidthError(ConfigurationError):
    """
    The fabric has no usable width configured.

    The optimizer must not guess a roll width: a wrong width silently
    produces an incorrect quote.
    """

    def __init__(self, fabric_width: Any = None, fabric_name: Optional[str] = None):
        message = "Fabric width is not configured"
        if fabric_name:
            message = f"Fabric width is not configured for {fabric_name}"
        details = {
            "fabric_width": fabric_width,
            "resolution": "Set the roll width on the fabric inventory item",
        }
        if fabric_name:
            details["fabric_name"] = fabric_name
        super().__init__(message, details)
        self.fabric_width = fabric_width
        self.fabric_name = fabric_name


class InvalidDimensionsError(ConfigurationError):
    """Treatment measurements cannot produce a fabric layout."""

    def __init__(self, field_name: str, value: Any):
        message = f"Invalid treatment dimension: {field_name}={value!r}"
        details = {
            "field": field_name,
            "value": value,
            "resolution": "Enter a positive measurement",
        }
        super().__init__(message, details)
        self.field_name = field_name
        self.value = value


# =============================================================================
# SERVICE ERRORS
# =============================================================================

class UnsupportedServiceUnitError(ConfigurationError):
    """A service line item uses a unit outside the supported enumeration."""

    def __init__(self, unit: Any, supported: Iterable[str]):
        supported_list = list(supported)
        message = f"Unsupported service unit: {unit!r}"
        details = {
            "unit": unit,
            "supported": supported_list,
        }
        super().__init__(message, details)
        self.unit = unit
        self.supported = supported_list
