"""
Dimension unit resolver for pricing grids.

Grid authors rarely say which unit their width/drop labels use. Typical
window widths span 30-300 cm (300-3000 mm), so a bare label of 500 is
implausible as centimetres (5 m) but ordinary as millimetres (50 cm).
The resolver uses that boundary when no explicit tag is present.

Imports nothing from the project except logging, so the models can
depend on it.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Iterable, Optional

from logging_config import get_logger


logger = get_logger(__name__)

# Largest-width threshold at or above which an untagged grid is millimetres
MM_THRESHOLD = 500.0

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


class GridUnit(str, Enum):
    """Unit the grid's width and drop labels are expressed in."""

    MM = "mm"
    CM = "cm"

    @classmethod
    def parse(cls, value: Any) -> Optional["GridUnit"]:
        """Return the unit for an explicit tag, or None if absent/unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            tag = value.strip().lower()
            for unit in cls:
                if unit.value == tag:
                    return unit
        return None


def parse_dimension(value: Any) -> float:
    """
    Parse a dimension or price label defensively.

    Non-numeric characters are stripped ("1200mm" -> 1200.0, "£45" -> 45.0)
    and the leading number is read, so a range label gives its lower bound
    ("1200-1500" -> 1200.0). Anything with no leading number, including
    None, NaN and infinities, becomes 0.0. Never raises.

    Args:
        value: Number, numeric string, or arbitrary authoring data

    Returns:
        Parsed float, or 0.0
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", str(value)))
        if match is None:
            return 0.0
        number = float(match.group())
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _width_labels(grid: Any) -> Iterable[Any]:
    if grid is None:
        return ()
    if isinstance(grid, dict):
        return grid.get("widthColumns") or ()
    return getattr(grid, "width_columns", None) or ()


def _explicit_unit(grid: Any) -> Optional[GridUnit]:
    if grid is None:
        return None
    if isinstance(grid, dict):
        return GridUnit.parse(grid.get("unit"))
    return GridUnit.parse(getattr(grid, "unit", None))


def infer_unit(grid: Any) -> GridUnit:
    """
    Infer whether a grid's dimensions are millimetres or centimetres.

    An explicit unit tag always wins. Otherwise the largest width label
    decides: >= 500 means millimetres, anything smaller (including an empty
    or missing grid) means centimetres.

    Args:
        grid: PricingGrid, raw grid mapping, or None

    Returns:
        GridUnit.MM or GridUnit.CM
    """
    explicit = _explicit_unit(grid)
    if explicit is not None:
        return explicit

    max_width = max((parse_dimension(w) for w in _width_labels(grid)), default=0.0)
    unit = GridUnit.MM if max_width >= MM_THRESHOLD else GridUnit.CM
    logger.debug(f"Inferred grid unit {unit.value} from max width {max_width}")
    return unit


def to_grid_unit(value_cm: float, unit: GridUnit) -> float:
    """Convert a centimetre measurement into the grid's unit."""
    if unit == GridUnit.MM:
        return value_cm * 10.0
    return value_cm
