"""
Pricing grid data models.

A pricing grid is a 2-D table mapping (width, drop) to a price, used for
dimension-based products (blinds, shutters, made-to-measure curtains).

Labels are kept as the strings the grid author typed ("80", "1200mm").
Numeric values are derived on demand with the defensive dimension parser,
so imperfect trade data never raises while being read.

Thread Safety:
    - All models here are frozen dataclasses (immutable)
    - Safe to share one grid across concurrent calculations
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Tuple

from modules.unit_resolver import GridUnit, parse_dimension


@dataclass(frozen=True)
class DropRow:
    """
    One drop row of a pricing grid.

    Holds one price per width column, in column order.
    """

    drop: str
    """Drop label as authored (e.g., '100', '1200')."""

    prices: Tuple[float, ...]
    """Prices parallel to the grid's width columns."""

    @property
    def drop_value(self) -> float:
        """Numeric drop value (0.0 when the label cannot be parsed)."""
        return parse_dimension(self.drop)

    def to_dict(self) -> Dict[str, Any]:
        return {"drop": self.drop, "prices": list(self.prices)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DropRow":
        return cls(
            drop=str(data.get("drop", "")),
            prices=tuple(parse_dimension(p) for p in data.get("prices") or []),
        )


@dataclass(frozen=True)
class PricingGrid:
    """
    A width x drop price table.

    Invariant (reported by validate_grid, enforced by lookup): every drop
    row has exactly one price per width column.
    """

    width_columns: Tuple[str, ...]
    """Width labels, ascending (numeric-as-string)."""

    drop_rows: Tuple[DropRow, ...]
    """Drop rows, ascending by drop."""

    unit: Optional[GridUnit] = None
    """Explicit unit tag; None means infer from the width labels."""

    name: str = ""
    """Optional display name (e.g., 'Roller Band A')."""

    @property
    def width_values(self) -> List[float]:
        """Numeric width values (0.0 for unparseable labels)."""
        return [parse_dimension(w) for w in self.width_columns]

    @property
    def drop_values(self) -> List[float]:
        """Numeric drop values (0.0 for unparseable labels)."""
        return [row.drop_value for row in self.drop_rows]

    @property
    def is_empty(self) -> bool:
        """Whether the grid lacks width columns or drop rows."""
        return not self.width_columns or not self.drop_rows

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the external record shape."""
        data: Dict[str, Any] = {
            "widthColumns": list(self.width_columns),
            "dropRows": [row.to_dict() for row in self.drop_rows],
        }
        if self.unit is not None:
            data["unit"] = self.unit.value
        if self.name:
            data["name"] = self.name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PricingGrid":
        """
        Create a grid from the canonical external record.

        Args:
            data: {"widthColumns": [...], "dropRows": [{"drop", "prices"}], "unit"?}

        Returns:
            PricingGrid (not validated; lookup validates before use)
        """
        return cls(
            width_columns=tuple(str(w) for w in data.get("widthColumns") or []),
            drop_rows=tuple(
                DropRow.from_dict(row) for row in data.get("dropRows") or []
                if isinstance(row, dict)
            ),
            unit=GridUnit.parse(data.get("unit")),
            name=str(data.get("name") or ""),
        )


@dataclass(frozen=True)
class GridCell:
    """
    The cell a grid lookup landed on.

    Carries enough context for a breakdown line ("80 x 100 cm band").
    """

    width_index: int
    drop_index: int
    width_label: str
    drop_label: str
    unit: GridUnit
    requested_width: float
    """Requested width converted to the grid unit."""

    requested_drop: float
    """Requested drop converted to the grid unit."""

    price: float

    width_clamped: bool = False
    """True when the request exceeded every width column."""

    drop_clamped: bool = False
    """True when the request exceeded every drop row."""

    @property
    def is_clamped(self) -> bool:
        return self.width_clamped or self.drop_clamped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width_index": self.width_index,
            "drop_index": self.drop_index,
            "width_label": self.width_label,
            "drop_label": self.drop_label,
            "unit": self.unit.value,
            "requested_width": self.requested_width,
            "requested_drop": self.requested_drop,
            "price": self.price,
            "width_clamped": self.width_clamped,
            "drop_clamped": self.drop_clamped,
        }
