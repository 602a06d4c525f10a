"""
Quote pricing models.

PricingSnapshot bundles the configuration one quoting pass reads: markup
rules, heading overrides and named pricing grids. It is frozen; when the
configuration changes the caller builds a new snapshot and re-prices.

Thread Safety:
    - PricingSnapshot and LinePrice are frozen (immutable)
    - One snapshot may be shared by concurrent pricing calls
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple

from core.exceptions import GridNotFoundError
from models.heading import HeadingPriceOverride
from models.markup import MarkupRule, MarkupSettings
from models.pricing_grid import PricingGrid


@dataclass(frozen=True)
class PricingSnapshot:
    """Immutable pricing configuration for one quoting pass."""

    markup_rules: Tuple[MarkupRule, ...] = field(default_factory=tuple)
    minimum_markup_percentage: float = 0.0
    require_markup: bool = False
    """Refuse to price lines when no markup rules are configured."""

    heading_overrides: Tuple[HeadingPriceOverride, ...] = field(default_factory=tuple)
    grids: Tuple[Tuple[str, PricingGrid], ...] = field(default_factory=tuple)
    """(name, grid) pairs."""

    @property
    def grid_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.grids)

    def get_grid(self, name: str) -> PricingGrid:
        """
        Look up a grid by name.

        Raises:
            GridNotFoundError: No grid with that name
        """
        for grid_name, grid in self.grids:
            if grid_name == name:
                return grid
        raise GridNotFoundError(name)

    def overrides_by_heading(self) -> Dict[str, HeadingPriceOverride]:
        return {override.heading_id: override for override in self.heading_overrides}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PricingSnapshot":
        """
        Create a snapshot from configuration records.

        Args:
            data: {
                "markup_rules": [{"category", "subcategory"?, "percentage", "priority"?}],
                "markup_settings": {"default_markup_percentage", "category_markups",
                                    "minimum_markup_percentage"},
                "headings": [{"id", "extras": {"machine_price"?, "hand_price"?}}],
                "grids": {"<name>": grid record in any supported format},
                "require_markup": bool
            }

        Raises:
            MarkupConfigurationError: A markup rule or setting is invalid
            MalformedGridError: A grid record is in an unrecognised format
        """
        # Imported here: modules.grid_lookup imports this package
        from modules.grid_lookup import normalize_grid_data

        data = data or {}

        rules = [MarkupRule.from_dict(rule) for rule in data.get("markup_rules") or []]
        minimum = 0.0
        settings_record = data.get("markup_settings")
        if settings_record:
            settings = MarkupSettings.from_dict(settings_record)
            rules.extend(settings.to_rules())
            minimum = settings.minimum_markup_percentage

        headings = tuple(
            HeadingPriceOverride.from_heading_record(record)
            for record in data.get("headings") or []
            if isinstance(record, dict)
        )

        grids = []
        for name, record in sorted((data.get("grids") or {}).items()):
            grid = normalize_grid_data(record)
            named = PricingGrid(grid.width_columns, grid.drop_rows, grid.unit, grid.name or name)
            grids.append((name, named))

        return cls(
            markup_rules=tuple(rules),
            minimum_markup_percentage=minimum,
            require_markup=bool(data.get("require_markup", False)),
            heading_overrides=headings,
            grids=tuple(grids),
        )


@dataclass(frozen=True)
class LinePrice:
    """Priced worksheet line: cost, markup and selling price with a breakdown."""

    cost: float
    markup_percentage: float
    markup_source: str
    selling_price: float
    price_source: str
    """Where the cost came from (grid, heading_override, vertical, per-window, ...)."""

    breakdown: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cost": self.cost,
            "markup_percentage": self.markup_percentage,
            "markup_source": self.markup_source,
            "selling_price": self.selling_price,
            "price_source": self.price_source,
            "breakdown": dict(self.breakdown),
        }
