"""
Quote pricing service.

Composes the resolvers into priced worksheet lines. Every method reads the
same frozen PricingSnapshot, so a whole quote is priced against one
consistent set of markups, grids and heading prices.

Flow (per line):
    1. Work out the cost (grid cell, manufacturing rate x length,
       recommended fabric layout, or service quantity x rate)
    2. Resolve the markup for the line's category/subcategory
    3. Raise the markup to the account minimum
    4. Apply it and return a LinePrice with a breakdown

Errors:
    Configuration errors are logged at WARNING and re-raised unchanged.

Usage:
    snapshot = PricingSnapshot.from_dict(config_records)
    service = QuotePricingService(snapshot, quote_id="a1b2c3d4")
    line = service.price_grid_item("roller_band_a", 120, 160, "blinds", "roller")
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from core.exceptions import PricingEngineError
from logging_config import get_logger, get_quote_logger
from models.fabric import CurtainDimensions, FabricSpec
from models.heading import TierPrices
from models.quote import LinePrice, PricingSnapshot
from models.service import ProjectContext, ServiceQuantityUnit
from modules.fabric_orientation import compare_orientations
from modules.grid_lookup import lookup_cell
from modules.heading_price import resolve_manufacturing_price
from modules.markup import apply_markup, apply_minimum, resolve_markup_detail
from modules.service_quantity import parse_unit, resolve_quantity


# Module logger
logger = get_logger(__name__)


class QuotePricingService:
    """
    Prices worksheet lines against one pricing snapshot.

    Attributes:
        snapshot: The configuration every line is priced against
    """

    def __init__(self, snapshot: PricingSnapshot, quote_id: Optional[str] = None):
        """
        Initialize the service.

        Args:
            snapshot: Frozen pricing configuration
            quote_id: Optional quote identifier, used to name the logger
        """
        self._snapshot = snapshot
        self._logger = get_quote_logger(quote_id) if quote_id else logger

    @property
    def snapshot(self) -> PricingSnapshot:
        return self._snapshot

    def _finish(
        self,
        cost: float,
        category: Optional[str],
        subcategory: Optional[str],
        price_source: str,
        breakdown: Dict[str, Any],
    ) -> LinePrice:
        try:
            resolution = resolve_markup_detail(
                category, subcategory, self._snapshot.markup_rules,
                require_rules=self._snapshot.require_markup,
            )
        except PricingEngineError as e:
            self._logger.warning(f"Markup resolution failed for {category}/{subcategory}: {e}")
            raise
        if not self._snapshot.markup_rules:
            self._logger.warning("No markup rules configured, line priced at cost")

        percentage = apply_minimum(resolution.percentage, self._snapshot.minimum_markup_percentage)
        if percentage != resolution.percentage:
            breakdown["minimum_markup_applied"] = True

        selling = round(apply_markup(cost, percentage), 2)
        self._logger.info(
            f"Line priced: {price_source} cost={cost} markup={percentage}% "
            f"({resolution.source.value}) selling={selling}"
        )
        return LinePrice(
            cost=cost,
            markup_percentage=percentage,
            markup_source=resolution.source.value,
            selling_price=selling,
            price_source=price_source,
            breakdown=breakdown,
        )

    def price_grid_item(
        self,
        grid_name: str,
        width_cm: float,
        drop_cm: float,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
    ) -> LinePrice:
        """
        Price a dimension-priced product from a named grid.

        Raises:
            GridNotFoundError: No grid with that name in the snapshot
            EmptyGridError, MalformedGridError: Grid cannot be used
        """
        try:
            grid = self._snapshot.get_grid(grid_name)
            cell = lookup_cell(grid, width_cm, drop_cm)
        except PricingEngineError as e:
            self._logger.warning(f"Grid pricing failed for '{grid_name}': {e}")
            raise

        breakdown = {"grid": grid_name, **cell.to_dict()}
        return self._finish(cell.price, category, subcategory, "grid", breakdown)

    def price_manufacturing(
        self,
        is_hand_finished: bool,
        heading_id: Optional[str],
        method_prices: Optional[TierPrices],
        template_defaults: Optional[TierPrices],
        length_m: float,
        category: Optional[str] = "curtains",
        subcategory: Optional[str] = None,
    ) -> LinePrice:
        """
        Price curtain making-up: resolved rate per metre x fabric length.

        A line whose rate resolves to nothing costs 0 with source "none".
        """
        manufacturing = resolve_manufacturing_price(
            is_hand_finished,
            heading_id,
            self._snapshot.overrides_by_heading(),
            method_prices,
            template_defaults,
        )
        cost = round(manufacturing.price * length_m, 2)
        breakdown = {**manufacturing.to_dict(), "heading_id": heading_id, "length_m": length_m}
        return self._finish(cost, category, subcategory, manufacturing.source.value, breakdown)

    def price_fabric(
        self,
        dimensions: CurtainDimensions,
        fabric: FabricSpec,
        price_per_length: float,
        category: Optional[str] = "fabric",
        subcategory: Optional[str] = None,
    ) -> LinePrice:
        """
        Price fabric using the cheaper of the two orientations.

        Raises:
            MissingFabricWidthError: Fabric has no roll width
            InvalidDimensionsError: Measurements unusable
        """
        try:
            result = compare_orientations(
                dimensions, fabric.width, price_per_length, fabric.pattern_repeat, fabric,
                horizontal_pattern_repeat=fabric.horizontal_pattern_repeat,
            )
        except PricingEngineError as e:
            self._logger.warning(f"Fabric pricing failed for '{fabric.name or 'fabric'}': {e}")
            raise

        cost = result.recommended.total_cost
        return self._finish(cost, category, subcategory, result.recommendation.value, result.to_dict())

    def price_service(
        self,
        unit: Union[str, ServiceQuantityUnit],
        unit_price: float,
        context: ProjectContext,
        manual_quantity: Optional[float] = None,
        category: Optional[str] = "installation",
    ) -> LinePrice:
        """
        Price a service line.

        Automatic units take their quantity from the project. Manual units
        use manual_quantity; without one the line costs 0 and the breakdown
        says a quantity is required.

        Raises:
            UnsupportedServiceUnitError: Unknown unit
        """
        try:
            resolution = resolve_quantity(unit, context)
        except PricingEngineError as e:
            self._logger.warning(f"Service pricing failed: {e}")
            raise

        quantity = resolution.quantity
        explanation = resolution.explanation
        if not resolution.is_automatic:
            quantity = manual_quantity
            if quantity is None:
                explanation = "Quantity required"
            else:
                explanation = f"{quantity:g} entered manually"

        cost = round((quantity or 0) * unit_price, 2)
        breakdown = {
            "unit": parse_unit(unit).value,
            "quantity": quantity,
            "is_automatic": resolution.is_automatic,
            "explanation": explanation,
            "unit_price": unit_price,
        }
        return self._finish(cost, category, None, breakdown["unit"], breakdown)

