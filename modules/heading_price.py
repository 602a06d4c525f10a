"""
Curtain manufacturing price resolution.

Priority chain for the price per unit length, checked for the requested
finish only:

    1. heading override  (the selected heading's own machine/hand price)
    2. pricing method    (the template's chosen pricing method)
    3. template default  (the template's base prices)
    4. none              (0, so the UI can prompt for a price)
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Union

from logging_config import get_logger
from models.heading import (
    Finish,
    HeadingPriceOverride,
    ManufacturingPrice,
    PriceSource,
    TierPrices,
)
from modules.strategies import resolve_first


logger = get_logger(__name__)

Overrides = Union[Mapping[str, HeadingPriceOverride], Iterable[HeadingPriceOverride]]


def _index_overrides(overrides: Optional[Overrides]) -> Mapping[str, HeadingPriceOverride]:
    if not overrides:
        return {}
    if isinstance(overrides, Mapping):
        return overrides
    return {override.heading_id: override for override in overrides}


def _heading_override(finish, heading_id, overrides, method_prices, template_defaults):
    if not heading_id:
        return None
    override = overrides.get(heading_id)
    return override.price_for(finish) if override else None


def _pricing_method(finish, heading_id, overrides, method_prices, template_defaults):
    return method_prices.price_for(finish) if method_prices else None


def _template_default(finish, heading_id, overrides, method_prices, template_defaults):
    return template_defaults.price_for(finish) if template_defaults else None


MANUFACTURING_PRICE_STRATEGIES = (
    (PriceSource.HEADING_OVERRIDE, _heading_override),
    (PriceSource.PRICING_METHOD, _pricing_method),
    (PriceSource.TEMPLATE_DEFAULT, _template_default),
)


def resolve_manufacturing_price(
    is_hand_finished: bool,
    selected_heading_id: Optional[str],
    heading_overrides: Optional[Overrides] = None,
    pricing_method_prices: Optional[TierPrices] = None,
    template_defaults: Optional[TierPrices] = None,
) -> ManufacturingPrice:
    """
    Resolve the manufacturing price per unit length.

    Args:
        is_hand_finished: Hand finish instead of machine finish
        selected_heading_id: Heading chosen on the worksheet, if any
        heading_overrides: Overrides keyed by heading id, or an iterable of them
        pricing_method_prices: Prices from the template's pricing method
        template_defaults: The template's base prices

    Returns:
        ManufacturingPrice tagged with the tier that supplied it
        (price 0.0 and source "none" when no tier has a positive price)
    """
    finish = Finish.from_flag(is_hand_finished)
    resolution = resolve_first(
        MANUFACTURING_PRICE_STRATEGIES,
        finish,
        selected_heading_id,
        _index_overrides(heading_overrides),
        pricing_method_prices,
        template_defaults,
    )

    if resolution is None:
        logger.debug(f"No {finish.value} manufacturing price for heading {selected_heading_id}")
        return ManufacturingPrice(price=0.0, source=PriceSource.NONE, finish=finish)

    logger.debug(
        f"{finish.value.title()} manufacturing price {resolution.value} "
        f"from {resolution.source.value} (heading {selected_heading_id})"
    )
    return ManufacturingPrice(price=resolution.value, source=resolution.source, finish=finish)
