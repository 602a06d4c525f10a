"""
Data models for the treatment pricing engine.

This module contains immutable dataclasses for:
- PricingGrid / DropRow / GridCell: width x drop price tables and lookups
- MarkupRule / MarkupSettings / MarkupResolution: markup configuration
- HeadingPriceOverride / TierPrices / ManufacturingPrice: making-up prices
- CurtainDimensions / FabricSpec / FabricOrientationResult: fabric layouts
- ProjectContext / QuantityResolution: service quantities
- PricingSnapshot / LinePrice: one quoting pass

All dataclasses are frozen, so a configuration snapshot can be shared by
concurrent calculations.
"""

from .pricing_grid import DropRow, GridCell, PricingGrid
from .markup import MarkupResolution, MarkupRule, MarkupSettings, MarkupSource
from .heading import Finish, HeadingPriceOverride, ManufacturingPrice, PriceSource, TierPrices
from .fabric import (
    CurtainDimensions,
    FabricOrientationResult,
    FabricSpec,
    Orientation,
    OrientationLayout,
)
from .service import ProjectContext, QuantityResolution, ServiceQuantityUnit, Surface
from .quote import LinePrice, PricingSnapshot

__all__ = [
    # Grid models
    "DropRow",
    "GridCell",
    "PricingGrid",
    # Markup models
    "MarkupResolution",
    "MarkupRule",
    "MarkupSettings",
    "MarkupSource",
    # Heading models
    "Finish",
    "HeadingPriceOverride",
    "ManufacturingPrice",
    "PriceSource",
    "TierPrices",
    # Fabric models
    "CurtainDimensions",
    "FabricOrientationResult",
    "FabricSpec",
    "Orientation",
    "OrientationLayout",
    # Service models
    "ProjectContext",
    "QuantityResolution",
    "ServiceQuantityUnit",
    "Surface",
    # Quote models
    "LinePrice",
    "PricingSnapshot",
]
