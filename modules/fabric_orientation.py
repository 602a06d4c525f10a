"""
Fabric orientation optimizer.

Compares cutting a curtain vertically (pieces run down the drop and are
joined side by side) with cutting it horizontally (railroaded: the roll width
covers the drop and pieces run across). The cheaper layout is recommended;
on a tie the horizontal layout is recommended.

The roll width is never guessed. A fabric without a width raises
MissingFabricWidthError.

Usage:
    dims = CurtainDimensions(rail_width=200, drop=250, fullness=2.0, panel_count=2)
    result = compare_orientations(dims, fabric_width=137, price_per_length=24.0)
    print(result.recommendation_text)
"""

from __future__ import annotations

import math
from typing import Any, List, Optional

from core.exceptions import InvalidDimensionsError, MissingFabricWidthError
from logging_config import get_logger
from models.fabric import (
    CurtainDimensions,
    FabricOrientationResult,
    FabricSpec,
    Orientation,
    OrientationLayout,
)


logger = get_logger(__name__)

PATTERN_HORIZONTAL_WARNING = "Pattern matching may be difficult with horizontal orientation"
PLAIN_HORIZONTAL_HINT = "Consider horizontal orientation for fabric savings"

# Widest roll the plain-fabric hint applies to (cm)
PLAIN_HINT_MAX_WIDTH = 200.0


def _pieces(length: float, fabric_width: float) -> int:
    # 274 / 137 is exactly 2 pieces
    return max(1, math.ceil(round(length / fabric_width, 9)))


def _round_to_repeat(length: float, pattern_repeat: float) -> float:
    if pattern_repeat and pattern_repeat > 0:
        return math.ceil(round(length / pattern_repeat, 9)) * pattern_repeat
    return length


def _require_fabric_width(fabric_width: Any, fabric_name: Optional[str] = None) -> float:
    if fabric_width is None or isinstance(fabric_width, bool):
        raise MissingFabricWidthError(fabric_width, fabric_name)
    try:
        width = float(fabric_width)
    except (TypeError, ValueError):
        raise MissingFabricWidthError(fabric_width, fabric_name) from None
    if width != width or width <= 0:
        raise MissingFabricWidthError(fabric_width, fabric_name)
    return width


def _validate_dimensions(dimensions: CurtainDimensions) -> None:
    if dimensions.rail_width <= 0:
        raise InvalidDimensionsError("rail_width", dimensions.rail_width)
    if dimensions.drop <= 0:
        raise InvalidDimensionsError("drop", dimensions.drop)
    if dimensions.fullness <= 0:
        raise InvalidDimensionsError("fullness", dimensions.fullness)
    if dimensions.panel_count < 1:
        raise InvalidDimensionsError("panel_count", dimensions.panel_count)


def calculate_layout(
    orientation: Orientation,
    dimensions: CurtainDimensions,
    fabric_width: float,
    price_per_length: float,
    pattern_repeat: float = 0.0,
) -> OrientationLayout:
    """
    Fabric needed for one orientation.

    Vertical: pieces = ceil(total width / roll width), each cut to the total
    drop. Horizontal: pieces = ceil(total drop / roll width), each cut to the
    total width. Cuts round up to the pattern repeat; every join adds the
    seam allowance; waste is added on top.

    Args:
        orientation: Layout to calculate
        dimensions: Curtain measurements and allowances (cm)
        fabric_width: Roll width (cm)
        price_per_length: Fabric price per metre
        pattern_repeat: Pattern repeat (cm), 0 for none

    Raises:
        MissingFabricWidthError: fabric_width is None or not positive
        InvalidDimensionsError: Rail width, drop, fullness or panels unusable
    """
    fabric_width = _require_fabric_width(fabric_width)
    _validate_dimensions(dimensions)

    if orientation == Orientation.VERTICAL:
        pieces = _pieces(dimensions.total_width, fabric_width)
        cut_length = _round_to_repeat(dimensions.total_drop, pattern_repeat)
    else:
        pieces = _pieces(dimensions.total_drop, fabric_width)
        cut_length = _round_to_repeat(dimensions.total_width, pattern_repeat)

    seams = max(0, pieces - 1)
    total_cm = pieces * cut_length + seams * dimensions.seam_hem
    total_m = round(total_cm / 100.0 * (1 + dimensions.waste_percent / 100.0), 2)

    return OrientationLayout(
        orientation=orientation,
        widths_required=pieces,
        seams=seams,
        cut_length_cm=round(cut_length, 2),
        total_length_m=total_m,
        total_cost=round(total_m * price_per_length, 2),
    )


def compare_orientations(
    dimensions: CurtainDimensions,
    fabric_width: Optional[float],
    price_per_length: float,
    pattern_repeat: float = 0.0,
    fabric: Optional[FabricSpec] = None,
    horizontal_pattern_repeat: Optional[float] = None,
    selected: Optional[Orientation] = None,
) -> FabricOrientationResult:
    """
    Calculate both orientations and recommend the cheaper one.

    Args:
        dimensions: Curtain measurements and allowances (cm)
        fabric_width: Roll width (cm) from the fabric inventory item
        price_per_length: Fabric price per metre
        pattern_repeat: Pattern repeat (cm) matched on vertical cuts, 0 for none
        fabric: Fabric metadata, used only for warnings
        horizontal_pattern_repeat: Repeat matched on railroaded cuts; None
                                   uses pattern_repeat
        selected: Orientation chosen on the worksheet, if any. Warnings
                  describe it, or the recommendation when none is chosen

    Returns:
        FabricOrientationResult; ties recommend horizontal

    Raises:
        MissingFabricWidthError: fabric_width is None or not positive
        InvalidDimensionsError: Rail width, drop, fullness or panels unusable
    """
    fabric_width = _require_fabric_width(fabric_width, fabric.name if fabric else None)

    vertical = calculate_layout(
        Orientation.VERTICAL, dimensions, fabric_width, price_per_length, pattern_repeat
    )
    horizontal = calculate_layout(
        Orientation.HORIZONTAL, dimensions, fabric_width, price_per_length,
        pattern_repeat if horizontal_pattern_repeat is None else horizontal_pattern_repeat,
    )

    if vertical.total_cost < horizontal.total_cost:
        recommendation = Orientation.VERTICAL
    else:
        recommendation = Orientation.HORIZONTAL
    savings = round(abs(vertical.total_cost - horizontal.total_cost), 2)

    current = selected or recommendation
    warnings: List[str] = []
    if fabric is not None and fabric.requires_pattern_matching and current == Orientation.HORIZONTAL:
        warnings.append(PATTERN_HORIZONTAL_WARNING)
    if current == Orientation.HORIZONTAL and horizontal.seams > 0:
        warnings.append(
            f"Horizontal layout has {horizontal.seams} seam{'s' if horizontal.seams != 1 else ''} "
            f"running across the curtain"
        )
    if (
        selected == Orientation.VERTICAL
        and fabric is not None
        and fabric.is_plain
        and fabric_width <= PLAIN_HINT_MAX_WIDTH
        and dimensions.drop < fabric_width
    ):
        warnings.append(PLAIN_HORIZONTAL_HINT)

    logger.debug(
        f"Orientation: vertical {vertical.total_length_m}m/{vertical.total_cost}, "
        f"horizontal {horizontal.total_length_m}m/{horizontal.total_cost}, "
        f"recommend {recommendation.value}"
    )

    return FabricOrientationResult(
        vertical=vertical,
        horizontal=horizontal,
        recommendation=recommendation,
        savings=savings,
        warnings=tuple(warnings),
    )
