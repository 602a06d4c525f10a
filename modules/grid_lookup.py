"""
Pricing grid lookup.

Dimension-priced products (blinds, shutters, made-to-measure curtains) are
priced from a width x drop table. The lookup rounds the requested size UP to
the next band in each direction: a 70 cm wide blind on a grid with 50/80/100
columns is priced from the 80 column. Requests beyond the largest band are
clamped to it and flagged on the returned GridCell.

Also handles the grid formats found in older uploads (see
normalize_grid_data) and reports data problems (see validate_grid).

Usage:
    grid = normalize_grid_data(record)
    price = lookup_price(grid, width_cm=70, drop_cm=90)
"""

from __future__ import annotations

from typing import Dict, Any, List, Optional, Sequence, Tuple, Union

from core.exceptions import EmptyGridError, MalformedGridError
from logging_config import get_logger
from models.pricing_grid import DropRow, GridCell, PricingGrid
from modules.unit_resolver import GridUnit, infer_unit, parse_dimension, to_grid_unit


logger = get_logger(__name__)

GridLike = Union[PricingGrid, Dict[str, Any]]


# =============================================================================
# LOOKUP
# =============================================================================

def _as_grid(grid: GridLike) -> PricingGrid:
    if isinstance(grid, PricingGrid):
        return grid
    if isinstance(grid, dict):
        return PricingGrid.from_dict(grid)
    raise MalformedGridError(f"Unsupported pricing grid type: {type(grid).__name__}")


def ensure_usable(grid: PricingGrid) -> None:
    """
    Check the grid can be used for a lookup.

    Raises:
        EmptyGridError: No width columns or no drop rows
        MalformedGridError: A row's price count differs from the column count
    """
    if grid.is_empty:
        raise EmptyGridError(len(grid.width_columns), len(grid.drop_rows))

    expected = len(grid.width_columns)
    problems = [
        f"Row {index} (drop {row.drop}) has {len(row.prices)} prices but expected {expected}"
        for index, row in enumerate(grid.drop_rows)
        if len(row.prices) != expected
    ]
    if problems:
        raise MalformedGridError("Pricing grid rows do not match its width columns", problems)


def _select_band(values: Sequence[float], requested: float) -> Tuple[int, bool]:
    """
    Index of the smallest value >= requested, or of the largest value.

    Works on values rather than positions, so an unsorted grid still
    returns the correct band.

    Returns:
        (index, clamped)
    """
    best: Optional[int] = None
    for index, value in enumerate(values):
        if value >= requested and (best is None or value < values[best]):
            best = index
    if best is not None:
        return best, False

    largest = max(range(len(values)), key=lambda i: values[i])
    return largest, True


def lookup_cell(grid: GridLike, width_cm: float, drop_cm: float) -> GridCell:
    """
    Find the grid cell for a requested width and drop.

    Args:
        grid: PricingGrid or raw grid record
        width_cm: Requested width in centimetres
        drop_cm: Requested drop in centimetres

    Returns:
        GridCell with the price and the band chosen in each direction

    Raises:
        EmptyGridError: Grid has no columns or no rows
        MalformedGridError: Grid rows do not match its columns
    """
    grid = _as_grid(grid)
    ensure_usable(grid)

    unit = infer_unit(grid)
    width = to_grid_unit(width_cm, unit)
    drop = to_grid_unit(drop_cm, unit)

    width_index, width_clamped = _select_band(grid.width_values, width)
    drop_index, drop_clamped = _select_band(grid.drop_values, drop)
    row = grid.drop_rows[drop_index]

    cell = GridCell(
        width_index=width_index,
        drop_index=drop_index,
        width_label=grid.width_columns[width_index],
        drop_label=row.drop,
        unit=unit,
        requested_width=width,
        requested_drop=drop,
        price=row.prices[width_index],
        width_clamped=width_clamped,
        drop_clamped=drop_clamped,
    )

    if cell.is_clamped:
        logger.warning(
            f"Request {width}x{drop}{unit.value} exceeds grid '{grid.name or 'unnamed'}', "
            f"clamped to {cell.width_label}x{cell.drop_label}"
        )
    else:
        logger.debug(f"Grid cell {cell.width_label}x{cell.drop_label}{unit.value} = {cell.price}")
    return cell


def lookup_price(grid: GridLike, width_cm: float, drop_cm: float) -> float:
    """Price for a requested width and drop (see lookup_cell)."""
    return lookup_cell(grid, width_cm, drop_cm).price


# =============================================================================
# NORMALIZATION
# =============================================================================

def _label(value: float) -> str:
    """Format a numeric dimension as a grid label ("80", "12.5")."""
    if value == int(value):
        return str(int(value))
    return str(value)


def _build_grid(
    widths: List[Any],
    drops: List[Any],
    price_rows: List[List[Any]],
    unit: Optional[GridUnit],
    name: str,
) -> PricingGrid:
    """Sort columns and rows ascending, re-ordering prices with them."""
    width_values = [parse_dimension(w) for w in widths]
    column_order = sorted(range(len(width_values)), key=lambda i: width_values[i])

    rows = []
    for drop, prices in zip(drops, price_rows):
        parsed = [parse_dimension(p) for p in prices]
        if len(parsed) == len(width_values):
            parsed = [parsed[i] for i in column_order]
        rows.append(DropRow(drop=_label(parse_dimension(drop)), prices=tuple(parsed)))
    rows.sort(key=lambda row: row.drop_value)

    return PricingGrid(
        width_columns=tuple(_label(width_values[i]) for i in column_order),
        drop_rows=tuple(rows),
        unit=unit,
        name=name,
    )


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def normalize_grid_data(data: Any) -> PricingGrid:
    """
    Convert any known grid record shape into a sorted PricingGrid.

    Recognised shapes:
        canonical / B: {widthColumns, dropRows: [{drop, prices}]}
        A:             {widthRanges, dropRanges, prices: [[...]]}
        C:             {widthColumns, dropRows: [drop, ...], prices: {"w_d": price}}
        D:             {widths, heights, prices: [[...]]}

    Missing prices in shape C read as 0. An explicit "unit" tag is kept.

    Raises:
        MalformedGridError: The data matches none of the shapes
    """
    if isinstance(data, PricingGrid):
        return data
    if not isinstance(data, dict):
        raise MalformedGridError(f"Pricing grid data must be an object, got {type(data).__name__}")

    unit = GridUnit.parse(data.get("unit"))
    name = str(data.get("name") or "")
    prices = data.get("prices")

    widths = data.get("widthColumns")
    drop_rows = data.get("dropRows")
    if _is_list(widths) and _is_list(drop_rows):
        if all(isinstance(row, dict) for row in drop_rows):
            logger.debug("Normalizing grid in widthColumns/dropRows format")
            return _build_grid(
                list(widths),
                [row.get("drop") for row in drop_rows],
                [list(row.get("prices") or []) for row in drop_rows],
                unit,
                name,
            )
        if isinstance(prices, dict):
            logger.debug("Normalizing grid in keyed-prices format")
            price_rows = []
            for drop in drop_rows:
                drop_label = _label(parse_dimension(drop))
                row = []
                for width in widths:
                    width_label = _label(parse_dimension(width))
                    value = prices.get(f"{width_label}_{drop_label}")
                    if value is None:
                        value = prices.get(f"{width_label}-{drop_label}")
                    if value is None:
                        value = prices.get(f"{drop_label}_{width_label}")
                    row.append(value if value is not None else 0)
                price_rows.append(row)
            return _build_grid(list(widths), list(drop_rows), price_rows, unit, name)

    for width_key, drop_key in (("widthRanges", "dropRanges"), ("widths", "heights")):
        widths = data.get(width_key)
        drops = data.get(drop_key)
        if _is_list(widths) and _is_list(drops) and _is_list(prices):
            logger.debug(f"Normalizing grid in {width_key}/{drop_key} format")
            price_rows = [
                list(prices[i]) if i < len(prices) and _is_list(prices[i]) else []
                for i in range(len(drops))
            ]
            return _build_grid(list(widths), list(drops), price_rows, unit, name)

    raise MalformedGridError(
        "Pricing grid data is in an unrecognised format",
        problems=[f"Keys present: {', '.join(sorted(str(k) for k in data)) or 'none'}"],
    )


# =============================================================================
# VALIDATION & CONVERSION
# =============================================================================

def validate_grid(grid: GridLike) -> List[str]:
    """
    List every problem with a grid (empty list when the grid is valid).

    Unlike ensure_usable this never raises, so an upload screen can show
    all problems at once.
    """
    grid = _as_grid(grid)
    problems: List[str] = []

    if not grid.width_columns:
        problems.append("No width columns defined")
    if not grid.drop_rows:
        problems.append("No drop rows defined")

    expected = len(grid.width_columns)
    for index, row in enumerate(grid.drop_rows):
        if len(row.prices) != expected:
            problems.append(
                f"Row {index} (drop {row.drop}) has {len(row.prices)} prices but expected {expected}"
            )

    drops = grid.drop_values
    if len(set(drops)) != len(drops):
        problems.append("Duplicate drop values found")

    widths = grid.width_values
    if len(set(widths)) != len(widths):
        problems.append("Duplicate width values found")

    if any(w <= 0 for w in widths):
        problems.append("Width values must be positive")
    if any(d <= 0 for d in drops):
        problems.append("Drop values must be positive")

    return problems


def convert_grid_unit(grid: GridLike, target: GridUnit) -> PricingGrid:
    """
    Rescale a grid's width and drop labels to another unit.

    Prices are unchanged. The result carries an explicit unit tag.
    """
    grid = _as_grid(grid)
    source = infer_unit(grid)
    if source == target:
        return PricingGrid(grid.width_columns, grid.drop_rows, target, grid.name)

    factor = 10.0 if target == GridUnit.MM else 0.1

    def scale(label: str) -> str:
        return _label(round(parse_dimension(label) * factor, 6))

    return PricingGrid(
        width_columns=tuple(scale(w) for w in grid.width_columns),
        drop_rows=tuple(DropRow(drop=scale(row.drop), prices=row.prices) for row in grid.drop_rows),
        unit=target,
        name=grid.name,
    )
