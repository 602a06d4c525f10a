"""
Automatic quantities for service line items.

    per-window  number of surfaces in the project
    per-room    number of rooms
    per-length  total width (m) of surfaces that have a treatment
    others      entered by the user
"""

from __future__ import annotations

from typing import Any, Union

from core.exceptions import UnsupportedServiceUnitError
from logging_config import get_logger
from models.service import ProjectContext, QuantityResolution, ServiceQuantityUnit


logger = get_logger(__name__)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def parse_unit(unit: Union[str, ServiceQuantityUnit, Any]) -> ServiceQuantityUnit:
    """
    Parse a service unit string ("Per_Window", "per-window").

    Raises:
        UnsupportedServiceUnitError: Unit is not one of ServiceQuantityUnit
    """
    if isinstance(unit, ServiceQuantityUnit):
        return unit
    if isinstance(unit, str):
        normalized = unit.strip().lower().replace("_", "-").replace(" ", "-")
        for candidate in ServiceQuantityUnit:
            if candidate.value == normalized:
                return candidate
    raise UnsupportedServiceUnitError(unit, [u.value for u in ServiceQuantityUnit])


def resolve_quantity(
    unit: Union[str, ServiceQuantityUnit],
    project_context: ProjectContext,
) -> QuantityResolution:
    """
    Derive a service quantity from the project.

    Args:
        unit: Service unit
        project_context: Rooms and surfaces of the project

    Returns:
        QuantityResolution; quantity None and is_automatic False for units
        that need a manual quantity

    Raises:
        UnsupportedServiceUnitError: Unknown unit
    """
    unit = parse_unit(unit)

    if unit == ServiceQuantityUnit.PER_WINDOW:
        count = len(project_context.surfaces)
        resolution = QuantityResolution(count, True, f"{_plural(count, 'window')} detected")
    elif unit == ServiceQuantityUnit.PER_ROOM:
        count = len(project_context.rooms)
        resolution = QuantityResolution(count, True, f"{_plural(count, 'room')} detected")
    elif unit == ServiceQuantityUnit.PER_LENGTH:
        treated = [s for s in project_context.surfaces if s.has_treatment]
        metres = round(sum(s.width_cm for s in treated) / 100.0, 2)
        resolution = QuantityResolution(
            metres,
            True,
            f"{metres:.2f} m across {_plural(len(treated), 'treated window')}",
        )
    else:
        resolution = QuantityResolution(None, False, "Enter quantity manually")

    logger.debug(f"Service quantity for {unit.value}: {resolution.quantity}")
    return resolution
