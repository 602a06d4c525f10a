"""
Service line item models.

Services (fitting, measuring, steaming) are charged per window, per room,
per metre of track, per job, per hour or at a flat rate. The first three can
be counted from the project; the rest need a quantity from the user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, Tuple

from modules.unit_resolver import parse_dimension


class ServiceQuantityUnit(str, Enum):
    """Unit a service is charged in."""

    PER_WINDOW = "per-window"
    PER_ROOM = "per-room"
    PER_LENGTH = "per-length"
    PER_JOB = "per-job"
    PER_HOUR = "per-hour"
    FLAT_RATE = "flat-rate"

    @property
    def is_automatic(self) -> bool:
        """Whether the quantity can be counted from the project."""
        return self in (
            ServiceQuantityUnit.PER_WINDOW,
            ServiceQuantityUnit.PER_ROOM,
            ServiceQuantityUnit.PER_LENGTH,
        )


@dataclass(frozen=True)
class Surface:
    """A window or other opening that can take a treatment."""

    surface_id: str
    room_id: str = ""
    width_cm: float = 0.0
    has_treatment: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Surface":
        return cls(
            surface_id=str(data.get("id", "")),
            room_id=str(data.get("room_id", "")),
            width_cm=parse_dimension(data.get("width", data.get("width_cm"))),
            has_treatment=bool(data.get("has_treatment", False)),
        )


@dataclass(frozen=True)
class ProjectContext:
    """Rooms and surfaces of the project being quoted."""

    rooms: Tuple[str, ...] = field(default_factory=tuple)
    surfaces: Tuple[Surface, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ProjectContext":
        """
        Create a context from a project record.

        Args:
            data: {"rooms": [{"id"} | id, ...], "surfaces": [{"id", "room_id", "width", "has_treatment"}]}
        """
        data = data or {}
        rooms = tuple(
            str(room.get("id", "")) if isinstance(room, dict) else str(room)
            for room in data.get("rooms") or []
        )
        surfaces = tuple(
            Surface.from_dict(surface) for surface in data.get("surfaces") or []
            if isinstance(surface, dict)
        )
        return cls(rooms=rooms, surfaces=surfaces)


@dataclass(frozen=True)
class QuantityResolution:
    """Quantity for a service line and how it was arrived at."""

    quantity: Optional[float]
    """None when the user must enter the quantity."""

    is_automatic: bool
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quantity": self.quantity,
            "is_automatic": self.is_automatic,
            "explanation": self.explanation,
        }
