"""
Curtain heading and manufacturing price models.

Manufacturing (making-up) is charged per unit length of fabric and depends on
the finish: machine-sewn or hand-finished. The price can come from three
places, most specific first: an override on the selected heading, the
template's pricing method, or the template's own default.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional


def _positive_or_none(value: Any) -> Optional[float]:
    """Parse a configured price; absent, non-numeric or <= 0 means not set."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number <= 0:
        return None
    return number


class Finish(str, Enum):
    """How the curtain is made up."""

    MACHINE = "machine"
    HAND = "hand"

    @classmethod
    def from_flag(cls, is_hand_finished: bool) -> "Finish":
        return cls.HAND if is_hand_finished else cls.MACHINE


class PriceSource(str, Enum):
    """Which tier of the manufacturing price chain produced a price."""

    HEADING_OVERRIDE = "heading_override"
    PRICING_METHOD = "pricing_method"
    TEMPLATE_DEFAULT = "template_default"
    NONE = "none"


@dataclass(frozen=True)
class HeadingPriceOverride:
    """
    Per-heading manufacturing prices.

    Stored in the heading option's "extras" so a heading that takes longer
    to sew (e.g., hand-pleated) can carry its own rate.
    """

    heading_id: str
    machine_price: Optional[float] = None
    """Machine-finished price per unit length, None when not overridden."""

    hand_price: Optional[float] = None
    """Hand-finished price per unit length, None when not overridden."""

    def price_for(self, finish: Finish) -> Optional[float]:
        """Override for the given finish only (positive value or None)."""
        value = self.hand_price if finish == Finish.HAND else self.machine_price
        return _positive_or_none(value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.heading_id,
            "extras": {"machine_price": self.machine_price, "hand_price": self.hand_price},
        }

    @classmethod
    def from_heading_record(cls, data: Dict[str, Any]) -> "HeadingPriceOverride":
        """
        Create an override from a heading option record.

        Args:
            data: {"id", "fullness"?, "price"?, "extras": {"machine_price"?, "hand_price"?}}
        """
        extras = data.get("extras") or {}
        return cls(
            heading_id=str(data.get("id", "")),
            machine_price=_positive_or_none(extras.get("machine_price")),
            hand_price=_positive_or_none(extras.get("hand_price")),
        )


@dataclass(frozen=True)
class TierPrices:
    """
    Machine and hand prices per unit length from one tier.

    Used for both the pricing method and the template default.
    """

    machine_price_per_length: Optional[float] = None
    hand_price_per_length: Optional[float] = None

    def price_for(self, finish: Finish) -> Optional[float]:
        value = (
            self.hand_price_per_length if finish == Finish.HAND else self.machine_price_per_length
        )
        return _positive_or_none(value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "machine_price_per_length": self.machine_price_per_length,
            "hand_price_per_length": self.hand_price_per_length,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TierPrices":
        """
        Accepts the *_per_length keys and the *_per_metre keys used by
        curtain templates.
        """
        data = data or {}
        machine = data.get("machine_price_per_length", data.get("machine_price_per_metre"))
        hand = data.get("hand_price_per_length", data.get("hand_price_per_metre"))
        return cls(
            machine_price_per_length=_positive_or_none(machine),
            hand_price_per_length=_positive_or_none(hand),
        )


@dataclass(frozen=True)
class ManufacturingPrice:
    """Resolved manufacturing price per unit length and where it came from."""

    price: float
    source: PriceSource
    finish: Finish

    def to_dict(self) -> Dict[str, Any]:
        return {"price": self.price, "source": self.source.value, "finish": self.finish.value}
