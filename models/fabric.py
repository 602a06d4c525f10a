"""
Fabric and curtain measurement models.

All measurements are centimetres; lengths reported for ordering are metres.

Terminology:
    - Width (of fabric): one full roll-width piece of fabric
    - Vertical: pieces run top to bottom, joined side by side
    - Horizontal (railroaded): the roll width covers the drop, pieces run
      across the curtain
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple

from modules.unit_resolver import parse_dimension


PLAIN_KEYWORDS = ("plain", "solid", "textured", "linen", "cotton")
PATTERN_KEYWORDS = ("stripe", "floral", "geometric", "pattern", "damask", "paisley")


class Orientation(str, Enum):
    """Direction the fabric is cut and joined."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class CurtainDimensions:
    """
    Measurements and manufacturing allowances for one curtain treatment.

    Allowances default to zero; callers pass the workroom's allowances
    explicitly.
    """

    rail_width: float
    drop: float
    fullness: float = 1.0
    """Gathering multiplier applied to the rail width (2.0 = double fullness)."""

    panel_count: int = 1
    """Number of curtains on the rail (a pair is 2)."""

    header_hem: float = 0.0
    bottom_hem: float = 0.0
    side_hem: float = 0.0
    """Per side, per panel."""

    seam_hem: float = 0.0
    """Extra length per join between pieces."""

    returns: float = 0.0
    """Total fabric wrapping back to the wall."""

    overlap: float = 0.0
    """Where the two panels of a pair cross at the centre."""

    pooling: float = 0.0
    """Extra length left lying on the floor."""

    waste_percent: float = 0.0

    @property
    def total_drop(self) -> float:
        """Cut drop: finished drop plus header, hem and pooling."""
        return self.drop + self.header_hem + self.bottom_hem + self.pooling

    @property
    def finished_width(self) -> float:
        return (self.rail_width + self.overlap) * self.fullness

    @property
    def total_side_hems(self) -> float:
        return self.side_hem * 2 * self.panel_count

    @property
    def total_width(self) -> float:
        """Flat fabric width needed across all panels."""
        return self.finished_width + self.returns + self.total_side_hems

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rail_width": self.rail_width,
            "drop": self.drop,
            "fullness": self.fullness,
            "panel_count": self.panel_count,
            "header_hem": self.header_hem,
            "bottom_hem": self.bottom_hem,
            "side_hem": self.side_hem,
            "seam_hem": self.seam_hem,
            "returns": self.returns,
            "overlap": self.overlap,
            "pooling": self.pooling,
            "waste_percent": self.waste_percent,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], defaults: Optional[Dict[str, float]] = None
    ) -> "CurtainDimensions":
        """
        Create dimensions from a worksheet record.

        Args:
            data: Measurement record (keys as in to_dict)
            defaults: Allowance values used when the record omits them
        """
        defaults = defaults or {}

        def value(key: str, fallback: float = 0.0) -> float:
            raw = data.get(key)
            if raw is None or raw == "":
                return float(defaults.get(key, fallback))
            return parse_dimension(raw)

        return cls(
            rail_width=value("rail_width"),
            drop=value("drop"),
            fullness=value("fullness", 1.0),
            panel_count=int(value("panel_count", 1)),
            header_hem=value("header_hem"),
            bottom_hem=value("bottom_hem"),
            side_hem=value("side_hem"),
            seam_hem=value("seam_hem"),
            returns=value("returns"),
            overlap=value("overlap"),
            pooling=value("pooling"),
            waste_percent=value("waste_percent"),
        )


@dataclass(frozen=True)
class FabricSpec:
    """Inventory metadata for a fabric."""

    width: Optional[float]
    """Roll width in cm; None when the inventory item has none set."""

    fabric_type: str = ""
    pattern: str = ""
    pattern_repeat: float = 0.0
    """Vertical pattern repeat in cm (0 for none)."""

    name: str = ""

    horizontal_pattern_repeat: Optional[float] = None
    """Repeat matched on railroaded cuts in cm; None when the fabric lists one repeat."""

    @property
    def _descriptor(self) -> str:
        return f"{self.fabric_type} {self.pattern}".lower()

    @property
    def is_plain(self) -> bool:
        descriptor = self._descriptor
        return any(keyword in descriptor for keyword in PLAIN_KEYWORDS)

    @property
    def requires_pattern_matching(self) -> bool:
        """Patterned fabric whose pieces must line up at the seams."""
        if self.is_plain:
            return False
        if self.pattern_repeat > 0 or (self.horizontal_pattern_repeat or 0) > 0:
            return True
        descriptor = self._descriptor
        return any(keyword in descriptor for keyword in PATTERN_KEYWORDS)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "type": self.fabric_type,
            "pattern": self.pattern,
            "pattern_repeat": self.pattern_repeat,
            "horizontal_pattern_repeat": self.horizontal_pattern_repeat,
            "name": self.name,
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "FabricSpec":
        """
        Create a FabricSpec from a fabric inventory record.

        Args:
            data: {"width": number|null, "type"?, "pattern"?, "pattern_repeat"?,
                   "pattern_repeat_horizontal"?, "name"?}
                  "fabric_width" is accepted as an alias of "width".
        """
        raw_width = data.get("width", data.get("fabric_width"))
        width = None if raw_width is None or raw_width == "" else parse_dimension(raw_width)
        repeat = data.get("pattern_repeat", data.get("pattern_repeat_vertical"))
        horizontal = data.get("pattern_repeat_horizontal")
        return cls(
            width=width,
            fabric_type=str(data.get("type") or data.get("fabric_type") or ""),
            pattern=str(data.get("pattern") or ""),
            pattern_repeat=parse_dimension(repeat),
            horizontal_pattern_repeat=(
                None if horizontal is None or horizontal == "" else parse_dimension(horizontal)
            ),
            name=str(data.get("name") or ""),
        )


@dataclass(frozen=True)
class OrientationLayout:
    """Fabric needed for one orientation."""

    orientation: Orientation
    widths_required: int
    """Number of pieces cut from the roll."""

    seams: int
    cut_length_cm: float
    """Length of each piece, rounded up to the pattern repeat."""

    total_length_m: float
    """Fabric to order, including seam allowance and waste."""

    total_cost: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orientation": self.orientation.value,
            "widths_required": self.widths_required,
            "seams": self.seams,
            "cut_length_cm": self.cut_length_cm,
            "total_length_m": self.total_length_m,
            "total_cost": self.total_cost,
        }


@dataclass(frozen=True)
class FabricOrientationResult:
    """Side-by-side comparison of both orientations."""

    vertical: OrientationLayout
    horizontal: OrientationLayout
    recommendation: Orientation
    savings: float
    """Cost difference between the two layouts (never negative)."""

    warnings: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def recommended(self) -> OrientationLayout:
        if self.recommendation == Orientation.VERTICAL:
            return self.vertical
        return self.horizontal

    @property
    def recommendation_text(self) -> str:
        layout = self.recommended
        text = (
            f"{self.recommendation.value.title()} orientation: "
            f"{layout.widths_required} width{'s' if layout.widths_required != 1 else ''}, "
            f"{layout.total_length_m:.2f} m"
        )
        if self.savings > 0:
            text += f", saves {self.savings:.2f}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        warnings: List[str] = list(self.warnings)
        return {
            "vertical": self.vertical.to_dict(),
            "horizontal": self.horizontal.to_dict(),
            "recommendation": self.recommendation.value,
            "savings": self.savings,
            "warnings": warnings,
            "recommendation_text": self.recommendation_text,
        }
