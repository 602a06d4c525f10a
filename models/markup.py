"""
Markup data models.

Markup rules come from the account's markup settings: a global default,
per-category markups, and optional subcategory markups (e.g., curtains /
sheer). The resolver picks the most specific matching rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple

from core.exceptions import MarkupConfigurationError


# Category values that mean "the global default"
DEFAULT_CATEGORY_ALIASES = ("*", "default", "global")


def _normalize_scope(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().lower()
    return text or None


def _parse_percentage(value: Any, record: Dict[str, Any]) -> float:
    if isinstance(value, bool):
        raise MarkupConfigurationError("Markup percentage must be numeric", rule=record)
    try:
        percentage = float(value)
    except (TypeError, ValueError):
        raise MarkupConfigurationError(
            f"Markup percentage must be numeric, got {value!r}", rule=record
        ) from None
    if percentage != percentage or percentage < 0:
        raise MarkupConfigurationError(
            f"Markup percentage must be zero or positive, got {value!r}", rule=record
        )
    return percentage


class MarkupSource(str, Enum):
    """Which tier of the markup hierarchy produced a percentage."""

    SUBCATEGORY = "subcategory"
    CATEGORY = "category"
    GLOBAL_DEFAULT = "global_default"
    NONE = "none"


@dataclass(frozen=True)
class MarkupRule:
    """
    A single markup rule.

    A rule with no category is the global default. A rule with a
    subcategory only matches lookups for that exact subcategory.
    """

    category: Optional[str]
    """Normalised category (lowercase) or None for the global default."""

    percentage: float
    """Markup added to cost, in percent (40 means cost x 1.40)."""

    subcategory: Optional[str] = None
    """Normalised subcategory (lowercase), if the rule is that specific."""

    priority: int = 0
    """Tie-break among rules of the same scope (higher wins)."""

    def __post_init__(self):
        category = _normalize_scope(self.category)
        if category in DEFAULT_CATEGORY_ALIASES:
            category = None
        object.__setattr__(self, "category", category)
        object.__setattr__(
            self, "subcategory", _normalize_scope(self.subcategory) if category else None
        )

    @property
    def specificity(self) -> int:
        """2 for subcategory rules, 1 for category rules, 0 for the global default."""
        if self.category is None:
            return 0
        return 2 if self.subcategory else 1

    @property
    def is_default(self) -> bool:
        return self.category is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"category": self.category, "percentage": self.percentage}
        if self.subcategory:
            data["subcategory"] = self.subcategory
        if self.priority:
            data["priority"] = self.priority
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MarkupRule":
        """
        Create a rule from an external record.

        Args:
            data: {"category", "subcategory"?, "percentage", "priority"?}
                  A category of None, "", "*" or "default" is the global default.

        Raises:
            MarkupConfigurationError: percentage missing, non-numeric or negative
        """
        if "percentage" not in data:
            raise MarkupConfigurationError("Markup rule has no percentage", rule=data)
        try:
            priority = int(data.get("priority") or 0)
        except (TypeError, ValueError):
            raise MarkupConfigurationError(
                f"Markup priority must be an integer, got {data.get('priority')!r}", rule=data
            ) from None
        return cls(
            category=data.get("category"),
            subcategory=data.get("subcategory"),
            percentage=_parse_percentage(data["percentage"], data),
            priority=priority,
        )


@dataclass(frozen=True)
class MarkupResolution:
    """Result of resolving a markup: the percentage and why it was chosen."""

    percentage: float
    source: MarkupSource
    rule: Optional[MarkupRule] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "percentage": self.percentage,
            "source": self.source.value,
            "rule": self.rule.to_dict() if self.rule else None,
        }


@dataclass(frozen=True)
class MarkupSettings:
    """
    Account-level markup settings as configured on the settings screen.

    Converted to MarkupRule objects for resolution; the minimum markup is a
    floor applied to whatever percentage the rules resolve to.
    """

    default_markup_percentage: Optional[float] = None
    category_markups: Tuple[Tuple[str, float], ...] = field(default_factory=tuple)
    minimum_markup_percentage: float = 0.0

    def to_rules(self) -> Tuple[MarkupRule, ...]:
        """Express these settings as rules (category rules, then the default)."""
        rules: List[MarkupRule] = [
            MarkupRule(category=category, percentage=percentage)
            for category, percentage in self.category_markups
        ]
        if self.default_markup_percentage is not None:
            rules.append(MarkupRule(category=None, percentage=self.default_markup_percentage))
        return tuple(rules)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default_markup_percentage": self.default_markup_percentage,
            "category_markups": dict(self.category_markups),
            "minimum_markup_percentage": self.minimum_markup_percentage,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MarkupSettings":
        """
        Create settings from the stored settings record.

        Category markups of 0 are treated as "not set", matching how the
        settings screen stores empty inputs.
        """
        default = data.get("default_markup_percentage")
        category_markups = []
        for category, value in sorted((data.get("category_markups") or {}).items()):
            percentage = _parse_percentage(value, {"category": category, "percentage": value})
            normalized = _normalize_scope(category)
            if normalized and percentage > 0:
                category_markups.append((normalized, percentage))
        minimum = data.get("minimum_markup_percentage") or 0
        return cls(
            default_markup_percentage=(
                _parse_percentage(default, data) if default is not None else None
            ),
            category_markups=tuple(category_markups),
            minimum_markup_percentage=_parse_percentage(minimum, data),
        )
