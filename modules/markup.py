"""
Markup resolution.

Turns a cost into a selling price using the account's markup rules. The most
specific rule wins:

    1. category + subcategory  (curtains / sheer)
    2. category only           (curtains)
    3. global default
    4. no markup (0%)

Within one tier the rule with the highest priority wins, then the highest
percentage, so the result never depends on the order rules were stored in.

Usage:
    rules = [MarkupRule.from_dict(r) for r in settings["rules"]]
    percentage = resolve_markup("curtains", "sheer", rules)
    selling = apply_markup(cost, percentage)
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from core.exceptions import MarkupConfigurationError
from logging_config import get_logger
from models.markup import MarkupResolution, MarkupRule, MarkupSource
from modules.strategies import resolve_first


logger = get_logger(__name__)


def _normalize(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().lower()
    return text or None


def _best(candidates: List[MarkupRule]) -> Optional[MarkupRule]:
    if not candidates:
        return None
    return max(candidates, key=lambda rule: (rule.priority, rule.percentage))


# =============================================================================
# STRATEGIES
# =============================================================================

def _subcategory_rule(
    category: Optional[str], subcategory: Optional[str], rules: Sequence[MarkupRule]
) -> Optional[MarkupRule]:
    if not category or not subcategory:
        return None
    return _best([
        rule for rule in rules
        if rule.specificity == 2 and rule.category == category and rule.subcategory == subcategory
    ])


def _category_rule(
    category: Optional[str], subcategory: Optional[str], rules: Sequence[MarkupRule]
) -> Optional[MarkupRule]:
    if not category:
        return None
    return _best([
        rule for rule in rules if rule.specificity == 1 and rule.category == category
    ])


def _default_rule(
    category: Optional[str], subcategory: Optional[str], rules: Sequence[MarkupRule]
) -> Optional[MarkupRule]:
    return _best([rule for rule in rules if rule.is_default])


MARKUP_STRATEGIES = (
    (MarkupSource.SUBCATEGORY, _subcategory_rule),
    (MarkupSource.CATEGORY, _category_rule),
    (MarkupSource.GLOBAL_DEFAULT, _default_rule),
)


# =============================================================================
# PUBLIC API
# =============================================================================

def resolve_markup_detail(
    category: Optional[str],
    subcategory: Optional[str],
    rules: Iterable[MarkupRule],
    require_rules: bool = False,
) -> MarkupResolution:
    """
    Resolve the markup for a category/subcategory and report which tier matched.

    Args:
        category: Product category (case and surrounding spaces ignored)
        subcategory: Optional subcategory
        rules: Markup rules to search
        require_rules: Raise instead of returning 0% when there are no rules
                       and no default to fall back on

    Returns:
        MarkupResolution with the percentage, source tier and matched rule

    Raises:
        MarkupConfigurationError: require_rules is set and the rule set is
                                  empty with no global default
    """
    rules = tuple(rules)
    category = _normalize(category)
    subcategory = _normalize(subcategory)

    if require_rules and not rules:
        raise MarkupConfigurationError("No markup rules configured and no default markup set")

    resolution = resolve_first(MARKUP_STRATEGIES, category, subcategory, rules)
    if resolution is None:
        logger.debug(f"No markup rule for {category}/{subcategory}, using 0%")
        return MarkupResolution(percentage=0.0, source=MarkupSource.NONE)

    rule = resolution.value
    logger.debug(
        f"Markup for {category}/{subcategory}: {rule.percentage}% ({resolution.source.value})"
    )
    return MarkupResolution(percentage=rule.percentage, source=resolution.source, rule=rule)


def resolve_markup(
    category: Optional[str],
    subcategory: Optional[str],
    rules: Iterable[MarkupRule],
) -> float:
    """Markup percentage for a category/subcategory (0.0 when nothing matches)."""
    return resolve_markup_detail(category, subcategory, rules).percentage


def apply_markup(cost: float, percentage: float) -> float:
    """
    Selling price for a cost: cost * (1 + percentage / 100).

    A cost of zero or less is returned unchanged.
    """
    if cost <= 0:
        return cost
    return cost * (1 + percentage / 100.0)


def apply_minimum(percentage: float, minimum: float) -> float:
    """Raise a resolved markup percentage to the configured floor."""
    return max(percentage, minimum or 0.0)


def markup_from_prices(cost: float, selling: float) -> float:
    """Markup percentage implied by a cost and selling price (0 when cost <= 0)."""
    if cost <= 0:
        return 0.0
    return (selling - cost) / cost * 100.0


def margin_from_prices(cost: float, selling: float) -> float:
    """Gross margin percentage of a selling price (0 when selling <= 0)."""
    if selling <= 0:
        return 0.0
    return (selling - cost) / selling * 100.0
