"""
Ordered resolution strategies.

Several prices are resolved through a priority chain: try the most specific
source first and fall back to broader ones. Each chain is declared as a
tuple of (source, strategy) pairs and evaluated by resolve_first, so the
order is visible in one place.

A strategy returns a Resolution when it applies, or None to let the next
strategy try.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, Tuple, TypeVar


S = TypeVar("S")
V = TypeVar("V")


@dataclass(frozen=True)
class Resolution(Generic[S, V]):
    """A value tagged with the source that produced it."""

    source: S
    value: V


Strategy = Callable[..., Optional[Any]]


def resolve_first(
    strategies: Iterable[Tuple[S, Strategy]],
    *args: Any,
    **kwargs: Any,
) -> Optional[Resolution]:
    """
    Run strategies in order and return the first result.

    Args:
        strategies: (source, callable) pairs, most specific first
        *args, **kwargs: Passed to every strategy

    Returns:
        Resolution(source, value) from the first strategy that returned a
        value, or None when every strategy declined
    """
    for source, strategy in strategies:
        value = strategy(*args, **kwargs)
        if value is not None:
            return Resolution(source=source, value=value)
    return None
