from __future__ import annotations

__all__ = (
    "Comparator",
    "RunOrder",
    "alphabetical_comparator",
    "reverse_alphabetical_comparator",
    "sort_order_comparator",
)

import typing as t
from collections.abc import Callable, Iterable
from enum import Enum

from .core import TestUnit
from .exceptions import UnknownStrategy

T = t.TypeVar("T")
Comparator = Callable[[T, T], int]


class RunOrder(Enum):
    """The strategies that may be used to order test classes."""
    @classmethod
    def find(cls, name: str) -> RunOrder:
        """Finds the strategy with a given (case-insensitive) tag.

        Raises
        ------
        UnknownStrategy
            If there is no strategy with the given tag.
        """
        tag = name.strip().lower()
        if tag == "filesystem":
            return cls.NONE
        try:
            return next(s for s in cls if s.value == tag)
        except StopIteration:
            raise UnknownStrategy(name)

    @classmethod
    def parse(cls, strategies: str | Iterable[str | RunOrder]) -> tuple[RunOrder, ...]:
        """Parses a comma-separated list of tags, or a sequence of tags and
        strategies, into a tuple of strategies. Blank tags are skipped.
        """
        if isinstance(strategies, str):
            strategies = strategies.split(",")
        parsed: list[RunOrder] = []
        for strategy in strategies:
            if isinstance(strategy, RunOrder):
                parsed.append(strategy)
            elif isinstance(strategy, str):
                if strategy.strip():
                    parsed.append(cls.find(strategy))
            else:
                raise UnknownStrategy(strategy)
        return tuple(parsed)

    ALPHABETICAL = "alphabetical"
    REVERSE_ALPHABETICAL = "reversealphabetical"
    HOURLY = "hourly"
    RANDOM = "random"
    FAILED_FIRST = "failedfirst"
    BALANCED = "balanced"
    TEST_ORDER = "testorder"
    NONE = "none"


def _cmp(x: str, y: str) -> int:
    return -1 if x < y else 1 if x > y else 0


def alphabetical_comparator(x: TestUnit, y: TestUnit) -> int:
    return _cmp(x.name, y.name)


def reverse_alphabetical_comparator(x: TestUnit, y: TestUnit) -> int:
    return _cmp(y.name, x.name)


def sort_order_comparator(
    strategy: t.Optional[RunOrder],
    hour: int,
) -> t.Optional[Comparator[TestUnit]]:
    """Returns the total order over test classes that is described by a given
    strategy, or :code:`None` if the strategy isn't a total order.

    Parameters
    ----------
    strategy: RunOrder, optional
        The strategy for which a comparator should be obtained.
    hour: int
        The hour of the day (0-23) used by the hourly strategy: even hours
        give alphabetical order, odd hours give reverse alphabetical order.
    """
    if strategy is RunOrder.ALPHABETICAL:
        return alphabetical_comparator
    if strategy is RunOrder.REVERSE_ALPHABETICAL:
        return reverse_alphabetical_comparator
    if strategy is RunOrder.HOURLY:
        if hour % 2 == 0:
            return alphabetical_comparator
        return reverse_alphabetical_comparator
    return None
