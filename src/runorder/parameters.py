from __future__ import annotations

__all__ = (
    "PatternResolver",
    "RunOrderParameters",
)

import typing as t
from collections.abc import Callable, Sequence

import attr
from loguru import logger

from .pattern import MatchPattern, resolve_patterns
from .strategy import RunOrder

PatternResolver = Callable[[str], Sequence[MatchPattern]]

_UNRESOLVED = object()


def _to_strategies(
    value: t.Optional[str | Sequence[str | RunOrder]],
) -> tuple[RunOrder, ...]:
    if value is None:
        return (RunOrder.NONE,)
    return RunOrder.parse(value)


@attr.s(frozen=True, slots=True)
class RunOrderParameters:
    """Describes how the test classes for a single run should be ordered.

    Attributes
    ----------
    strategies: tuple[RunOrder, ...]
        The configured strategies. Only the first of these is used to order
        tests. May be given as a comma-separated string of tags.
    statistics_file: str, optional
        The path to the run statistics file used by the failed-first and
        balanced strategies.
    random_seed: int, optional
        The seed used by the random strategy. If absent, a time-based seed
        is used.
    specified_order: str, optional
        A comma-separated list of test patterns that describes the order in
        which tests should be run by the test-order strategy.

    Raises
    ------
    UnknownStrategy
        If any of the given strategy tags is not recognised.
    """
    strategies: tuple[RunOrder, ...] = attr.ib(converter=_to_strategies)
    statistics_file: t.Optional[str] = attr.ib(default=None)
    random_seed: t.Optional[int] = attr.ib(default=None)
    specified_order: t.Optional[str] = attr.ib(default=None)
    _resolver: PatternResolver = attr.ib(default=resolve_patterns,
                                         eq=False,
                                         repr=False)
    _resolved: t.Any = attr.ib(init=False,
                               default=_UNRESOLVED,
                               eq=False,
                               repr=False)

    @classmethod
    def alphabetical(cls) -> RunOrderParameters:
        return cls((RunOrder.ALPHABETICAL,))

    @property
    def first_strategy(self) -> t.Optional[RunOrder]:
        """The strategy that governs the order of tests, if any."""
        return self.strategies[0] if self.strategies else None

    def resolved_specified_order(self) -> t.Optional[tuple[MatchPattern, ...]]:
        """Returns the patterns of the specified order, or :code:`None` if no
        specified order was given. The specified order is resolved at most
        once.
        """
        if self.specified_order is None:
            return None
        if self._resolved is _UNRESOLVED:
            patterns = tuple(self._resolver(self.specified_order))
            logger.trace(f"resolved specified order: {[str(p) for p in patterns]}")
            object.__setattr__(self, "_resolved", patterns)
        return self._resolved
