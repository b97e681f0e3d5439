# -*- coding: utf-8 -*-
"""
This module is used to provide a variety of schemes for test
ordering/prioritisation that all implement a common interface.
"""
from __future__ import annotations

__all__ = (
    "BalancedTestOrdering",
    "ComparatorTestOrdering",
    "FailedFirstTestOrdering",
    "IdentityTestOrdering",
    "RandomTestOrdering",
    "TestOrdering",
)

import abc
import functools
import random
import typing as t
from collections.abc import Callable, Sequence

import attr
from typing_extensions import final

from .core import TestUnit
from .statistics import RunStatistics
from .strategy import Comparator

StatisticsLoader = Callable[[t.Optional[str]], RunStatistics]


class TestOrdering(abc.ABC):
    @final
    def __call__(self, tests: Sequence[TestUnit]) -> Sequence[TestUnit]:
        return self.order(tests)

    @abc.abstractmethod
    def order(self, tests: Sequence[TestUnit]) -> Sequence[TestUnit]:
        """Returns the given tests in the order in which they should run."""
        ...


class IdentityTestOrdering(TestOrdering):
    """Leaves tests in the order in which they were given."""
    def order(self, tests: Sequence[TestUnit]) -> Sequence[TestUnit]:
        return list(tests)


@attr.s(frozen=True, auto_attribs=True)
class ComparatorTestOrdering(TestOrdering):
    """Stably sorts tests using a given comparator."""
    _comparator: Comparator[TestUnit]

    def order(self, tests: Sequence[TestUnit]) -> Sequence[TestUnit]:
        return sorted(tests, key=functools.cmp_to_key(self._comparator))


@attr.s(frozen=True, auto_attribs=True)
class RandomTestOrdering(TestOrdering):
    """Shuffles tests using a given random number generator."""
    _rng: random.Random

    def order(self, tests: Sequence[TestUnit]) -> Sequence[TestUnit]:
        ordered = list(tests)
        self._rng.shuffle(ordered)
        return ordered


@attr.s(frozen=True, auto_attribs=True)
class FailedFirstTestOrdering(TestOrdering):
    """Runs tests that have recently failed before all others."""
    _statistics_file: t.Optional[str]
    _load: StatisticsLoader = RunStatistics.from_file

    def order(self, tests: Sequence[TestUnit]) -> Sequence[TestUnit]:
        statistics = self._load(self._statistics_file)
        return statistics.prioritize_failed_first(tests)


@attr.s(frozen=True, auto_attribs=True)
class BalancedTestOrdering(TestOrdering):
    """Balances the expected run time of tests across a number of threads."""
    _statistics_file: t.Optional[str]
    _threads: int
    _load: StatisticsLoader = RunStatistics.from_file

    def order(self, tests: Sequence[TestUnit]) -> Sequence[TestUnit]:
        statistics = self._load(self._statistics_file)
        return statistics.prioritize_balanced(tests, self._threads)
