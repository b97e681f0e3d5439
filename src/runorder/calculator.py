from __future__ import annotations

__all__ = ("RunOrderCalculator",)

import datetime
import functools
import random
import time
import typing as t
from collections.abc import Callable, Iterable

from loguru import logger

from .core import TestsToRun, TestUnit, to_class_file_name
from .exceptions import MalformedRequest
from .ordering import (
    BalancedTestOrdering,
    ComparatorTestOrdering,
    FailedFirstTestOrdering,
    IdentityTestOrdering,
    RandomTestOrdering,
    StatisticsLoader,
    TestOrdering,
)
from .parameters import RunOrderParameters
from .statistics import RunStatistics
from .strategy import Comparator, RunOrder, sort_order_comparator

if t.TYPE_CHECKING:
    from .pattern import MatchPattern


class RunOrderCalculator:
    """Determines the order in which test classes, and the methods within
    them, should be run.

    Only the first of the configured strategies is used to order tests.
    The remaining strategies are accepted so that configurations listing
    several strategies remain valid, but they have no effect.

    Parameters
    ----------
    parameters: RunOrderParameters
        Describes how tests should be ordered.
    threads: int
        The number of threads over which tests will be run. Used by the
        balanced strategy.
    rng: random.Random, optional
        The random number generator used by the random strategy. If absent,
        a generator is seeded from the parameters, or from the current time
        if the parameters do not provide a seed.
    clock: Callable[[], datetime.datetime]
        Provides the current time, which is read once to determine the
        order used by the hourly strategy.
    load_statistics: Callable[[Optional[str]], RunStatistics]
        Loads run statistics for the failed-first and balanced strategies.
    """
    def __init__(self,
                 parameters: RunOrderParameters,
                 threads: int = 1,
                 *,
                 rng: t.Optional[random.Random] = None,
                 clock: Callable[[], datetime.datetime] = datetime.datetime.now,
                 load_statistics: StatisticsLoader = RunStatistics.from_file,
                 ) -> None:
        self._parameters = parameters
        self._threads = threads
        # later strategies are accepted but have no effect
        self._strategy = parameters.first_strategy
        self._specified_order: t.Optional[tuple[MatchPattern, ...]] = \
            parameters.resolved_specified_order()
        self._sort_order = sort_order_comparator(self._strategy, clock().hour)
        self._load_statistics = load_statistics

        if rng is None:
            seed = parameters.random_seed
            if seed is None:
                seed = time.time_ns()
            rng = random.Random(seed)
        self._rng = rng

        if len(parameters.strategies) > 1:
            ignored = ", ".join(s.value for s in parameters.strategies[1:])
            logger.debug(f"only the first run order strategy is used; ignoring: {ignored}")

    @property
    def strategy(self) -> t.Optional[RunOrder]:
        """The strategy used to order tests, if any."""
        return self._strategy

    def _ordering(self) -> TestOrdering:
        strategy = self._strategy
        if strategy is None or strategy is RunOrder.NONE:
            return IdentityTestOrdering()
        if strategy is RunOrder.TEST_ORDER:
            if self._specified_order is None:
                return IdentityTestOrdering()

            def compare(x: TestUnit, y: TestUnit) -> int:
                return self.test_order_comparator(x.name, y.name)

            return ComparatorTestOrdering(compare)
        if strategy is RunOrder.RANDOM:
            return RandomTestOrdering(self._rng)
        if strategy is RunOrder.FAILED_FIRST:
            return FailedFirstTestOrdering(self._parameters.statistics_file,
                                           self._load_statistics)
        if strategy is RunOrder.BALANCED:
            return BalancedTestOrdering(self._parameters.statistics_file,
                                        self._threads,
                                        self._load_statistics)
        if strategy in (RunOrder.ALPHABETICAL,
                        RunOrder.REVERSE_ALPHABETICAL,
                        RunOrder.HOURLY):
            assert self._sort_order is not None
            return ComparatorTestOrdering(self._sort_order)
        t.assert_never(strategy)

    def order_test_classes(self, tests: Iterable[TestUnit]) -> TestsToRun:
        """Orders a given collection of test classes according to the first
        configured strategy. Each test class appears once in the result.
        """
        ordering = self._ordering()
        logger.debug(f"ordering test classes with strategy [{self._strategy}] "
                     f"using {ordering.__class__.__name__}")
        return TestsToRun(ordering(list(tests)))

    def comparator_for_test_methods(self) -> t.Optional[Comparator[str]]:
        """Returns a comparator over test method requests of the form
        :code:`method(pkg.Class)` that is consistent with the specified
        order, or :code:`None` if methods are not ordered by this
        calculator.
        """
        if self._strategy is not RunOrder.TEST_ORDER:
            return None
        if self._specified_order is None:
            return None

        def compare(request_x: str, request_y: str) -> int:
            class_x, method_x = self.class_and_method(request_x)
            class_y, method_y = self.class_and_method(request_y)
            return self.test_order_comparator(class_x, class_y, method_x, method_y)

        return compare

    def method_sort_key(self) -> t.Optional[Callable[[str], t.Any]]:
        """Returns a sort key for test method requests that is equivalent to
        :meth:`comparator_for_test_methods`, or :code:`None`.
        """
        comparator = self.comparator_for_test_methods()
        if comparator is None:
            return None
        return functools.cmp_to_key(comparator)

    def specified_order_index(self,
                              class_name: str,
                              method_name: t.Optional[str] = None,
                              ) -> int:
        """Returns the position of the last pattern in the specified order
        that accepts a given class and method, or -1 if none does.
        """
        index = -1
        if self._specified_order is None:
            return index
        class_file_name = to_class_file_name(class_name)
        for position, pattern in enumerate(self._specified_order):
            if pattern.match_as_inclusive(class_file_name, method_name):
                index = position
        return index

    def test_order_comparator(self,
                              class_x: str,
                              class_y: str,
                              method_x: t.Optional[str] = None,
                              method_y: t.Optional[str] = None,
                              ) -> int:
        # unmatched tests have an index of -1 and sort before matched tests
        index_x = self.specified_order_index(class_x, method_x)
        index_y = self.specified_order_index(class_y, method_y)
        return index_x - index_y

    @staticmethod
    def class_and_method(request: str) -> tuple[str, str]:
        """Splits a request of the form :code:`method(pkg.Class)` into its
        class and method names. A request without parentheses is used as
        both the class and method name.

        Raises
        ------
        MalformedRequest
            If the parentheses in the request are unbalanced.
        """
        if "(" not in request:
            return (request, request)
        method_name, _, rest = request.partition("(")
        if "(" in rest or not rest.endswith(")"):
            raise MalformedRequest(request)
        return (rest[:-1], method_name)
