import pytest

from runorder.core import TestUnit
from runorder.exceptions import UnknownStrategy
from runorder.strategy import (
    RunOrder,
    alphabetical_comparator,
    reverse_alphabetical_comparator,
    sort_order_comparator,
)

a = TestUnit("pkg.A")
b = TestUnit("pkg.B")


def test_find():
    assert RunOrder.find("alphabetical") is RunOrder.ALPHABETICAL
    assert RunOrder.find("ReverseAlphabetical") is RunOrder.REVERSE_ALPHABETICAL
    assert RunOrder.find(" failedfirst ") is RunOrder.FAILED_FIRST
    assert RunOrder.find("testorder") is RunOrder.TEST_ORDER
    assert RunOrder.find("filesystem") is RunOrder.NONE
    with pytest.raises(UnknownStrategy):
        RunOrder.find("sideways")


def test_parse():
    assert RunOrder.parse("random,hourly") == (RunOrder.RANDOM, RunOrder.HOURLY)
    assert RunOrder.parse(["balanced", RunOrder.RANDOM]) == \
        (RunOrder.BALANCED, RunOrder.RANDOM)
    assert RunOrder.parse("") == ()
    assert RunOrder.parse([]) == ()
    with pytest.raises(UnknownStrategy):
        RunOrder.parse("alphabetical,sideways")
    with pytest.raises(UnknownStrategy):
        RunOrder.parse([42])


def test_alphabetical_comparators():
    assert alphabetical_comparator(a, b) < 0
    assert alphabetical_comparator(b, a) > 0
    assert alphabetical_comparator(a, a) == 0
    assert reverse_alphabetical_comparator(a, b) > 0
    assert reverse_alphabetical_comparator(b, a) < 0
    assert reverse_alphabetical_comparator(a, a) == 0


@pytest.mark.parametrize("hour", range(24))
def test_hourly(hour):
    comparator = sort_order_comparator(RunOrder.HOURLY, hour)
    if hour % 2 == 0:
        assert comparator is alphabetical_comparator
    else:
        assert comparator is reverse_alphabetical_comparator


def test_sort_order_comparator():
    assert sort_order_comparator(RunOrder.ALPHABETICAL, 3) is alphabetical_comparator
    assert sort_order_comparator(RunOrder.REVERSE_ALPHABETICAL, 4) is \
        reverse_alphabetical_comparator
    for strategy in (RunOrder.RANDOM,
                     RunOrder.FAILED_FIRST,
                     RunOrder.BALANCED,
                     RunOrder.TEST_ORDER,
                     RunOrder.NONE,
                     None):
        assert sort_order_comparator(strategy, 0) is None
