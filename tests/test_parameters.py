import pytest

from runorder.exceptions import UnknownStrategy
from runorder.parameters import RunOrderParameters
from runorder.pattern import resolve_patterns
from runorder.strategy import RunOrder


def test_strategies_from_string():
    params = RunOrderParameters("TestOrder,random")
    assert params.strategies == (RunOrder.TEST_ORDER, RunOrder.RANDOM)
    assert params.first_strategy is RunOrder.TEST_ORDER


def test_strategies_from_sequence():
    params = RunOrderParameters([RunOrder.BALANCED, "hourly"])
    assert params.strategies == (RunOrder.BALANCED, RunOrder.HOURLY)


def test_default_and_empty_strategies():
    assert RunOrderParameters(None).strategies == (RunOrder.NONE,)
    params = RunOrderParameters([])
    assert params.strategies == ()
    assert params.first_strategy is None


def test_unknown_strategy_fails_fast():
    with pytest.raises(UnknownStrategy):
        RunOrderParameters("upsidedown")
    with pytest.raises(UnknownStrategy):
        RunOrderParameters(["alphabetical", "upsidedown"])


def test_alphabetical():
    params = RunOrderParameters.alphabetical()
    assert params.strategies == (RunOrder.ALPHABETICAL,)
    assert params.statistics_file is None
    assert params.random_seed is None
    assert params.specified_order is None


def test_alphabetical_in_subclass():
    class CustomParameters(RunOrderParameters):
        pass

    params = CustomParameters.alphabetical()
    assert isinstance(params, CustomParameters)
    assert params.strategies == (RunOrder.ALPHABETICAL,)


def test_no_specified_order():
    params = RunOrderParameters("testorder")
    assert params.resolved_specified_order() is None


def test_empty_specified_order():
    params = RunOrderParameters("testorder", specified_order="")
    assert params.resolved_specified_order() == ()


def test_specified_order_resolved_once():
    calls = []

    def resolver(spec):
        calls.append(spec)
        return resolve_patterns(spec)

    params = RunOrderParameters("testorder",
                                specified_order="pkg.B, pkg.A",
                                resolver=resolver)
    first = params.resolved_specified_order()
    second = params.resolved_specified_order()
    assert [str(p) for p in first] == ["pkg.B", "pkg.A"]
    assert first == second
    assert calls == ["pkg.B, pkg.A"]


def test_immutable():
    params = RunOrderParameters("random", random_seed=3)
    with pytest.raises(AttributeError):
        params.random_seed = 4
