import pytest

from runorder.core import TestUnit
from runorder.exceptions import StatisticsFileCorrupt
from runorder.statistics import RunEntry, RunStatistics


def units(*names):
    return [TestUnit(name) for name in names]


def names(tests):
    return [test.name for test in tests]


@pytest.fixture()
def statistics() -> RunStatistics:
    return RunStatistics([
        RunEntry(3, 60, "pkg.A", "testOne"),
        RunEntry(5, 40, "pkg.A", "testTwo"),
        RunEntry(0, 80, "pkg.B", "testOne"),
        RunEntry(2, 30, "pkg.C", "testOne"),
        RunEntry(1, 20, "pkg.D", "testOne"),
    ])


def test_missing_file_is_empty(tmp_path):
    assert len(RunStatistics.from_file(None)) == 0
    assert len(RunStatistics.from_file(str(tmp_path / "missing"))) == 0


def test_save_and_load(tmp_path, statistics):
    filename = str(tmp_path / "stats.csv")
    statistics.to_file(filename)
    loaded = RunStatistics.from_file(filename)
    assert len(loaded) == 5
    assert loaded[("pkg.B", "testOne")] == RunEntry(0, 80, "pkg.B", "testOne")


def test_load_without_method(tmp_path):
    filename = tmp_path / "stats.csv"
    filename.write_text("4,120,pkg.A,\n\n")
    loaded = RunStatistics.from_file(str(filename))
    assert loaded[("pkg.A", None)].successful_builds == 4


def test_corrupt_file(tmp_path):
    filename = tmp_path / "stats.csv"
    filename.write_text("1,20,pkg.A,testOne\n1,pkg.B\n")
    with pytest.raises(StatisticsFileCorrupt) as info:
        RunStatistics.from_file(str(filename))
    assert info.value.line == 2

    filename.write_text("one,20,pkg.A,testOne\n")
    with pytest.raises(StatisticsFileCorrupt):
        RunStatistics.from_file(str(filename))


def test_with_outcome(statistics):
    updated = statistics.with_outcome("pkg.A", "testOne", True, 70)
    assert updated[("pkg.A", "testOne")] == RunEntry(4, 70, "pkg.A", "testOne")
    assert statistics[("pkg.A", "testOne")].successful_builds == 3

    updated = updated.with_outcome("pkg.A", "testOne", False, 10)
    assert updated[("pkg.A", "testOne")].last_run_failed

    updated = updated.with_outcome("pkg.E", "testNew", True, 5)
    assert updated[("pkg.E", "testNew")] == RunEntry(1, 5, "pkg.E", "testNew")


def test_failed_first(statistics):
    ordered = statistics.prioritize_failed_first(units("pkg.A", "pkg.C", "pkg.B", "pkg.D"))
    assert names(ordered) == ["pkg.B", "pkg.D", "pkg.C", "pkg.A"]


def test_failed_first_without_history(statistics):
    ordered = statistics.prioritize_failed_first(units("pkg.A", "pkg.X", "pkg.D"))
    assert names(ordered) == ["pkg.X", "pkg.D", "pkg.A"]


def test_failed_first_is_stable_for_empty_statistics():
    tests = units("pkg.C", "pkg.A", "pkg.B")
    assert RunStatistics().prioritize_failed_first(tests) == tests


def test_balanced(statistics):
    ordered = statistics.prioritize_balanced(units("pkg.D", "pkg.C", "pkg.B", "pkg.A"), 2)
    assert names(ordered) == ["pkg.A", "pkg.B", "pkg.D", "pkg.C"]


def test_balanced_single_thread(statistics):
    ordered = statistics.prioritize_balanced(units("pkg.D", "pkg.C", "pkg.B", "pkg.A"), 1)
    assert names(ordered) == ["pkg.A", "pkg.B", "pkg.C", "pkg.D"]


def test_balanced_empty():
    assert RunStatistics().prioritize_balanced([], 4) == []


def test_balanced_illegal_threads(statistics):
    with pytest.raises(ValueError):
        statistics.prioritize_balanced(units("pkg.A"), 0)
