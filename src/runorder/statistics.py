"""This module provides access to historical run statistics, which are used to
prioritise test classes by prior failure or to balance their expected run
time across a number of threads.

Statistics are stored as CSV, with one row per test method::

    successful_builds,run_time_ms,class_name,method_name

where :code:`successful_builds` is the number of consecutive runs in which
the test has passed. A value of zero indicates that the most recent run of
the test was a failure.
"""
from __future__ import annotations

__all__ = (
    "RunEntry",
    "RunStatistics",
)

import csv
import os
import typing as t
from collections.abc import Iterable, Iterator, Mapping

import attr
from loguru import logger

from .core import TestUnit
from .exceptions import StatisticsFileCorrupt

EntryKey = tuple[str, t.Optional[str]]


@attr.s(frozen=True, slots=True, auto_attribs=True)
class RunEntry:
    """Records the history of a single test method."""
    successful_builds: int
    run_time_ms: int
    class_name: str
    method_name: t.Optional[str] = None

    @property
    def key(self) -> EntryKey:
        return (self.class_name, self.method_name)

    @property
    def last_run_failed(self) -> bool:
        return self.successful_builds == 0

    def with_outcome(self, successful: bool, run_time_ms: int) -> RunEntry:
        builds = self.successful_builds + 1 if successful else 0
        return RunEntry(builds, run_time_ms, self.class_name, self.method_name)

    def to_row(self) -> list[str]:
        return [str(self.successful_builds),
                str(self.run_time_ms),
                self.class_name,
                self.method_name or ""]


@attr.s(frozen=True, slots=True, auto_attribs=True)
class _ClassPriority:
    min_successful_builds: int
    total_run_time_ms: int


class RunStatistics(Mapping[EntryKey, RunEntry]):
    """An immutable snapshot of the recorded history of test methods."""
    def __init__(self, entries: Iterable[RunEntry] = ()) -> None:
        self.__entries: dict[EntryKey, RunEntry] = {e.key: e for e in entries}

    def __repr__(self) -> str:
        return f"RunStatistics(entries={len(self.__entries)})"

    def __getitem__(self, key: EntryKey) -> RunEntry:
        return self.__entries[key]

    def __iter__(self) -> Iterator[EntryKey]:
        yield from self.__entries

    def __len__(self) -> int:
        return len(self.__entries)

    @classmethod
    def from_file(cls, filename: t.Optional[str]) -> RunStatistics:
        """Loads the statistics stored in a given file. If no file is given,
        or the file does not exist, empty statistics are returned.

        Raises
        ------
        StatisticsFileCorrupt
            If the file contains a malformed entry.
        """
        if filename is None or not os.path.exists(filename):
            logger.debug(f"no run statistics file found [{filename}]: "
                         "using empty statistics")
            return RunStatistics()

        entries: list[RunEntry] = []
        with open(filename, newline="") as f:
            reader = csv.reader(f)
            for row in reader:
                if not row:
                    continue
                if len(row) != 4:
                    raise StatisticsFileCorrupt(
                        filename, reader.line_num,
                        f"expected 4 fields but found {len(row)}",
                    )
                builds, run_time, class_name, method_name = row
                try:
                    entry = RunEntry(successful_builds=int(builds),
                                     run_time_ms=int(run_time),
                                     class_name=class_name,
                                     method_name=method_name or None)
                except ValueError as err:
                    raise StatisticsFileCorrupt(
                        filename, reader.line_num, str(err),
                    ) from err
                entries.append(entry)

        logger.debug(f"loaded {len(entries)} run statistics entries "
                     f"from file: {filename}")
        return RunStatistics(entries)

    def to_file(self, filename: str) -> None:
        """Writes these statistics to a given file."""
        with open(filename, "w", newline="") as f:
            writer = csv.writer(f)
            for entry in self.__entries.values():
                writer.writerow(entry.to_row())
        logger.debug(f"saved {len(self)} run statistics entries to file: {filename}")

    def with_outcome(self,
                     class_name: str,
                     method_name: t.Optional[str],
                     successful: bool,
                     run_time_ms: int,
                     ) -> RunStatistics:
        """Returns a copy of these statistics that includes a new outcome for
        a given test method.
        """
        key = (class_name, method_name)
        entries = self.__entries.copy()
        if key in entries:
            entries[key] = entries[key].with_outcome(successful, run_time_ms)
        else:
            builds = 1 if successful else 0
            entries[key] = RunEntry(builds, run_time_ms, class_name, method_name)
        return RunStatistics(entries.values())

    def _class_priorities(self) -> dict[str, _ClassPriority]:
        builds: dict[str, int] = {}
        run_time: dict[str, int] = {}
        for entry in self.__entries.values():
            name = entry.class_name
            builds[name] = min(builds.get(name, entry.successful_builds),
                               entry.successful_builds)
            run_time[name] = run_time.get(name, 0) + entry.run_time_ms
        return {name: _ClassPriority(builds[name], run_time[name])
                for name in builds}

    def prioritize_failed_first(self, units: Iterable[TestUnit]) -> list[TestUnit]:
        """Orders test classes so that those with a recently failing test
        come first. Classes without any history are treated as failing.
        Classes with equal priority retain their relative order.
        """
        priorities = self._class_priorities()

        def key(unit: TestUnit) -> int:
            priority = priorities.get(unit.name)
            return priority.min_successful_builds if priority else 0

        return sorted(units, key=key)

    def prioritize_balanced(self,
                            units: Iterable[TestUnit],
                            threads: int,
                            ) -> list[TestUnit]:
        """Orders test classes so that, when taken in turn by a given number
        of threads, the expected run time of each thread is balanced.

        Classes are assigned, longest first, to the thread with the least
        expected run time. The resulting per-thread queues are then
        interleaved to give a single order.
        """
        if threads < 1:
            raise ValueError("number of threads must be greater than or equal to 1.")

        priorities = self._class_priorities()

        def run_time(unit: TestUnit) -> int:
            priority = priorities.get(unit.name)
            return priority.total_run_time_ms if priority else 0

        queues: list[list[TestUnit]] = [[] for _ in range(threads)]
        loads = [0] * threads
        for unit in sorted(units, key=run_time, reverse=True):
            index = loads.index(min(loads))
            queues[index].append(unit)
            loads[index] += run_time(unit)
        logger.trace(f"expected run time per thread (ms): {loads}")

        ordered: list[TestUnit] = []
        longest = max(len(queue) for queue in queues)
        for position in range(longest):
            for queue in queues:
                if position < len(queue):
                    ordered.append(queue[position])
        return ordered
