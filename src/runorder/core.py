from __future__ import annotations

__all__ = (
    "TestUnit",
    "TestsToRun",
    "to_class_file_name",
)

import typing as t
from collections.abc import Iterable, Iterator, Sequence

import attr


def to_class_file_name(class_name: str) -> str:
    """Converts a fully-qualified class name into the path-style name of its
    compiled class file.

    Example
    -------
    >>> to_class_file_name("org.example.FooTest")
    'org/example/FooTest.class'
    """
    return class_name.replace(".", "/") + ".class"


@attr.s(frozen=True, slots=True, auto_attribs=True, order=False)
class TestUnit:
    """A discoverable test class, identified solely by its qualified name.

    Attributes
    ----------
    name: str
        The fully-qualified name of the test class (e.g., `pkg.sub.FooTest`).
    """
    __test__ = False
    name: str

    def __str__(self) -> str:
        return self.name

    @property
    def class_file_name(self) -> str:
        """The path-style name of the class file for this test unit."""
        return to_class_file_name(self.name)


class TestsToRun(Sequence[TestUnit]):
    """An ordered collection of test units in which each unit appears once.

    Duplicate units collapse to their first occurrence, and the relative
    order of all other units is preserved.
    """
    __test__ = False

    def __init__(self, units: Iterable[TestUnit] = ()) -> None:
        self.__units: tuple[TestUnit, ...] = tuple(dict.fromkeys(units))

    @classmethod
    def from_names(cls, names: Iterable[str]) -> TestsToRun:
        return cls(TestUnit(name) for name in names)

    def __repr__(self) -> str:
        names = ", ".join(unit.name for unit in self.__units)
        return f"TestsToRun([{names}])"

    def __len__(self) -> int:
        return len(self.__units)

    def __iter__(self) -> Iterator[TestUnit]:
        yield from self.__units

    def __contains__(self, unit: t.Any) -> bool:
        return unit in self.__units

    @t.overload
    def __getitem__(self, index: int) -> TestUnit:
        ...

    @t.overload
    def __getitem__(self, index: slice) -> Sequence[TestUnit]:
        ...

    def __getitem__(self, index: int | slice) -> TestUnit | Sequence[TestUnit]:
        return self.__units[index]

    def __eq__(self, other: t.Any) -> bool:
        if not isinstance(other, TestsToRun):
            return False
        return self.__units == other.__units

    def __hash__(self) -> int:
        return hash(self.__units)

    @property
    def names(self) -> tuple[str, ...]:
        """The names of the test units in this collection, in order."""
        return tuple(unit.name for unit in self.__units)
