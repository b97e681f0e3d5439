import typing as _typing

import attr as _attr


class RunOrderError(Exception):
    """Base class used by all runorder exceptions."""


class UnknownStrategy(RunOrderError):
    """A given run order strategy does not exist."""
    def __init__(self, name: _typing.Any) -> None:
        msg = f"unknown run order strategy: {name!r}"
        super().__init__(msg)


@_attr.s(auto_exc=True, auto_attribs=True)
class MalformedRequest(RunOrderError):
    """A test method request could not be split into a class and a method."""
    request: str

    def __str__(self) -> str:
        return f"malformed test method request: {self.request}"


@_attr.s(auto_exc=True, auto_attribs=True)
class InvalidPattern(RunOrderError):
    """A test pattern within a specified order is illegal."""
    pattern: str
    reason: str

    def __str__(self) -> str:
        return f"invalid test pattern [{self.pattern}]: {self.reason}"


@_attr.s(auto_exc=True, auto_attribs=True)
class StatisticsFileCorrupt(RunOrderError):
    """The run statistics file contains an unreadable entry."""
    filename: str
    line: int
    reason: str

    def __str__(self) -> str:
        return (f"corrupt run statistics file [{self.filename}] "
                f"at line {self.line}: {self.reason}")


class BadConfigurationException(RunOrderError):
    """An illegal configuration was provided to runorder."""
    def __init__(self, reason: str) -> None:
        msg = f"bad configuration file: {reason}"
        super().__init__(msg)
