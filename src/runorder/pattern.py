"""This module resolves the patterns that make up a specified test order.

A specified order is a comma-separated list of patterns, each of which
selects a set of test classes and, optionally, a set of methods within those
classes. The position of each pattern within the list is significant: it is
used as the priority of the tests that it matches.

The following forms of pattern are supported:

* :code:`pkg.FooTest`, :code:`pkg/FooTest`, :code:`FooTest.java`: a class.
  Patterns that do not name a package match classes in any package.
* :code:`**/Foo*Test`: a class glob. :code:`**` crosses package boundaries,
  whereas :code:`*` and :code:`?` do not.
* :code:`FooTest#testBar`, :code:`FooTest#test*+check*`: one or more
  methods within a class, separated by :code:`+`.
* :code:`%regex[pkg.*Test.*]`: a regular expression over the class file
  name. A :code:`#` within the brackets introduces a method expression.
* :code:`!pattern`: an exclusion. Exclusions play no part in ordering and
  are dropped from the resolved order.
"""
from __future__ import annotations

__all__ = (
    "MatchPattern",
    "resolve_patterns",
)

import fnmatch
import functools
import re
import typing as t
from collections.abc import Iterator, Sequence

import attr
from loguru import logger

from .exceptions import InvalidPattern

_REGEX_PREFIX = "%regex["


@functools.lru_cache(maxsize=None)
def _compile_class_glob(glob: str) -> re.Pattern[str]:
    parts: list[str] = []
    i = 0
    while i < len(glob):
        if glob.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif glob.startswith("**", i):
            parts.append(".*")
            i += 2
        elif glob[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif glob[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(glob[i]))
            i += 1
    return re.compile("".join(parts))


@functools.lru_cache(maxsize=None)
def _compile_regex(expression: str) -> re.Pattern[str]:
    return re.compile(expression)


def _normalize_class_glob(text: str) -> str:
    """Transforms a class pattern into a glob over class file names."""
    for suffix in (".java", ".class"):
        if text.endswith(suffix):
            text = text[:-len(suffix)]
            break
    text = text.replace(".", "/")
    if "/" not in text:
        text = f"**/{text}"
    return f"{text}.class"


@attr.s(frozen=True, slots=True, auto_attribs=True, str=False)
class MatchPattern:
    """An inclusive pattern over test classes and methods.

    Attributes
    ----------
    text: str
        The pattern as it was written by the user. Patterns that differ only
        in how they were written are equal.
    class_pattern: str, optional
        A glob over class file names (or a regular expression if
        :code:`is_regex` is set). If absent, any class is matched.
    method_patterns: Sequence[str], optional
        Alternative globs (or regular expressions) over method names. If
        absent, any method is matched.
    is_regex: bool
        Whether the class and method patterns are regular expressions.
    """
    text: str = attr.ib(eq=False)
    class_pattern: t.Optional[str] = None
    method_patterns: t.Optional[Sequence[str]] = None
    is_regex: bool = False

    def __str__(self) -> str:
        return self.text

    def _matches_class(self, class_file_name: str) -> bool:
        if self.class_pattern is None:
            return True
        if self.is_regex:
            dotted = class_file_name
            if dotted.endswith(".class"):
                dotted = dotted[:-len(".class")]
            dotted = dotted.replace("/", ".")
            regex = _compile_regex(self.class_pattern)
            return bool(regex.fullmatch(class_file_name)
                        or regex.fullmatch(dotted))
        return bool(_compile_class_glob(self.class_pattern).fullmatch(class_file_name))

    def _matches_method(self, method_name: str) -> bool:
        assert self.method_patterns is not None
        if self.is_regex:
            return any(_compile_regex(p).fullmatch(method_name) for p in self.method_patterns)
        return any(fnmatch.fnmatchcase(method_name, p) for p in self.method_patterns)

    def match_as_inclusive(
        self,
        class_file_name: str,
        method_name: t.Optional[str] = None,
    ) -> bool:
        """Determines whether a given class, and optionally a method within
        that class, is accepted by this pattern.

        When no method name is given, only the class is checked against the
        pattern.
        """
        if not self._matches_class(class_file_name):
            return False
        if method_name is None or self.method_patterns is None:
            return True
        return self._matches_method(method_name)

    @classmethod
    def from_string(cls, text: str) -> MatchPattern:
        """Parses a single inclusive pattern.

        Raises
        ------
        InvalidPattern
            If the given pattern is illegal.
        """
        text = text.strip()
        if not text:
            raise InvalidPattern(text, "empty pattern")

        if text.startswith(_REGEX_PREFIX):
            if not text.endswith("]"):
                raise InvalidPattern(text, "unterminated regular expression")
            body = text[len(_REGEX_PREFIX):-1]
            class_part, sep, method_part = body.partition("#")
            if not class_part and not method_part:
                raise InvalidPattern(text, "empty regular expression")
            for expr in (class_part, method_part):
                try:
                    re.compile(expr)
                except re.error as err:
                    raise InvalidPattern(text, str(err)) from err
            return MatchPattern(
                text=text,
                class_pattern=class_part or None,
                method_patterns=(method_part,) if sep and method_part else None,
                is_regex=True,
            )

        class_part, sep, method_part = text.partition("#")
        class_part = class_part.strip()
        method_part = method_part.strip()
        if sep and not class_part and not method_part:
            raise InvalidPattern(text, "missing class and method")
        if sep and "#" in method_part:
            raise InvalidPattern(text, "more than one '#' separator")

        class_pattern = _normalize_class_glob(class_part) if class_part else None
        method_patterns: t.Optional[tuple[str, ...]] = None
        if method_part:
            method_patterns = tuple(m.strip() for m in method_part.split("+")
                                    if m.strip())
            if not method_patterns:
                raise InvalidPattern(text, "empty method pattern")
        return MatchPattern(
            text=text,
            class_pattern=class_pattern,
            method_patterns=method_patterns,
        )


def _split(spec: str) -> Iterator[str]:
    """Splits a specification at each top-level comma, leaving commas
    inside regular expressions intact.
    """
    start = 0
    depth = 0
    i = 0
    while i < len(spec):
        if spec.startswith(_REGEX_PREFIX, i) and depth == 0:
            depth = 1
            i += len(_REGEX_PREFIX)
            continue
        char = spec[i]
        if depth > 0:
            if char == "\\":
                i += 1
            elif char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
        elif char == ",":
            yield spec[start:i]
            start = i + 1
        i += 1
    yield spec[start:]


def resolve_patterns(spec: str) -> tuple[MatchPattern, ...]:
    """Resolves a specification string into its ordered, inclusive patterns.
    Repeated patterns are dropped, keeping their first occurrence.

    Raises
    ------
    InvalidPattern
        If the specification contains an illegal pattern.
    """
    patterns: list[MatchPattern] = []
    for item in _split(spec):
        item = item.strip()
        if not item:
            continue
        if item.startswith("!"):
            logger.trace(f"ignoring exclusion in specified order: {item}")
            continue
        pattern = MatchPattern.from_string(item)
        if pattern in patterns:
            logger.trace(f"ignoring repeated pattern in specified order: {item}")
            continue
        patterns.append(pattern)
    logger.debug(f"resolved specified order [{spec}] into "
                 f"{len(patterns)} patterns")
    return tuple(patterns)
