"""
Lookup of nested values by path.

A path is a series of object keys and array indexes written as
``.addresses[3].city``. Keys run up to the next ``.`` or ``[``; indexes
are non-negative decimal integers.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from ._errors import InvalidPathError
from ._errors import PathNotFoundError
from ._value import Value
from ._value import ValueKind

_PATH_PART = re.compile(r"\.([^.\[\]]+)|\[([0-9]+)\]")


@dataclass(frozen=True)
class PathStep:
    """
    One key or index of a path.

    ``path`` is the text of the path up to and including this step, used
    to report where a lookup stopped.
    """

    path: str
    key: str | None = None
    index: int | None = None

    def apply(self, value: Value) -> Value:
        if self.key is not None:
            return self._member(value, self.key)
        if self.index is not None:
            return self._element(value, self.index)
        raise InvalidPathError(
            f"The path step {self.path} has neither a key nor an index"
        )

    def _member(self, value: Value, key: str) -> Value:
        if value.kind is not ValueKind.OBJECT:
            raise PathNotFoundError(
                f"The path {self.path} does not exist: the value before it "
                f"is {value.kind.value}, not an object"
            )
        members = value.as_object()
        if key not in members:
            raise PathNotFoundError(
                f"The path {self.path} does not exist: the object has no "
                f"key {key!r}"
            )
        return members[key]

    def _element(self, value: Value, index: int) -> Value:
        if value.kind is not ValueKind.ARRAY:
            raise PathNotFoundError(
                f"The path {self.path} does not exist: the value before it "
                f"is {value.kind.value}, not an array"
            )
        elements = value.as_array()
        if index >= len(elements):
            raise PathNotFoundError(
                f"The path {self.path} does not exist: the array has "
                f"{len(elements)} elements"
            )
        return elements[index]


def parse_path(path: str) -> tuple[PathStep, ...]:
    """Splits a path into its steps, raising InvalidPathError if malformed."""
    steps: list[PathStep] = []
    end = 0
    for match in _PATH_PART.finditer(path):
        if match.start() != end:
            break
        end = match.end()
        key, index = match.groups()
        if key is not None:
            steps.append(PathStep(path[:end], key=key))
        else:
            steps.append(PathStep(path[:end], index=int(index)))

    if not steps or end != len(path):
        raise InvalidPathError(
            f"The path {path} is not a valid path, it must consist of a "
            "series of object keys and indexes, such as .addresses[3].city"
        )
    return tuple(steps)


def compile_path(path: str) -> Callable[[Value], Value]:
    """
    Parses a path once and returns a function that looks it up.

    The returned function raises PathNotFoundError naming the part of the
    path that could not be followed.
    """
    steps = parse_path(path)

    def lookup(value: Value) -> Value:
        for step in steps:
            value = step.apply(value)
        return value

    return lookup


def find(value: Value, path: str) -> Value:
    return compile_path(path)(value)
