"""
Immutable value tree produced by the parser.

Value is a closed tagged union over six kinds. Numbers are held exactly:
parsed literals as decimal.Decimal, which keeps every digit at a cost
proportional to the literal's length, and other rationals as
fractions.Fraction. Callers always receive a Fraction; the Decimal is
converted only when a number is asked for, so a literal such as
``1e999999999`` parses as quickly as ``1``.
"""

import decimal
import math
import numbers
import re
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from types import MappingProxyType
from typing import Any

from ._errors import NumberStringError
from ._errors import UnsupportedTypeError
from ._errors import WrongVariantError


class ValueKind(Enum):
    """The six variants a Value can hold."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


class NumberString(str):
    """A string holding a number literal, to be stored as a Number."""

    __slots__ = ()


_NUMBER_LITERAL = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?")

type Number = Fraction | decimal.Decimal

_PAYLOAD_TYPES: dict[ValueKind, type | tuple[type, ...]] = {
    ValueKind.OBJECT: MappingProxyType,
    ValueKind.ARRAY: tuple,
    ValueKind.STRING: str,
    ValueKind.NUMBER: (Fraction, decimal.Decimal),
    ValueKind.BOOLEAN: bool,
    ValueKind.NULL: type(None),
}


@dataclass(frozen=True)
class Value:
    """
    One node of a parsed document.

    Construct values with the ``from_*`` functions rather than directly.
    The payload is a read-only mapping of str to Value for objects, a tuple
    of Value for arrays, str, a finite Decimal or a Fraction, bool, or
    None; anything else raises TypeError.
    """

    kind: ValueKind
    payload: Any

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ValueKind):
            raise TypeError(
                f"kind must be a ValueKind, not {type(self.kind).__name__}"
            )
        if not isinstance(self.payload, _PAYLOAD_TYPES[self.kind]):
            raise TypeError(
                f"A {self.kind.value} Value cannot hold a "
                f"{type(self.payload).__name__}"
            )
        if (
            isinstance(self.payload, decimal.Decimal)
            and not self.payload.is_finite()
        ):
            raise ValueError(
                f"The decimal {self.payload!r} has no exact number value"
            )

    def __hash__(self) -> int:
        if self.kind is ValueKind.OBJECT:
            return hash((self.kind, frozenset(self.payload.items())))
        return hash((self.kind, self.payload))

    def __repr__(self) -> str:
        return f"Value({self.kind.value}, {self.payload!r})"

    def _require(self, kind: ValueKind) -> Any:
        if self.kind is not kind:
            raise WrongVariantError(
                f"The Value is {self.kind.value}, not {kind.value}"
            )
        return self.payload

    def as_object(self) -> Mapping[str, "Value"]:
        """Returns the members of an object."""
        return self._require(ValueKind.OBJECT)  # type: ignore[no-any-return]

    def as_array(self) -> tuple["Value", ...]:
        """Returns the elements of an array."""
        return self._require(ValueKind.ARRAY)  # type: ignore[no-any-return]

    def as_string(self) -> str:
        return self._require(ValueKind.STRING)  # type: ignore[no-any-return]

    def as_number(self) -> Fraction:
        return _exact(self._require(ValueKind.NUMBER))

    def as_boolean(self) -> bool:
        return self._require(ValueKind.BOOLEAN)  # type: ignore[no-any-return]

    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def is_document(self) -> bool:
        """True for the kinds allowed at the top of a document."""
        return self.kind in (ValueKind.OBJECT, ValueKind.ARRAY)

    def as_text(self) -> str:
        """
        Returns a display string for a string, number, or boolean.

        Integral numbers are written without a fractional part; other
        numbers are written in plain decimal notation.
        """
        if self.kind is ValueKind.STRING:
            return self.payload  # type: ignore[no-any-return]
        elif self.kind is ValueKind.NUMBER:
            return normalized_number_text(self.payload)
        elif self.kind is ValueKind.BOOLEAN:
            return "true" if self.payload else "false"

        raise WrongVariantError(
            f"The Value is {self.kind.value}, not a string, number, "
            "or boolean"
        )

    def visit[S, N, B](
        self,
        string_converter: Callable[[str], S],
        number_converter: Callable[[Fraction], N],
        boolean_converter: Callable[[bool], B],
    ) -> Any:
        """
        Converts the tree into native containers and converted leaves.

        Objects become dicts and arrays become lists, recursively; each
        string, number and boolean is passed through its converter, and null
        becomes None. For example ``visit(str, float, bool)`` produces what
        the standard json module would.
        """
        if self.kind is ValueKind.OBJECT:
            return {
                key: member.visit(
                    string_converter, number_converter, boolean_converter
                )
                for key, member in self.payload.items()
            }
        elif self.kind is ValueKind.ARRAY:
            return [
                element.visit(
                    string_converter, number_converter, boolean_converter
                )
                for element in self.payload
            ]
        elif self.kind is ValueKind.STRING:
            return string_converter(self.payload)
        elif self.kind is ValueKind.NUMBER:
            return number_converter(_exact(self.payload))
        elif self.kind is ValueKind.BOOLEAN:
            return boolean_converter(self.payload)

        return None

    def to_native(self) -> Any:
        """Converts to dicts, lists, str, Fraction, bool and None."""
        return self.visit(_identity, _identity, _identity)

    def to_dict(
        self,
        string_converter: Callable[[str], Any] | None = None,
        number_converter: Callable[[Fraction], Any] | None = None,
        boolean_converter: Callable[[bool], Any] | None = None,
    ) -> dict[str, Any]:
        """Converts an object with ``visit``, by default to native leaves."""
        self._require(ValueKind.OBJECT)
        return self.visit(  # type: ignore[no-any-return]
            string_converter or _identity,
            number_converter or _identity,
            boolean_converter or _identity,
        )

    def to_list(
        self,
        string_converter: Callable[[str], Any] | None = None,
        number_converter: Callable[[Fraction], Any] | None = None,
        boolean_converter: Callable[[bool], Any] | None = None,
    ) -> list[Any]:
        """Converts an array with ``visit``, by default to native leaves."""
        self._require(ValueKind.ARRAY)
        return self.visit(  # type: ignore[no-any-return]
            string_converter or _identity,
            number_converter or _identity,
            boolean_converter or _identity,
        )


def _exact(number: Number) -> Fraction:
    if isinstance(number, Fraction):
        return number
    return Fraction(number)


def _identity[T](value: T) -> T:
    return value


TRUE = Value(ValueKind.BOOLEAN, True)
FALSE = Value(ValueKind.BOOLEAN, False)
NULL = Value(ValueKind.NULL, None)


def _digit_bound(n: int) -> int:
    """An upper bound on the decimal digits of n, without converting it."""
    # 30103 / 100000 is just above log10(2)
    return abs(n).bit_length() * 30103 // 100000 + 1


def _decimal_text(number: decimal.Decimal) -> str:
    """Writes a finite Decimal in plain notation, without trailing zeros."""
    sign, digits, exponent = number.as_tuple()
    coefficient = "".join(map(str, digits)).lstrip("0")
    if not coefficient:
        return "0"

    significant = coefficient.rstrip("0")
    exponent = int(exponent) + len(coefficient) - len(significant)
    if exponent >= 0:
        text = significant + "0" * exponent
    else:
        places = -exponent
        whole = significant[:-places] or "0"
        text = f"{whole}.{significant[-places:].rjust(places, '0')}"
    return "-" + text if sign else text


def normalized_number_text(number: Number) -> str:
    """
    Formats an exact number for display.

    Integers print as integers. Decimals, and fractions whose decimal
    expansion terminates, print exactly; other fractions are rounded to
    enough significant digits to cover both numerator and denominator.
    """
    if isinstance(number, decimal.Decimal):
        return _decimal_text(number)

    numerator, denominator = number.numerator, number.denominator
    if denominator == 1:
        return format(decimal.Decimal(numerator), "f")

    remainder = denominator
    exponents = []
    for prime in (2, 5):
        exponent = 0
        while remainder % prime == 0:
            remainder //= prime
            exponent += 1
        exponents.append(exponent)

    if remainder == 1:
        # Terminating expansion: exactly max(exponents) fractional digits
        precision = _digit_bound(numerator) + max(exponents)
    else:
        precision = max(
            28, _digit_bound(numerator) + _digit_bound(denominator)
        )

    context = decimal.Context(prec=precision)
    quotient = context.divide(
        decimal.Decimal(numerator), decimal.Decimal(denominator)
    )
    return format(quotient, "f")


def from_string(s: str) -> Value:
    return Value(ValueKind.STRING, str(s))


def from_bool(b: bool) -> Value:
    """Returns one of the shared TRUE and FALSE values."""
    return TRUE if b else FALSE


def from_number_literal(literal: str) -> Value:
    """Stores a lexed number literal exactly; the lexer has validated it."""
    return Value(ValueKind.NUMBER, decimal.Decimal(literal))


def _to_number(n: Any) -> Number | None:
    """
    Normalizes any supported numeric type, or returns None.

    Decimals, floats and number strings stay decimal; the rest become
    fractions.
    """
    if isinstance(n, bool):
        return None
    if isinstance(n, NumberString):
        if not _NUMBER_LITERAL.fullmatch(n):
            raise NumberStringError(
                f"Invalid number string {str(n)!r}: a number must satisfy "
                r"the regex -?[0-9]+([.][0-9]+)?([eE][-+]?[0-9]+)?"
            )
        return decimal.Decimal(str(n))
    if isinstance(n, Fraction):
        return n
    if isinstance(n, numbers.Integral):
        return Fraction(int(n))
    if isinstance(n, float):
        if not math.isfinite(n):
            raise ValueError(f"The float {n!r} has no exact number value")
        # repr is the shortest string that round trips, so 0.1 stays 1/10
        return decimal.Decimal(repr(n))
    if isinstance(n, decimal.Decimal):
        if not n.is_finite():
            raise ValueError(f"The decimal {n!r} has no exact number value")
        return n
    if isinstance(n, numbers.Rational):
        return Fraction(n.numerator, n.denominator)
    return None


def from_number(n: Any) -> Value:
    """
    Stores any supported number exactly.

    Accepts int (any width), float, decimal.Decimal, fractions.Fraction and
    other numbers.Rational types, and NumberString. Raises
    UnsupportedTypeError for anything else.
    """
    number = _to_number(n)
    if number is None:
        raise UnsupportedTypeError(
            f"A value of type {type(n).__name__} is not a valid type to "
            "convert to a Number. Acceptable types are int, float, "
            "Decimal, Fraction, and NumberString"
        )
    return Value(ValueKind.NUMBER, number)


def from_object(members: Mapping[str, Any]) -> Value:
    """Builds an object, converting each member with from_native."""
    converted: dict[str, Value] = {}
    for key, member in members.items():
        if not isinstance(key, str):
            raise UnsupportedTypeError(
                f"Object keys must be str, not {type(key).__name__}"
            )
        converted[key] = from_native(member)
    return Value(ValueKind.OBJECT, MappingProxyType(converted))


def from_array(elements: Iterable[Any]) -> Value:
    """Builds an array, converting each element with from_native."""
    return Value(
        ValueKind.ARRAY, tuple(from_native(element) for element in elements)
    )


def from_native(obj: Any) -> Value:  # noqa: PLR0911
    """
    Converts a native Python object into a Value.

    Mappings become objects, lists and tuples become arrays, None becomes
    NULL, and str, bool and numbers become leaves. An existing Value is
    returned unchanged. Raises UnsupportedTypeError naming the offending
    type for anything else, at any depth.
    """
    if isinstance(obj, Value):
        return obj
    elif obj is None:
        return NULL
    elif isinstance(obj, bool):
        return from_bool(obj)
    elif isinstance(obj, NumberString):
        return from_number(obj)
    elif isinstance(obj, str):
        return from_string(obj)
    elif isinstance(obj, Mapping):
        return from_object(obj)
    elif isinstance(obj, list | tuple):
        return from_array(obj)

    number = _to_number(obj)
    if number is None:
        raise UnsupportedTypeError(
            f"A value of type {type(obj).__name__} is not a valid type to "
            "convert to a Value. Acceptable types are Mapping, list, "
            "tuple, str, int, float, Decimal, Fraction, NumberString, "
            "bool, and None"
        )
    return Value(ValueKind.NUMBER, number)


def from_document(
    obj: Mapping[str, Any] | list[Any] | tuple[Any, ...],
) -> Value:
    """Like from_native, but only for an object or array at the top."""
    if not isinstance(obj, Mapping | list | tuple):
        raise UnsupportedTypeError(
            f"A document must be a Mapping, list or tuple, not "
            f"{type(obj).__name__}"
        )
    return from_native(obj)
