"""
Exception taxonomy for document parsing and value access.

Lexical and structural failures share JSONDecodeError so callers can catch
any malformed-input problem in one place, while still being able to tell
the two apart by class and by their ``kind`` enums. Failures raised by the
underlying byte or text source are never wrapped here.
"""

from enum import Enum

type Position = int


class JSONDecodeError(ValueError):
    """
    Handles document parsing failures with position information.

    Error state containing the code point offset plus the 1-based line and
    column where the problem was detected.
    """

    def __init__(
        self,
        msg: str,
        pos: Position = 0,
        lineno: int = 1,
        colno: int | None = None,
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.pos = pos
        self.lineno = lineno
        self.colno = pos + 1 if colno is None else colno

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")


class LexicalErrorKind(Enum):
    """Reasons the lexer rejects input text."""

    INVALID_CHARACTER = "invalid_character"
    INVALID_NUMBER = "invalid_number"
    INVALID_LITERAL = "invalid_literal"
    CONTROL_CHARACTER = "control_character"
    INCOMPLETE_STRING = "incomplete_string"
    INCOMPLETE_ESCAPE = "incomplete_escape"
    ILLEGAL_ESCAPE = "illegal_escape"
    UNPAIRED_HIGH_SURROGATE = "unpaired_high_surrogate"
    UNPAIRED_LOW_SURROGATE = "unpaired_low_surrogate"
    SURROGATE_FOLLOWED_BY_NON_SURROGATE = "surrogate_followed_by_non_surrogate"
    INVALID_SURROGATE_PAIR = "invalid_surrogate_pair"


class LexicalError(JSONDecodeError):
    """
    Malformed input text, reported with the offending literal substring.
    """

    def __init__(
        self,
        kind: LexicalErrorKind,
        msg: str,
        text: str,
        pos: Position = 0,
        lineno: int = 1,
        colno: int | None = None,
    ) -> None:
        self.kind = kind
        self.text = text
        super().__init__(msg, pos, lineno, colno)


class StructuralErrorKind(Enum):
    """Grammar violations detected by the parser."""

    EMPTY_DOCUMENT = "empty_document"
    OBJECT_OR_ARRAY_REQUIRED = "object_or_array_required"
    EXPECTED_KEY_OR_BRACE = "expected_key_or_brace"
    EXPECTED_KEY = "expected_key"
    DUPLICATE_KEY = "duplicate_key"
    EXPECTED_COLON = "expected_colon"
    EXPECTED_VALUE = "expected_value"
    EXPECTED_COMMA_OR_BRACE = "expected_comma_or_brace"
    EXPECTED_VALUE_OR_BRACKET = "expected_value_or_bracket"
    EXPECTED_COMMA_OR_BRACKET = "expected_comma_or_bracket"


class StructuralError(JSONDecodeError):
    """
    Tokens arrived in an order the grammar does not allow.

    ``key`` names the object key being parsed when the fault is inside an
    object, so the caller can locate it without a position.
    """

    def __init__(
        self,
        kind: StructuralErrorKind,
        msg: str,
        key: str | None = None,
        pos: Position = 0,
        lineno: int = 1,
        colno: int | None = None,
    ) -> None:
        self.kind = kind
        self.key = key
        super().__init__(msg, pos, lineno, colno)


class WrongVariantError(TypeError):
    """A Value was accessed as a variant it does not hold."""


class UnsupportedTypeError(TypeError):
    """A native object has no Value representation."""


class NumberStringError(ValueError):
    """A NumberString does not hold a valid number literal."""


class InvalidPathError(ValueError):
    """A lookup path is not a series of ``.key`` and ``[index]`` parts."""


class PathNotFoundError(LookupError):
    """A lookup path does not exist in the Value it was applied to."""
