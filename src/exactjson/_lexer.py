"""
Tokenizer turning a stream of code points into document tokens.

The lexer pulls one code point at a time from its source and never looks
more than one code point ahead, so it works the same over an in-memory
string and over a socket or file that is still being written.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import NoReturn

from ._config import ParseConfig
from ._errors import LexicalError
from ._errors import LexicalErrorKind
from ._errors import Position
from ._profile import ProfileContext
from ._source import PushbackIterator


class TokenKind(Enum):
    """Lexical token kinds."""

    OPEN_BRACE = "{"
    CLOSE_BRACE = "}"
    OPEN_BRACKET = "["
    CLOSE_BRACKET = "]"
    COMMA = ","
    COLON = ":"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass(frozen=True)
class Token:
    """
    A single lexical token with the position where it starts.

    ``text`` is the decoded content for strings (no quotes, escapes
    resolved) and the raw literal for numbers, booleans and null.
    """

    kind: TokenKind
    text: str
    start: Position = 0
    lineno: int = 1
    colno: int = 1


_WHITESPACE = frozenset(" \t\n\r")

_PUNCTUATION = {
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
    "[": TokenKind.OPEN_BRACKET,
    "]": TokenKind.CLOSE_BRACKET,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
}

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_HEX_DIGITS = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}

_LITERALS = {
    "t": ("true", TokenKind.BOOLEAN),
    "f": ("false", TokenKind.BOOLEAN),
    "n": ("null", TokenKind.NULL),
}

_NUMBER_SHAPE = "-?[0-9]+([.][0-9]+)?([eE][-+]?[0-9]+)?"

_EXPECTED_VALUE = "an array, object, string, number, boolean, or null"

_HIGH_SURROGATES = range(0xD800, 0xDC00)
_LOW_SURROGATES = range(0xDC00, 0xE000)


def _is_digit(char: str | None) -> bool:
    # ASCII only: str.isdigit() accepts other scripts' digits
    return char is not None and "0" <= char <= "9"


def _is_identifier_char(char: str) -> bool:
    return char.isalnum() or char == "_"


class Lexer:
    """
    Tokenizes a document for the recursive descent parser.

    ``next_token()`` returns the next Token, or None at end of input, and
    raises LexicalError for malformed text. Errors from the code point
    source pass through unchanged. After end of input every call returns
    None again; after any error every call raises that same error again.
    """

    def __init__(
        self, chars: Iterable[str], config: ParseConfig | None = None
    ) -> None:
        self.config = config or ParseConfig()
        self._chars = PushbackIterator(chars)
        self.pos: Position = 0
        self.lineno = 1
        self.colno = 1
        self._previous = (0, 1, 1)
        self._finished = False
        self._failure: Exception | None = None
        self._failure_traceback: TracebackType | None = None

    def __iter__(self) -> "Lexer":
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def next_token(self) -> Token | None:
        """Returns the next token, or None once the input is exhausted."""
        if self._failure is not None:
            raise self._failure.with_traceback(self._failure_traceback)
        if self._finished:
            return None

        try:
            token = self._scan_token()
        except Exception as exc:
            self._failure = exc
            self._failure_traceback = exc.__traceback__
            raise

        if token is None:
            self._finished = True
        return token

    def _read(self) -> str | None:
        """Returns the next code point and advances, or None at the end."""
        char = next(self._chars, None)
        if char is not None:
            self._previous = (self.pos, self.lineno, self.colno)
            self.pos += 1
            if char == "\n":
                self.lineno += 1
                self.colno = 1
            else:
                self.colno += 1
        return char

    def _unread(self, char: str) -> None:
        """Returns the last code point read to the front of the source."""
        self._chars.push_back(char)
        self.pos, self.lineno, self.colno = self._previous

    def _fail(
        self,
        kind: LexicalErrorKind,
        msg: str,
        text: str,
        at: tuple[Position, int, int],
    ) -> NoReturn:
        pos, lineno, colno = at
        raise LexicalError(kind, msg, text, pos, lineno, colno)

    def _scan_token(self) -> Token | None:
        char = self._read()
        while char is not None and char in _WHITESPACE:
            char = self._read()

        if char is None:
            return None

        start = self._previous

        if char in _PUNCTUATION:
            return Token(_PUNCTUATION[char], char, *start)
        elif char == '"':
            return self._scan_string(start)
        elif char == "-" or _is_digit(char):
            return self._scan_number(char, start)
        elif char in _LITERALS:
            return self._scan_literal(char, start)

        self._fail(
            LexicalErrorKind.INVALID_CHARACTER,
            f"Invalid character {char!r}: {_EXPECTED_VALUE} was expected",
            char,
            start,
        )

    def _scan_string(self, start: tuple[Position, int, int]) -> Token:
        """Scans a string after its opening quote, resolving escapes."""
        with ProfileContext("scan_string") as profile:
            chars: list[str] = []

            while True:
                char = self._read()
                if char is None:
                    partial = '"' + "".join(chars)
                    self._fail(
                        LexicalErrorKind.INCOMPLETE_STRING,
                        f"Incomplete string {partial}: a string must be "
                        'terminated by a "',
                        partial,
                        start,
                    )

                if char == '"':
                    profile.chars = len(chars)
                    return Token(TokenKind.STRING, "".join(chars), *start)

                if char < " ":
                    self._fail(
                        LexicalErrorKind.CONTROL_CHARACTER,
                        f"The ascii control character 0x{ord(char):02x} is "
                        "not valid in a string",
                        char,
                        self._previous,
                    )

                if char == "\\":
                    chars.append(self._scan_escape(chars))
                else:
                    chars.append(char)

    def _scan_escape(self, chars: list[str]) -> str:
        """Scans one escape after its backslash, returning the character."""
        at = self._previous
        char = self._read()
        if char is None:
            partial = "".join(chars) + "\\"
            self._fail(
                LexicalErrorKind.INCOMPLETE_ESCAPE,
                f"Incomplete string escape in {partial}",
                partial,
                at,
            )

        if char in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[char]

        if char != "u":
            self._fail(
                LexicalErrorKind.ILLEGAL_ESCAPE,
                f"Illegal string escape \\{char}",
                "\\" + char,
                at,
            )

        unit, escape = self._scan_code_unit("\\u", at)

        if unit in _LOW_SURROGATES:
            self._fail(
                LexicalErrorKind.UNPAIRED_LOW_SURROGATE,
                f"The surrogate string escape {escape} must be preceded by "
                "a high surrogate escape to form valid UTF-16",
                escape,
                at,
            )

        if unit not in _HIGH_SURROGATES:
            return chr(unit)

        # A high surrogate needs a \u low surrogate immediately after it
        if self._read() != "\\" or self._read() != "u":
            self._fail(
                LexicalErrorKind.UNPAIRED_HIGH_SURROGATE,
                f"The surrogate string escape {escape} must be followed by "
                "another surrogate escape to form valid UTF-16",
                escape,
                at,
            )

        low, low_escape = self._scan_code_unit("\\u", at)

        if low in _HIGH_SURROGATES:
            self._fail(
                LexicalErrorKind.INVALID_SURROGATE_PAIR,
                f"The surrogate string escape pair {escape}{low_escape} is "
                "not a valid UTF-16 surrogate pair",
                escape + low_escape,
                at,
            )

        if low not in _LOW_SURROGATES:
            self._fail(
                LexicalErrorKind.SURROGATE_FOLLOWED_BY_NON_SURROGATE,
                f"The surrogate string escape {escape} cannot be followed "
                f"by the non-surrogate escape {low_escape}",
                escape + low_escape,
                at,
            )

        return chr(0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00))

    def _scan_code_unit(
        self, escape: str, at: tuple[Position, int, int]
    ) -> tuple[int, str]:
        """Reads the 4 hex digits of a \\u escape."""
        value = 0
        for _ in range(4):
            char = self._read()
            if char is None:
                self._fail(
                    LexicalErrorKind.INCOMPLETE_ESCAPE,
                    f"Incomplete string escape in {escape}",
                    escape,
                    at,
                )

            escape += char
            if char not in _HEX_DIGITS:
                self._fail(
                    LexicalErrorKind.ILLEGAL_ESCAPE,
                    f"Illegal string escape {escape}",
                    escape,
                    at,
                )
            value = value * 16 + _HEX_DIGITS[char]

        return value, escape

    def _scan_digits(self, text: list[str]) -> str | None:
        """Appends a run of digits, returning the first code point after it."""
        char = self._read()
        while _is_digit(char):
            text.append(char)  # type: ignore[arg-type]
            char = self._read()
        return char

    def _scan_number(
        self, first: str, start: tuple[Position, int, int]
    ) -> Token:
        """
        Scans the longest prefix matching the number grammar.

        The code point that ends the match is pushed back for the next
        token. A grammar component missing its required digits fails with
        the text matched so far.
        """
        with ProfileContext("scan_number") as profile:
            text = [first]

            def invalid() -> NoReturn:
                literal = "".join(text)
                self._fail(
                    LexicalErrorKind.INVALID_NUMBER,
                    f"Invalid number {literal}: a number must satisfy the "
                    f"regex {_NUMBER_SHAPE}",
                    literal,
                    start,
                )

            char: str | None = first
            if first == "-":
                char = self._read()
                if not _is_digit(char):
                    invalid()
                text.append(char)  # type: ignore[arg-type]

            char = self._scan_digits(text)

            if char == ".":
                text.append(char)
                char = self._read()
                if not _is_digit(char):
                    invalid()
                text.append(char)  # type: ignore[arg-type]
                char = self._scan_digits(text)

            if char in ("e", "E"):
                text.append(char)  # type: ignore[arg-type]
                char = self._read()
                if char in ("+", "-"):
                    text.append(char)  # type: ignore[arg-type]
                    char = self._read()
                if not _is_digit(char):
                    invalid()
                text.append(char)  # type: ignore[arg-type]
                char = self._scan_digits(text)

            if char is not None:
                self._unread(char)

            profile.chars = len(text)
            return Token(TokenKind.NUMBER, "".join(text), *start)

    def _scan_literal(
        self, first: str, start: tuple[Position, int, int]
    ) -> Token:
        """Scans exactly the characters of ``true``, ``false`` or ``null``."""
        with ProfileContext("scan_literal") as profile:
            literal, kind = _LITERALS[first]
            text = first

            for expected in literal[1:]:
                char = self._read()
                if char is None:
                    break
                text += char
                if char != expected:
                    break

            if text == literal and self.config.strict_literals:
                char = self._read()
                if char is not None:
                    if _is_identifier_char(char):
                        text += char
                    else:
                        self._unread(char)

            if text != literal:
                self._fail(
                    LexicalErrorKind.INVALID_LITERAL,
                    f"Invalid sequence {text}: {_EXPECTED_VALUE} was "
                    "expected",
                    text,
                    start,
                )

            profile.chars = len(literal)
            return Token(kind, literal, *start)
