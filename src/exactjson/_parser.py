"""
Recursive descent parser building Value trees from the token stream.

Objects are always parsed eagerly. Arrays are parsed by a generator that
resumes the array state machine on each pull, which lets a top-level array
of any size be processed one element at a time.
"""

import logging
from collections.abc import Iterator
from types import MappingProxyType
from typing import NoReturn

from ._config import ParseConfig
from ._errors import StructuralError
from ._errors import StructuralErrorKind
from ._lexer import Lexer
from ._lexer import Token
from ._lexer import TokenKind
from ._profile import ProfileContext
from ._source import PushbackIterator
from ._source import Source
from ._source import iter_code_points
from ._value import NULL
from ._value import Value
from ._value import ValueKind
from ._value import from_bool
from ._value import from_number_literal
from ._value import from_string

logger = logging.getLogger(__name__)

_VALUE_DESCRIPTION = "an object, array, string, number, boolean, or null"


class Parser:
    """
    Parses tokens from a Lexer with one token of lookahead.

    The lookahead is a push-back buffer in front of the lexer: a token that
    turns out to belong to the caller is returned to the buffer rather than
    peeked at.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self._tokens = PushbackIterator(lexer)

    def _next(self) -> Token | None:
        return next(self._tokens, None)

    def _peek(self) -> Token | None:
        token = self._next()
        if token is not None:
            self._tokens.push_back(token)
        return token

    def _fail(
        self,
        kind: StructuralErrorKind,
        msg: str,
        token: Token | None,
        key: str | None = None,
    ) -> NoReturn:
        if token is None:
            # At end of input the fault is where the input stopped
            raise StructuralError(
                kind,
                msg,
                key,
                self.lexer.pos,
                self.lexer.lineno,
                self.lexer.colno,
            )
        raise StructuralError(
            kind, msg, key, token.start, token.lineno, token.colno
        )

    def parse_value(self) -> Value | None:
        """
        Parses whatever value starts at the next token.

        Returns None, leaving the token in place, if the next token cannot
        start a value or there is no next token; only the caller knows which
        error that is.
        """
        token = self._next()
        if token is None:
            return None

        kind = token.kind
        if kind is TokenKind.OPEN_BRACE:
            self._tokens.push_back(token)
            return self.parse_object()
        elif kind is TokenKind.OPEN_BRACKET:
            self._tokens.push_back(token)
            return Value(ValueKind.ARRAY, tuple(self.parse_array()))
        elif kind is TokenKind.STRING:
            return from_string(token.text)
        elif kind is TokenKind.NUMBER:
            return from_number_literal(token.text)
        elif kind is TokenKind.BOOLEAN:
            return from_bool(token.text == "true")
        elif kind is TokenKind.NULL:
            return NULL

        self._tokens.push_back(token)
        return None

    def parse_object(self) -> Value:
        """Parses an object; the next token must be its opening brace."""
        with ProfileContext("parse_object"):
            self._next()
            members: dict[str, Value] = {}

            token = self._next()
            if token is not None and token.kind is TokenKind.CLOSE_BRACE:
                return Value(ValueKind.OBJECT, MappingProxyType(members))

            if token is None or token.kind is not TokenKind.STRING:
                self._fail(
                    StructuralErrorKind.EXPECTED_KEY_OR_BRACE,
                    "A JSON object must have a string key or closing brace "
                    "after the opening brace",
                    token,
                )

            while True:
                key = token.text
                if key in members:
                    self._fail(
                        StructuralErrorKind.DUPLICATE_KEY,
                        f"A JSON object cannot have duplicate key {key!r}",
                        token,
                        key,
                    )

                colon = self._next()
                if colon is None or colon.kind is not TokenKind.COLON:
                    self._fail(
                        StructuralErrorKind.EXPECTED_COLON,
                        f"The JSON object key {key!r} must be followed by a "
                        "colon",
                        colon,
                        key,
                    )

                value = self.parse_value()
                if value is None:
                    self._fail(
                        StructuralErrorKind.EXPECTED_VALUE,
                        f"The JSON object key {key!r} must have a value that "
                        f"is {_VALUE_DESCRIPTION}",
                        self._peek(),
                        key,
                    )
                members[key] = value

                separator = self._next()
                if separator is not None:
                    if separator.kind is TokenKind.CLOSE_BRACE:
                        break
                    if separator.kind is TokenKind.COMMA:
                        token = self._next()
                        if token is None or token.kind is not TokenKind.STRING:
                            self._fail(
                                StructuralErrorKind.EXPECTED_KEY,
                                "A JSON object must have a string key after "
                                f"a comma, following key {key!r}",
                                token,
                                key,
                            )
                        continue

                self._fail(
                    StructuralErrorKind.EXPECTED_COMMA_OR_BRACE,
                    f"The JSON key/value pair {key!r} must be followed by a "
                    "comma or closing brace",
                    separator,
                    key,
                )

            return Value(ValueKind.OBJECT, MappingProxyType(members))

    def parse_array(self) -> Iterator[Value]:
        """
        Consumes an array's opening bracket and returns its elements lazily.

        Each element is parsed only when it is pulled, so a malformed array
        can yield several valid elements before raising.
        """
        self._next()
        return self._array_elements()

    def _array_elements(self) -> Iterator[Value]:
        token = self._next()
        if token is not None and token.kind is TokenKind.CLOSE_BRACKET:
            return

        if token is not None:
            self._tokens.push_back(token)
        value = self.parse_value()
        if value is None:
            self._fail(
                StructuralErrorKind.EXPECTED_VALUE_OR_BRACKET,
                "A JSON array must have an element or closing bracket after "
                "the opening bracket",
                self._peek(),
            )
        yield value

        while True:
            separator = self._next()
            if separator is not None:
                if separator.kind is TokenKind.CLOSE_BRACKET:
                    return
                if separator.kind is TokenKind.COMMA:
                    value = self.parse_value()
                    if value is None:
                        self._fail(
                            StructuralErrorKind.EXPECTED_VALUE,
                            "A JSON array element must be "
                            f"{_VALUE_DESCRIPTION}",
                            self._peek(),
                        )
                    yield value
                    continue

            self._fail(
                StructuralErrorKind.EXPECTED_COMMA_OR_BRACKET,
                "A JSON array element must be followed by a comma or "
                "closing bracket",
                separator,
            )

    def _document_start(self) -> Token:
        token = self._next()
        if token is None:
            self._fail(
                StructuralErrorKind.EMPTY_DOCUMENT,
                "A JSON document cannot be empty",
                None,
            )
        if token.kind not in (TokenKind.OPEN_BRACE, TokenKind.OPEN_BRACKET):
            self._fail(
                StructuralErrorKind.OBJECT_OR_ARRAY_REQUIRED,
                "A JSON document must begin with a brace or bracket",
                token,
            )
        self._tokens.push_back(token)
        return token

    def parse_document(self) -> Value:
        """
        Parses a whole document eagerly.

        Input after the closing brace or bracket of the document is never
        read.
        """
        token = self._document_start()
        logger.debug("Parsing document starting with %s", token.text)
        if token.kind is TokenKind.OPEN_BRACE:
            return self.parse_object()
        return Value(ValueKind.ARRAY, tuple(self.parse_array()))

    def parse_stream(self) -> PushbackIterator[Value]:
        """
        Parses a document as a pull sequence of values.

        An object document is parsed now and becomes a one element sequence;
        an array document yields its elements as they are pulled.
        """
        token = self._document_start()
        logger.debug("Streaming document starting with %s", token.text)
        if token.kind is TokenKind.OPEN_BRACE:
            return PushbackIterator((self.parse_object(),))
        return PushbackIterator(self._logged(self.parse_array()))

    def _logged(self, elements: Iterator[Value]) -> Iterator[Value]:
        count = 0
        for element in elements:
            count += 1
            yield element
        logger.debug("Streamed %d array elements", count)


def _parser_for(source: Source, config: ParseConfig | None) -> Parser:
    config = config or ParseConfig()
    return Parser(Lexer(iter_code_points(source, config), config))


def parse_document(
    source: Source, config: ParseConfig | None = None
) -> Value:
    """
    Parses a complete document from text, bytes, or a file object.

    Raises LexicalError or StructuralError (both JSONDecodeError) for
    malformed input; errors raised by the source itself propagate unchanged.
    """
    return _parser_for(source, config).parse_document()


def parse_stream(
    source: Source, config: ParseConfig | None = None
) -> PushbackIterator[Value]:
    """
    Parses a document lazily, one top-level array element per pull.

    Errors in the document's first token are raised here; later errors are
    raised by the pull that reaches them, and repeated by every later pull.
    """
    return _parser_for(source, config).parse_stream()
