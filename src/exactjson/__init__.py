"""
Exact, streaming JSON document parsing.

Parses documents into an immutable Value tree whose numbers are exact
rationals, so no digit of the source is lost. A top-level array can be
parsed lazily, one element per pull, from text, bytes, file objects or an
iterable of text chunks.
"""

import logging
from typing import IO
from typing import Any

from ._config import ParseConfig
from ._errors import InvalidPathError
from ._errors import JSONDecodeError
from ._errors import LexicalError
from ._errors import LexicalErrorKind
from ._errors import NumberStringError
from ._errors import PathNotFoundError
from ._errors import Position
from ._errors import StructuralError
from ._errors import StructuralErrorKind
from ._errors import UnsupportedTypeError
from ._errors import WrongVariantError
from ._lexer import Lexer
from ._lexer import Token
from ._lexer import TokenKind
from ._parser import Parser
from ._parser import parse_document
from ._parser import parse_stream
from ._path import PathStep
from ._path import compile_path
from ._path import find
from ._path import parse_path
from ._profile import HotPathStats
from ._profile import ProfileContext
from ._profile import clear_hot_path_stats
from ._profile import get_hot_path_stats
from ._source import PushbackIterator
from ._source import Source
from ._source import iter_code_points
from ._value import FALSE
from ._value import NULL
from ._value import TRUE
from ._value import NumberString
from ._value import Value
from ._value import ValueKind
from ._value import from_array
from ._value import from_bool
from ._value import from_document
from ._value import from_native
from ._value import from_number
from ._value import from_object
from ._value import from_string
from ._value import normalized_number_text

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def loads(s: str | bytes | bytearray, **kwargs: Any) -> Value:
    """
    Parses a complete document held in memory.

    Keyword arguments are ParseConfig fields. Bytes are decoded with the
    configured encoding.
    """
    if not isinstance(s, str | bytes | bytearray):
        raise TypeError(
            "the JSON document must be str, bytes or bytearray, not "
            f"{type(s).__name__}"
        )

    config = ParseConfig(**kwargs)
    return parse_document(s, config)


def load(fp: IO[str] | IO[bytes], **kwargs: Any) -> Value:
    """
    Parses a complete document from a text or binary file object.

    The file is read in chunks of ``read_size``; reading stops at the end
    of the document.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    config = ParseConfig(**kwargs)
    return parse_document(fp, config)


def iterload(source: Source, **kwargs: Any) -> PushbackIterator[Value]:
    """
    Parses a document lazily, yielding top-level array elements one at a
    time, or a single object.
    """
    config = ParseConfig(**kwargs)
    return parse_stream(source, config)


__all__ = [
    "FALSE",
    "NULL",
    "TRUE",
    "HotPathStats",
    "InvalidPathError",
    "JSONDecodeError",
    "Lexer",
    "LexicalError",
    "LexicalErrorKind",
    "NumberString",
    "NumberStringError",
    "ParseConfig",
    "Parser",
    "PathNotFoundError",
    "PathStep",
    "Position",
    "ProfileContext",
    "PushbackIterator",
    "Source",
    "StructuralError",
    "StructuralErrorKind",
    "Token",
    "TokenKind",
    "UnsupportedTypeError",
    "Value",
    "ValueKind",
    "WrongVariantError",
    "clear_hot_path_stats",
    "compile_path",
    "find",
    "from_array",
    "from_bool",
    "from_document",
    "from_native",
    "from_number",
    "from_object",
    "from_string",
    "get_hot_path_stats",
    "iter_code_points",
    "iterload",
    "load",
    "loads",
    "normalized_number_text",
    "parse_document",
    "parse_path",
    "parse_stream",
]
