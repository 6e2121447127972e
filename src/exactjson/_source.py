"""
Code point sources and the pull sequence the lexer and parser share.

A document can arrive as text, bytes, a text or binary file object, or an
iterable of text chunks. Everything is reduced to an iterator of single
code points; byte input is decoded incrementally so a large file is never
read into memory at once.
"""

import codecs
import logging
from collections.abc import Iterable
from collections.abc import Iterator
from types import TracebackType
from typing import IO
from typing import Any

from ._config import ParseConfig

logger = logging.getLogger(__name__)

type Source = (
    str | bytes | bytearray | memoryview | IO[str] | IO[bytes] | Iterable[str]
)


class PushbackIterator[T]:
    """
    Pull sequence with a LIFO push-back buffer and idempotent exhaustion.

    ``next()`` serves pushed-back items first, most recent first, before
    resuming the underlying iterator. Once the underlying iterator is
    exhausted or raises, every later pull (after the buffer drains) repeats
    the same StopIteration or the same exception object; the underlying
    iterator is never called again. Not safe for concurrent pulls.
    """

    def __init__(self, items: Iterable[T]) -> None:
        self._items: Iterator[T] = iter(items)
        self._buffer: list[T] = []
        self._terminal: BaseException | None = None
        self._traceback: TracebackType | None = None

    def __iter__(self) -> "PushbackIterator[T]":
        return self

    def __next__(self) -> T:
        if self._buffer:
            return self._buffer.pop()

        if self._terminal is not None:
            # The first traceback, so repeated pulls do not stack frames
            raise self._terminal.with_traceback(self._traceback)

        try:
            return next(self._items)
        except StopIteration:
            self._finish(StopIteration())
            raise
        except Exception as exc:
            self._finish(exc)
            raise

    def _finish(self, terminal: BaseException) -> None:
        self._items = iter(())
        self._terminal = terminal
        self._traceback = terminal.__traceback__

    def push_back(self, item: T) -> None:
        """Places an item in front of everything not yet pulled."""
        self._buffer.append(item)

    @property
    def exhausted(self) -> bool:
        """True once the underlying iterator has ended or failed."""
        return self._terminal is not None and not self._buffer


def _decode_chunks(
    chunks: Iterable[bytes], encoding: str
) -> Iterator[str]:
    """Incrementally decodes byte chunks, rejecting malformed sequences."""
    decoder = codecs.getincrementaldecoder(encoding)(errors="strict")
    for chunk in chunks:
        yield from decoder.decode(chunk)

    # Raises UnicodeDecodeError for a sequence truncated by end of input
    yield from decoder.decode(b"", final=True)


def _read_chunks(fp: IO[Any], read_size: int) -> Iterator[Any]:
    """Reads a file object until it returns an empty chunk."""
    while chunk := fp.read(read_size):
        yield chunk


def _iter_file(fp: IO[Any], config: ParseConfig) -> Iterator[str]:
    chunks = _read_chunks(fp, config.read_size)
    first = next(chunks, None)
    if first is None:
        return

    if isinstance(first, str):
        yield from first
        for chunk in chunks:
            yield from chunk
    elif isinstance(first, bytes | bytearray):
        yield from _decode_chunks(
            _prepend(bytes(first), chunks), config.encoding
        )
    else:
        raise TypeError(
            f"read() must return str or bytes, not {type(first).__name__}"
        )


def _prepend[T](first: T, rest: Iterator[T]) -> Iterator[T]:
    yield first
    yield from rest


def iter_code_points(
    source: Source, config: ParseConfig | None = None
) -> Iterator[str]:
    """
    Returns an iterator of single code points from a document source.

    Text is used as is. Bytes and binary file objects are decoded with
    ``config.encoding``; a malformed sequence raises UnicodeDecodeError when
    the lexer reaches it. Errors raised by a file object propagate
    unchanged.
    """
    config = config or ParseConfig()

    if isinstance(source, str):
        logger.debug("Reading text source of %d code points", len(source))
        return iter(source)

    if isinstance(source, bytes | bytearray | memoryview):
        logger.debug("Reading %d byte source", len(source))
        return _decode_chunks([bytes(source)], config.encoding)

    if hasattr(source, "read"):
        logger.debug(
            "Reading %s source in chunks of %d",
            type(source).__name__,
            config.read_size,
        )
        return _iter_file(source, config)  # type: ignore[arg-type]

    if isinstance(source, Iterable):
        logger.debug("Reading chunked %s source", type(source).__name__)
        return _iter_text_chunks(source)

    raise TypeError(
        "the document source must be str, bytes, a file object or an "
        f"iterable of str, not {type(source).__name__}"
    )


def _iter_text_chunks(chunks: Iterable[str]) -> Iterator[str]:
    for chunk in chunks:
        if not isinstance(chunk, str):
            raise TypeError(
                f"document chunks must be str, not {type(chunk).__name__}"
            )
        yield from chunk
