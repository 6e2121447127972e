"""Immutable parsing configuration."""

import codecs
from dataclasses import dataclass

DEFAULT_READ_SIZE = 64 * 1024


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing behavior with immutable settings.

    strict_literals rejects ``true``, ``false`` and ``null`` when they run
    straight into further identifier characters (``null1``); by default the
    literal is accepted and the rest is left for the next token. encoding
    names the decoder used for byte sources, and read_size the chunk size
    requested from file objects.
    """

    strict_literals: bool = False
    encoding: str = "utf-8"
    read_size: int = DEFAULT_READ_SIZE

    def __post_init__(self) -> None:
        if not isinstance(self.strict_literals, bool):
            raise TypeError("strict_literals must be a boolean")
        if not isinstance(self.encoding, str):
            raise TypeError("encoding must be a string")
        if not isinstance(self.read_size, int) or isinstance(
            self.read_size, bool
        ):
            raise TypeError("read_size must be an integer")
        if self.read_size <= 0:
            raise ValueError("read_size must be positive")

        # Raises LookupError for an unknown codec
        codecs.lookup(self.encoding)
