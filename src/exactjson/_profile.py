"""
Opt-in hot path profiling for the lexer and parser.

Setting EXACTJSON_PROFILE before import turns it on. When it is unset,
ProfileContext is an empty context manager and the stats stay empty.
"""

import os
import time
from dataclasses import dataclass
from typing import Any

PROFILE_HOT_PATHS = __debug__ and "EXACTJSON_PROFILE" in os.environ

_hot_path_stats: dict[str, "HotPathStats"] = {}


@dataclass
class HotPathStats:
    """Accumulated timing for one named hot path."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records one call with its timing and characters processed."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars

    @property
    def mean_time_ns(self) -> float:
        if not self.call_count:
            return 0.0
        return self.total_time_ns / self.call_count


def get_hot_path_stats() -> dict[str, HotPathStats]:
    """Returns a snapshot of the statistics recorded so far."""
    return dict(_hot_path_stats)


def clear_hot_path_stats() -> None:
    _hot_path_stats.clear()


if PROFILE_HOT_PATHS:

    class ProfileContext:
        """
        Times the enclosed block under ``name``.

        The block may set ``chars`` to the number of code points it
        consumed; the count is added to the stats on exit.
        """

        __slots__ = ("name", "chars", "_started")

        def __init__(self, name: str) -> None:
            self.name = name
            self.chars = 0
            self._started = 0

        def __enter__(self) -> "ProfileContext":
            self._started = time.perf_counter_ns()
            return self

        def __exit__(self, *exc_info: Any) -> None:
            elapsed = time.perf_counter_ns() - self._started
            stats = _hot_path_stats.get(self.name)
            if stats is None:
                stats = _hot_path_stats[self.name] = HotPathStats(self.name)
            stats.record_call(elapsed, self.chars)

else:

    class ProfileContext:  # type: ignore[no-redef]
        __slots__ = ("name", "chars")

        def __init__(self, name: str) -> None:
            self.name = name
            self.chars = 0

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, *exc_info: Any) -> None:
            pass
