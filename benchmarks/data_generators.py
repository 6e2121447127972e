"""
Document generators for parsing benchmarks.

Every generator returns document text whose top level is an object or an
array, covering:
- small and large objects
- arrays of mixed leaves, and long arrays of records for streaming
- deep nesting
- escape-heavy strings
- numbers with more digits than a float holds
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]
_ESCAPE_PROBABILITY = 0.3


def generate_test_data(data_type: str, size: int = 0) -> str:
    """
    Generates benchmark document text of the named type.

    ``size`` overrides the element count for the array generators.
    """
    generators: dict[str, Callable[[int], str]] = {
        "small_object": _small_object,
        "large_object": _large_object,
        "mixed_array": _mixed_array,
        "nested_structure": _nested_structure,
        "string_heavy": _string_heavy,
        "record_array": _record_array,
        "precise_numbers": _precise_numbers,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type](size)


def _small_object(size: int) -> str:
    """A single record well under 1KB."""
    return json.dumps(_record(12345))


def _large_object(size: int) -> str:
    """A profile with transaction and activity histories, over 10KB."""
    data = {
        "user_id": random.randint(1_000_000, 9_999_999),
        "profile": {
            "name": _random_string(10),
            "email": f"{_random_string(8)}@{_random_string(6)}.com",
            "language": random.choice(["en", "es", "fr", "de", "zh"]),
            "notifications": {
                channel: random.choice([True, False])
                for channel in ("email", "sms", "push")
            },
        },
        "transactions": [
            {
                "id": f"txn_{i:06d}",
                "amount": round(random.uniform(1.0, 1000.0), 2),
                "currency": random.choice(["USD", "EUR", "GBP", "JPY"]),
                "timestamp": _timestamp(),
                "status": random.choice(["completed", "pending", "failed"]),
            }
            for i in range(size or 50)
        ],
        "activity_log": [
            {
                "timestamp": _timestamp(),
                "action": random.choice(["login", "logout", "purchase"]),
                "ip_address": ".".join(
                    str(random.randint(1, 255)) for _ in range(4)
                ),
            }
            for _ in range(30)
        ],
    }
    return json.dumps(data)


def _mixed_array(size: int) -> str:
    """An array of every leaf kind plus small objects."""
    makers: list[Callable[[int], Any]] = [
        lambda i: random.randint(-1000, 1000),
        lambda i: round(random.uniform(-100.0, 100.0), 3),
        lambda i: _random_string(random.randint(5, 30)),
        lambda i: random.choice([True, False]),
        lambda i: None,
        lambda i: {"index": i, "value": _random_string(10)},
    ]
    return json.dumps(
        [random.choice(makers)(i) for i in range(size or 200)]
    )


def _nested_structure(size: int) -> str:
    """Objects nested eight levels deep, each with an array of children."""

    def level(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(10)}
        return {
            "level": depth,
            "items": [level(depth - 1) for _ in range(3)],
            "nested": level(depth - 1),
        }

    return json.dumps(level(size or 8))


def _string_heavy(size: int) -> str:
    """Strings dense with two-character and \\u escapes."""

    def escaped_string() -> str:
        chars = []
        for _ in range(50):
            if random.random() < _ESCAPE_PROBABILITY:
                chars.append(random.choice(_ESCAPES))
            else:
                chars.append(
                    random.choice(string.ascii_letters + string.digits + " ")
                )
        return "".join(chars)

    strings = ", ".join(f'"{escaped_string()}"' for _ in range(size or 100))
    unicode = ", ".join(
        f'"\\u{random.randint(0x00A0, 0xD7FF):04x}\\ud834\\udd1e"'
        for _ in range(50)
    )
    return f'{{"strings": [{strings}], "unicode": [{unicode}]}}'


def _record_array(size: int) -> str:
    """A long top-level array of records, the shape streaming is for."""
    return json.dumps([_record(i) for i in range(size or 10_000)])


def _precise_numbers(size: int) -> str:
    """Numbers with 30 to 40 significant digits."""
    numbers = []
    for _ in range(size or 500):
        whole = "".join(random.choices(string.digits[1:], k=25))
        places = random.randint(5, 15)
        fraction = "".join(random.choices(string.digits, k=places))
        numbers.append(f"{whole}.{fraction}")
    return "[" + ", ".join(numbers) + "]"


def _record(i: int) -> dict[str, Any]:
    return {
        "id": i,
        "name": _random_string(12),
        "email": f"{_random_string(8)}@example.com",
        "active": random.choice([True, False]),
        "balance": round(random.uniform(0, 10_000), 2),
        "metadata": {"created": _timestamp(), "source": "api"},
    }


def _timestamp() -> str:
    return (
        f"2024-{random.randint(1, 12):02d}-{random.randint(1, 28):02d}"
        f"T{random.randint(0, 23):02d}:{random.randint(0, 59):02d}:00Z"
    )


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
