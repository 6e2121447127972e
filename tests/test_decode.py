"""
Document decoding tests through the public loading functions.

Validates accepted input types, configuration keywords, byte decoding and
exact number handling for loads, load and iterload.
"""

from fractions import Fraction
from io import BytesIO
from io import StringIO
from typing import Any

import pytest

import exactjson


def test_exact_decimal_parsing() -> None:
    """
    Validates decimal literals are stored without rounding.
    """
    rval = exactjson.loads("[1.1]").as_array()[0]
    assert rval.as_number() == Fraction(11, 10)
    assert rval.visit(str, float, bool) == 1.1


def test_number_converter_choice() -> None:
    """
    Validates the caller picks the numeric type through visit.
    """
    doc = exactjson.loads("[1, 2.5]")
    assert doc.visit(str, float, bool) == [1.0, 2.5]
    assert doc.visit(str, str, bool) == ["1", "5/2"]


@pytest.mark.parametrize(
    "invalid_digit", ["[1\uff10]", "[0.\uff10]", "[0e\uff10]"]
)
def test_nonascii_digits_rejected(invalid_digit: str) -> None:
    """
    Validates rejection of non-ASCII digits in number literals.
    """
    with pytest.raises(exactjson.JSONDecodeError):
        exactjson.loads(invalid_digit)


@pytest.mark.parametrize("data", [b"[1]", bytearray(b"[1]")])
def test_bytes_input_handling(data: bytes | bytearray) -> None:
    """
    Validates bytes input is decoded as UTF-8.
    """
    assert exactjson.loads(data).to_native() == [1]


@pytest.mark.parametrize(
    "constant", ["[NaN]", "[Infinity]", "[-Infinity]", "[nan]"]
)
def test_nonfinite_constants_rejected(constant: str) -> None:
    """
    Validates the grammar has no NaN or Infinity literals.
    """
    with pytest.raises(exactjson.JSONDecodeError):
        exactjson.loads(constant)


def test_object_member_order() -> None:
    """
    Validates object members keep document order.
    """
    s = '{"xkd":1, "kcw":2, "art":3, "hxm":4, "qrt":5, "pad":6, "hoy":7}'
    members = exactjson.loads(s).as_object()

    assert list(members) == ["xkd", "kcw", "art", "hxm", "qrt", "pad", "hoy"]
    assert exactjson.load(StringIO(s)).to_dict(number_converter=int) == {
        "xkd": 1,
        "kcw": 2,
        "art": 3,
        "hxm": 4,
        "qrt": 5,
        "pad": 6,
        "hoy": 7,
    }


def test_value_is_immutable() -> None:
    """
    Validates parsed objects and arrays cannot be modified.
    """
    doc = exactjson.loads('{"a": [1]}')

    with pytest.raises(TypeError):
        doc.as_object()["b"] = exactjson.NULL  # type: ignore[index]
    assert isinstance(doc.as_object()["a"].as_array(), tuple)


def test_trailing_data_not_read() -> None:
    """
    Validates parsing stops at the end of the document.
    """
    assert exactjson.loads("[1, 2, 3]5").to_native() == [1, 2, 3]
    assert exactjson.loads('{"a": true} garbage').to_native() == {"a": True}


def test_invalid_escape_rejection() -> None:
    """
    Validates rejection of invalid escape sequences.
    """
    with pytest.raises(exactjson.LexicalError, match="escape") as exc_info:
        exactjson.loads('["abc\\y"]')
    assert exc_info.value.kind is exactjson.LexicalErrorKind.ILLEGAL_ESCAPE
    assert exc_info.value.text == "\\y"


@pytest.mark.parametrize("invalid_value", [1, 3.14, [], {}, None])
def test_invalid_input_type_rejection(invalid_value: Any) -> None:
    """
    Validates rejection of non-text input types.
    """
    with pytest.raises(
        TypeError, match="the JSON document must be str, bytes or bytearray"
    ):
        exactjson.loads(invalid_value)


def test_load_requires_read_method() -> None:
    """
    Validates load only accepts file objects.
    """
    with pytest.raises(TypeError, match=r"read\(\) method"):
        exactjson.load("[1]")  # type: ignore[arg-type]


def test_unknown_keyword_rejected() -> None:
    """
    Validates keywords are ParseConfig fields.
    """
    with pytest.raises(TypeError):
        exactjson.loads("[1]", parse_float=float)


def test_utf8_bom_handling() -> None:
    """
    Validates a BOM is an invalid character unless the codec strips it.
    """
    bom_json = "[1,2,3]".encode("utf-8-sig")

    with pytest.raises(exactjson.LexicalError) as exc_info:
        exactjson.loads(bom_json)
    assert exc_info.value.text == "\ufeff"

    with pytest.raises(exactjson.LexicalError):
        exactjson.loads(bom_json.decode("utf-8"))

    assert exactjson.loads(bom_json, encoding="utf-8-sig").to_native() == [
        1,
        2,
        3,
    ]
    assert exactjson.load(
        BytesIO(bom_json), encoding="utf-8-sig"
    ).to_native() == [1, 2, 3]

    # A BOM inside a string is an ordinary character
    assert exactjson.loads('["\ufeff"]').to_native() == ["\ufeff"]


def test_large_integer_literals() -> None:
    """
    Validates integer literals of any width keep every digit.
    """
    digits = "1" * 5000
    number = exactjson.loads(f"[{digits}]").as_array()[0]

    assert number.as_number().denominator == 1
    assert number.as_text() == digits


def test_load_binary_file_in_small_chunks() -> None:
    """
    Validates multi-byte sequences split across read() calls.
    """
    data = '{"caf\xe9": "\u2603 \U0001d11e"}'.encode()
    fp = BytesIO(data)

    result = exactjson.load(fp, read_size=1)

    assert result.to_native() == {"caf\xe9": "\u2603 \U0001d11e"}


def test_load_text_file() -> None:
    """
    Validates text file objects are read as is.
    """
    fp = StringIO('[\n  "a",\n  {"b": null}\n]')
    assert exactjson.load(fp, read_size=3).to_native() == ["a", {"b": None}]


def test_invalid_utf8_passes_through() -> None:
    """
    Validates decoding errors are raised unchanged, not wrapped.
    """
    with pytest.raises(UnicodeDecodeError):
        exactjson.loads(b'["\xff"]')

    # A sequence cut off by the end of input
    with pytest.raises(UnicodeDecodeError):
        exactjson.loads(b'["\xc3')


def test_iterload_pulls_elements() -> None:
    """
    Validates iterload yields each top-level element in order.
    """
    elements = exactjson.iterload(StringIO('[1, "two", [3], {"four": 4}]'))

    assert [element.to_native() for element in elements] == [
        1,
        "two",
        [3],
        {"four": 4},
    ]


def test_iterload_accepts_text_chunks() -> None:
    """
    Validates iterload reads an iterable of text chunks.
    """
    chunks = ["[1", "0, 2", "0]"]
    elements = exactjson.iterload(chunks)

    assert [element.as_number() for element in elements] == [10, 20]
