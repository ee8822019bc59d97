"""Tests for the BCS codec."""

from __future__ import annotations

import pytest

from deepbook_client.bcs import (
    ADDRESS,
    BOOL,
    STRING,
    U8,
    U64,
    U128,
    BcsReader,
    BcsWriter,
    Option,
    Struct,
    Vector,
    decode,
    encode,
    vec_set,
)
from deepbook_client.errors import DecodeError, EncodeError


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, "00"), (127, "7f"), (128, "8001"), (300, "ac02"), (16384, "808001")],
)
def test_uleb128_encoding(value: int, expected: str) -> None:
    data = BcsWriter().uleb128(value).getvalue()

    assert data.hex() == expected
    assert BcsReader(data).uleb128() == value


def test_integers_are_little_endian() -> None:
    assert encode(U64, 1).hex() == "0100000000000000"
    assert encode(U8, 255) == b"\xff"
    assert decode(U128, (1).to_bytes(16, "little")) == 1


def test_integer_range_is_checked() -> None:
    with pytest.raises(EncodeError):
        encode(U8, 256)
    with pytest.raises(EncodeError):
        encode(U64, -1)
    with pytest.raises(EncodeError):
        encode(U64, True)


def test_bool_encoding() -> None:
    assert encode(BOOL, True) == b"\x01"
    assert decode(BOOL, b"\x00") is False
    with pytest.raises(DecodeError):
        decode(BOOL, b"\x02")
    with pytest.raises(EncodeError):
        encode(BOOL, 1)


def test_address_is_fixed_width() -> None:
    data = encode(ADDRESS, "0x6")

    assert len(data) == 32
    assert decode(ADDRESS, data) == "0x" + "0" * 63 + "6"
    with pytest.raises(EncodeError):
        encode(ADDRESS, "0xzz")


def test_string_and_byte_vectors() -> None:
    assert encode(STRING, "pool") == b"\x04pool"
    assert decode(Vector(U8), b"\x03abc") == b"abc"


def test_vec_set_of_order_ids() -> None:
    order_ids = [1, 2**127]
    data = encode(vec_set(U128), {"contents": order_ids})

    assert data[0] == 2
    assert decode(vec_set(U128), data) == {"contents": order_ids}


def test_option_and_struct() -> None:
    shape = Struct("Entry", [("id", U64), ("note", Option(STRING))])

    assert decode(shape, encode(shape, {"id": 9, "note": None})) == {"id": 9, "note": None}
    assert encode(Option(U8), 5) == b"\x01\x05"
    with pytest.raises(EncodeError, match="missing field 'note'"):
        encode(shape, {"id": 9})


def test_decode_errors() -> None:
    with pytest.raises(DecodeError, match="Unexpected end of input"):
        decode(U64, b"\x01\x02")
    with pytest.raises(DecodeError, match="trailing bytes"):
        decode(U8, b"\x01\x02")
    with pytest.raises(DecodeError):
        decode(Option(U8), b"\x02\x00")
