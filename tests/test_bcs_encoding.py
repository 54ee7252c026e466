"""
BCS primitive encoding: known vectors, width bounds and oracle round-trips.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from aptos_txn import bcs
from aptos_txn.errors import EncodeError

from bcs_oracle import Reader, decode_all


@pytest.mark.parametrize(
    "encoder,value,expected",
    [
        (bcs.encode_u8, 0xAB, "ab"),
        (bcs.encode_u16, 0x1234, "3412"),
        (bcs.encode_u32, 0x01020304, "04030201"),
        (bcs.encode_u64, 717, "cd02000000000000"),
        (bcs.encode_u128, 1, "01" + "00" * 15),
        (bcs.encode_u256, 2**255, "00" * 31 + "80"),
    ],
)
def test_unsigned_little_endian(encoder, value, expected):
    assert encoder(value).hex() == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, "00"),
        (1, "01"),
        (127, "7f"),
        (128, "8001"),
        (300, "ac02"),
        (16384, "808001"),
        (2**32 - 1, "ffffffff0f"),
    ],
)
def test_uleb128_vectors(value, expected):
    assert bcs.encode_uleb128(value).hex() == expected


def test_uleb128_rejects_values_above_u32():
    with pytest.raises(EncodeError):
        bcs.encode_uleb128(2**32)
    with pytest.raises(EncodeError):
        bcs.encode_uleb128(-1)


@pytest.mark.parametrize(
    "encoder,bad",
    [
        (bcs.encode_u8, 256),
        (bcs.encode_u8, -1),
        (bcs.encode_u16, 2**16),
        (bcs.encode_u32, 2**32),
        (bcs.encode_u64, 2**64),
        (bcs.encode_u128, 2**128),
        (bcs.encode_u256, 2**256),
    ],
)
def test_out_of_range_integers_raise(encoder, bad):
    with pytest.raises(EncodeError):
        encoder(bad)


def test_bool_is_strict():
    assert bcs.encode_bool(True) == b"\x01"
    assert bcs.encode_bool(False) == b"\x00"
    with pytest.raises(EncodeError):
        bcs.encode_bool(1)  # type: ignore[arg-type]
    # and a bool never passes for an integer
    with pytest.raises(EncodeError):
        bcs.encode_u64(True)


def test_bytes_and_str_are_length_prefixed():
    assert bcs.encode_bytes(b"") == b"\x00"
    assert bcs.encode_bytes(b"\xaa\xbb") == b"\x02\xaa\xbb"
    assert bcs.encode_str("coin") == b"\x04coin"
    # UTF-8 length, not code point count
    assert bcs.encode_str("é") == b"\x02\xc3\xa9"
    assert bcs.encode_bytes(b"x" * 200)[:2] == b"\xc8\x01"


def test_fixed_bytes_have_no_prefix_and_exact_length():
    assert bcs.encode_fixed_bytes(b"\x01" * 4, 4) == b"\x01" * 4
    with pytest.raises(EncodeError):
        bcs.encode_fixed_bytes(b"\x01" * 3, 4)


def test_sequence_option_struct_variant():
    assert bcs.encode_sequence([1, 2], bcs.encode_u16) == b"\x02\x01\x00\x02\x00"
    assert bcs.encode_sequence([], bcs.encode_u8) == b"\x00"
    assert bcs.encode_option(None, bcs.encode_u8) == b"\x00"
    assert bcs.encode_option(7, bcs.encode_u8) == b"\x01\x07"
    assert bcs.encode_struct(b"\x01", b"\x02\x03") == b"\x01\x02\x03"
    assert bcs.encode_variant(2, b"\xff") == b"\x02\xff"
    assert bcs.encode_variant(200) == b"\xc8\x01"


def test_wrong_types_raise_encode_error():
    with pytest.raises(EncodeError):
        bcs.encode_bytes("not bytes")  # type: ignore[arg-type]
    with pytest.raises(EncodeError):
        bcs.encode_str(b"not str")  # type: ignore[arg-type]
    with pytest.raises(EncodeError):
        bcs.encode_u64("5")  # type: ignore[arg-type]


# ---- Properties --------------------------------------------------------------


@settings(max_examples=200)
@given(st.integers(min_value=0, max_value=2**32 - 1))
def test_uleb128_roundtrip(n):
    assert decode_all(bcs.encode_uleb128(n), Reader.uleb128) == n


@given(st.sampled_from([8, 16, 32, 64, 128, 256]), st.data())
def test_uint_roundtrip(bits, data):
    v = data.draw(st.integers(min_value=0, max_value=2**bits - 1))
    enc = bcs.encode_uint(v, bits)
    assert len(enc) == bits // 8
    assert decode_all(enc, lambda r: r.uint(bits)) == v


@given(st.binary(max_size=300))
def test_bytes_roundtrip(b):
    assert decode_all(bcs.encode_bytes(b), Reader.bytes_) == b


@given(st.text(max_size=100))
def test_str_roundtrip(s):
    assert decode_all(bcs.encode_str(s), Reader.str_) == s


@given(st.lists(st.integers(min_value=0, max_value=2**64 - 1), max_size=40))
def test_sequence_roundtrip(xs):
    enc = bcs.encode_sequence(xs, bcs.encode_u64)
    assert decode_all(enc, lambda r: r.sequence(Reader.u64)) == xs


@given(st.one_of(st.none(), st.integers(min_value=0, max_value=255)))
def test_option_roundtrip(v):
    enc = bcs.encode_option(v, bcs.encode_u8)
    assert decode_all(enc, lambda r: r.option(Reader.u8)) == v


@given(st.binary(max_size=64))
def test_encoding_is_referentially_transparent(b):
    assert bcs.encode_bytes(b) == bcs.encode_bytes(bytes(b))
    assert bcs.encode_bytes(bytearray(b)) == bcs.encode_bytes(b)
