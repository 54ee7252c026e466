"""
aptos_txn.bcs
=============

Binary Canonical Serialization (BCS) encoder.

Every function in this module is pure: it takes a Python value and returns the
exact bytes the validator's decoder expects. There is no serializer object and
no global state; composite encoders are built by concatenating the output of
smaller ones.

Format
------
Integers
    ``u8 u16 u32 u64 u128 u256`` are little-endian, fixed width (1, 2, 4, 8,
    16, 32 bytes). Negative values and values that do not fit are rejected.

Booleans
    One byte, ``0x01`` for True and ``0x00`` for False.

ULEB128
    Unsigned base-128 varint: 7 value bits per byte, least significant group
    first, MSB set on every byte except the last. Used for sequence lengths
    and enum variant indices, and bounded to ``2**32 - 1``::

        0      -> 00
        127    -> 7f
        128    -> 80 01
        16384  -> 80 80 01

Byte sequences and strings
    ULEB128 length followed by the raw bytes. Strings are their UTF-8 bytes.

Fixed byte arrays
    Raw bytes, no length prefix (e.g. the 32-byte account address).

Sequences
    ULEB128 element count followed by each element's encoding, in order.

Options
    ``0x00`` for None, otherwise ``0x01`` followed by the value.

Structs
    Concatenation of the field encodings in declaration order. No field tags,
    no padding, no length.

Enums (tagged unions)
    ULEB128 variant index followed by the active variant's payload. Indices
    below 128 therefore take a single byte.

Anything outside a declared type raises `EncodeError` before any bytes are
produced.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

from .errors import EncodeError

__all__ = [
    "MAX_U8",
    "MAX_U16",
    "MAX_U32",
    "MAX_U64",
    "MAX_U128",
    "MAX_U256",
    "MAX_ULEB128",
    "encode_uint",
    "encode_u8",
    "encode_u16",
    "encode_u32",
    "encode_u64",
    "encode_u128",
    "encode_u256",
    "encode_bool",
    "encode_uleb128",
    "encode_bytes",
    "encode_str",
    "encode_fixed_bytes",
    "encode_sequence",
    "encode_option",
    "encode_struct",
    "encode_variant",
]

T = TypeVar("T")

MAX_U8 = 2**8 - 1
MAX_U16 = 2**16 - 1
MAX_U32 = 2**32 - 1
MAX_U64 = 2**64 - 1
MAX_U128 = 2**128 - 1
MAX_U256 = 2**256 - 1

# Lengths and variant indices are u32 on the decoding side.
MAX_ULEB128 = MAX_U32


def _require_int(value: object, what: str) -> int:
    # bool is an int subclass; a stray True must not encode as u64 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodeError(f"{what} expects an int, got {type(value).__name__}")
    return value


def encode_uint(value: int, bits: int) -> bytes:
    """Little-endian unsigned integer of exactly `bits` width."""
    if bits not in (8, 16, 32, 64, 128, 256):
        raise EncodeError(f"unsupported integer width: {bits}")
    v = _require_int(value, f"u{bits}")
    if v < 0 or v >= (1 << bits):
        raise EncodeError(f"value {v} out of range for u{bits}")
    return v.to_bytes(bits // 8, "little")


def encode_u8(value: int) -> bytes:
    return encode_uint(value, 8)


def encode_u16(value: int) -> bytes:
    return encode_uint(value, 16)


def encode_u32(value: int) -> bytes:
    return encode_uint(value, 32)


def encode_u64(value: int) -> bytes:
    return encode_uint(value, 64)


def encode_u128(value: int) -> bytes:
    return encode_uint(value, 128)


def encode_u256(value: int) -> bytes:
    return encode_uint(value, 256)


def encode_bool(value: bool) -> bytes:
    if not isinstance(value, bool):
        raise EncodeError(f"bool expects True/False, got {type(value).__name__}")
    return b"\x01" if value else b"\x00"


def encode_uleb128(value: int) -> bytes:
    """
    Encode an unsigned integer as ULEB128.

    Example:
        0x00 -> b'\\x00'
        0x7f -> b'\\x7f'
        0x80 -> b'\\x80\\x01'
    """
    n = _require_int(value, "uleb128")
    if n < 0 or n > MAX_ULEB128:
        raise EncodeError(f"value {n} out of range for uleb128 (max {MAX_ULEB128})")
    out = bytearray()
    while True:
        to_write = n & 0x7F
        n >>= 7
        if n:
            out.append(to_write | 0x80)
        else:
            out.append(to_write)
            break
    return bytes(out)


def encode_fixed_bytes(value: bytes, length: int) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise EncodeError(f"expected bytes, got {type(value).__name__}")
    raw = bytes(value)
    if len(raw) != length:
        raise EncodeError(f"expected exactly {length} bytes, got {len(raw)}")
    return raw


def encode_bytes(value: bytes) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise EncodeError(f"expected bytes, got {type(value).__name__}")
    raw = bytes(value)
    return encode_uleb128(len(raw)) + raw


def encode_str(value: str) -> bytes:
    if not isinstance(value, str):
        raise EncodeError(f"expected str, got {type(value).__name__}")
    return encode_bytes(value.encode("utf-8"))


def encode_sequence(items: Iterable[T], encoder: Callable[[T], bytes]) -> bytes:
    parts = [encoder(item) for item in items]
    return encode_uleb128(len(parts)) + b"".join(parts)


def encode_option(value: Optional[T], encoder: Callable[[T], bytes]) -> bytes:
    if value is None:
        return b"\x00"
    return b"\x01" + encoder(value)


def encode_struct(*fields: bytes) -> bytes:
    return b"".join(fields)


def encode_variant(index: int, payload: bytes = b"") -> bytes:
    return encode_uleb128(index) + payload
