"""
aptos_txn.address
=================

Account address parsing and derivation.

Format
------
An account address is exactly 32 bytes. Its textual form is hex, with or
without a ``0x`` prefix, 1 to 64 hex digits, case-insensitive. Short inputs
are left-padded with zeros, so ``"0x1"``, ``"0x01"`` and ``"1"`` all name the
same account.

Rendering follows AIP-40: the special addresses ``0x0`` .. ``0xf`` are printed
in short form, every other address with all 64 digits.

Derivation
----------
For the single-key Ed25519 scheme the account address of a fresh account is
its authentication key::

    address = sha3_256(public_key || 0x00)

This module provides:
- AccountAddress.from_str / from_hex(text) -> AccountAddress
- AccountAddress.from_public_key(pubkey) -> AccountAddress
- parse(text) -> AccountAddress (alias)
- is_valid(text) -> bool
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .errors import AddressParseError
from .utils.hash import sha3_256

__all__ = [
    "ADDRESS_LENGTH",
    "ED25519_SCHEME",
    "AccountAddress",
    "parse",
    "is_valid",
]

ADDRESS_LENGTH = 32
ED25519_SCHEME = 0x00

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


@dataclass(frozen=True)
class AccountAddress:
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise TypeError(f"AccountAddress expects bytes, got {type(self.value).__name__}")
        if len(self.value) != ADDRESS_LENGTH:
            raise ValueError(
                f"AccountAddress must be {ADDRESS_LENGTH} bytes, got {len(self.value)}"
            )
        object.__setattr__(self, "value", bytes(self.value))

    # ---- Constructors ----

    @classmethod
    def from_hex(cls, text: str) -> "AccountAddress":
        if not isinstance(text, str):
            raise AddressParseError("address must be a string", repr(text))
        s = text.strip()
        digits = s[2:] if s[:2] in ("0x", "0X") else s
        if not digits:
            raise AddressParseError("address has no hex digits", text)
        if len(digits) > ADDRESS_LENGTH * 2:
            raise AddressParseError(
                f"address longer than {ADDRESS_LENGTH * 2} hex digits", text
            )
        if not _HEX_RE.match(digits):
            raise AddressParseError("address contains non-hex characters", text)
        return cls(bytes.fromhex(digits.rjust(ADDRESS_LENGTH * 2, "0")))

    from_str = from_hex

    @classmethod
    def from_public_key(cls, public_key: bytes, scheme: int = ED25519_SCHEME) -> "AccountAddress":
        return cls(sha3_256(bytes(public_key) + bytes([scheme])))

    @classmethod
    def coerce(cls, value: Union["AccountAddress", str, bytes]) -> "AccountAddress":
        """Accept an address, its hex text or its raw 32 bytes."""
        if isinstance(value, AccountAddress):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        return cls(bytes(value))

    # ---- Views ----

    def hex(self) -> str:
        """Long form, always 64 digits."""
        return "0x" + self.value.hex()

    def is_special(self) -> bool:
        return self.value[:-1] == bytes(ADDRESS_LENGTH - 1) and self.value[-1] < 0x10

    def __str__(self) -> str:
        if self.is_special():
            return f"0x{self.value[-1]:x}"
        return self.hex()

    def __repr__(self) -> str:
        return f"AccountAddress({self})"

    def __bytes__(self) -> bytes:
        return self.value


def parse(text: str) -> AccountAddress:
    return AccountAddress.from_hex(text)


def is_valid(text: str) -> bool:
    try:
        AccountAddress.from_hex(text)
    except AddressParseError:
        return False
    return True
