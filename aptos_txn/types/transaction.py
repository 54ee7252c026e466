"""
Transaction envelopes: RawTransaction, its authenticator and the signed pair.

All three are frozen value types. Changing any field of a RawTransaction
means building a new one, and a SignedTransaction built from the old one no
longer verifies against it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from ..address import AccountAddress
from .payload import TransactionPayload

__all__ = [
    "ED25519_PUBLIC_KEY_LENGTH",
    "ED25519_SIGNATURE_LENGTH",
    "RawTransaction",
    "Ed25519Authenticator",
    "TransactionAuthenticator",
    "SignedTransaction",
]

ED25519_PUBLIC_KEY_LENGTH = 32
ED25519_SIGNATURE_LENGTH = 64


@dataclass(frozen=True)
class RawTransaction:
    # Sender's address
    sender: AccountAddress
    # Must equal the sender's on-chain sequence number at execution time
    sequence_number: int
    payload: TransactionPayload
    # Maximum gas units to spend
    max_gas_amount: int
    # Price paid per gas unit
    gas_unit_price: int
    # Seconds since the Unix epoch after which the transaction is discarded
    expiration_timestamp_secs: int
    chain_id: int

    def with_changes(self, **changes: Any) -> "RawTransaction":
        return replace(self, **changes)

    def __str__(self) -> str:
        return (
            f"RawTransaction(sender={self.sender}, seq={self.sequence_number}, "
            f"payload={self.payload}, max_gas={self.max_gas_amount}, "
            f"gas_price={self.gas_unit_price}, "
            f"expires={self.expiration_timestamp_secs}, chain_id={self.chain_id})"
        )


@dataclass(frozen=True)
class Ed25519Authenticator:
    public_key: bytes
    signature: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "public_key", bytes(self.public_key))
        object.__setattr__(self, "signature", bytes(self.signature))


# Only the single-key Ed25519 authenticator is built by this SDK.
TransactionAuthenticator = Ed25519Authenticator


@dataclass(frozen=True)
class SignedTransaction:
    raw_txn: RawTransaction
    authenticator: TransactionAuthenticator

    @property
    def sender(self) -> AccountAddress:
        return self.raw_txn.sender

    @property
    def sequence_number(self) -> int:
        return self.raw_txn.sequence_number

    @property
    def expiration_timestamp_secs(self) -> int:
        return self.raw_txn.expiration_timestamp_secs
