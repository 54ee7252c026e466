"""
REST models: typed views over the JSON the node returns for the endpoints the
transaction pipeline uses.

Includes:
- LedgerInfo (``GET /v1``)
- AccountInfo (``GET /v1/accounts/{address}``)
- PendingTransaction (``POST /v1/transactions``, 202 body)
- TransactionView (``GET /v1/transactions/by_hash/{hash}``)

Validation:
- u64 fields arrive as decimal strings; they are parsed and range-checked.
- Hashes are 0x-prefixed, 32-byte hex.
- Unknown fields are ignored so newer nodes don't break older clients.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..bcs import MAX_U64
from ..utils.bytes import normalize_hash

PENDING_TRANSACTION = "pending_transaction"
USER_TRANSACTION = "user_transaction"


def _u64(v: Any) -> int:
    if isinstance(v, bool):
        raise ValueError("expected a u64, got a bool")
    if isinstance(v, str):
        s = v.strip()
        if not s.isascii() or not s.isdigit():
            raise ValueError(f"expected a decimal u64 string, got {v!r}")
        v = int(s)
    if not isinstance(v, int):
        raise ValueError(f"expected a u64, got {type(v).__name__}")
    if not 0 <= v <= MAX_U64:
        raise ValueError(f"u64 out of range: {v}")
    return v


def _hash32(v: str) -> str:
    h = normalize_hash(v)
    if len(h) != 66:
        raise ValueError(f"expected a 32-byte hash, got {v!r}")
    return h


class LedgerInfo(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    chain_id: int
    ledger_version: int
    # Microseconds since the Unix epoch
    ledger_timestamp: int
    epoch: Optional[int] = None
    block_height: Optional[int] = None

    @field_validator("ledger_version", "ledger_timestamp", "epoch", "block_height", mode="before")
    @classmethod
    def _u64_ok(cls, v: Any) -> Any:
        return None if v is None else _u64(v)


class AccountInfo(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    sequence_number: int
    authentication_key: str

    @field_validator("sequence_number", mode="before")
    @classmethod
    def _seq_ok(cls, v: Any) -> int:
        return _u64(v)


class PendingTransaction(BaseModel):
    """Body of a 202 from the submission endpoint."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    hash: str
    sender: Optional[str] = None
    sequence_number: Optional[int] = None
    expiration_timestamp_secs: Optional[int] = None

    @field_validator("hash")
    @classmethod
    def _hash_ok(cls, v: str) -> str:
        return _hash32(v)

    @field_validator("sequence_number", "expiration_timestamp_secs", mode="before")
    @classmethod
    def _u64_ok(cls, v: Any) -> Any:
        return None if v is None else _u64(v)


class TransactionView(BaseModel):
    """
    A transaction as reported by the lookup endpoint.

    `type` is ``pending_transaction`` while the transaction sits in the mempool;
    once committed it carries `success`, `vm_status`, `version` and `gas_used`.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)
    type: str
    hash: str
    success: Optional[bool] = None
    vm_status: Optional[str] = None
    version: Optional[int] = None
    gas_used: Optional[int] = None

    @field_validator("hash")
    @classmethod
    def _hash_ok(cls, v: str) -> str:
        return _hash32(v)

    @field_validator("version", "gas_used", mode="before")
    @classmethod
    def _u64_ok(cls, v: Any) -> Any:
        return None if v is None else _u64(v)

    @property
    def is_pending(self) -> bool:
        return self.type == PENDING_TRANSACTION

    @property
    def is_committed(self) -> bool:
        return not self.is_pending and self.success is not None


__all__ = [
    "PENDING_TRANSACTION",
    "USER_TRANSACTION",
    "LedgerInfo",
    "AccountInfo",
    "PendingTransaction",
    "TransactionView",
]
