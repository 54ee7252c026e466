"""
aptos_txn.tx.build
==================

Assemble RawTransactions. Everything here is pure: no network, no signing.

The caller supplies the values the network owns (the sender's current
sequence number and the chain id); `aptos_txn.client.TransactionClient`
fetches them when you don't want to.

Examples
--------
    from aptos_txn.tx.build import build_coin_transfer, expiration_from_now

    raw = build_coin_transfer(
        sender=signer.address,
        receiver="0xb0b",
        amount=717,
        sequence_number=5,
        chain_id=4,
        expiration_timestamp_secs=expiration_from_now(10),
    )

    # Later:
    # signed = sign_transaction(raw, signer)
    # result = await submit_and_wait(rest, signed)
"""

from __future__ import annotations

import time
from typing import Optional, Union

from .. import bcs
from ..address import AccountAddress
from ..types.payload import EntryFunction, TransactionPayload, entry_function
from ..types.transaction import RawTransaction
from .encode import encode_address

DEFAULT_MAX_GAS_AMOUNT = 100_000
DEFAULT_GAS_UNIT_PRICE = 100
DEFAULT_TTL_SECS = 600

APTOS_COIN = "0x1::aptos_coin::AptosCoin"


def _require_non_negative(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


def expiration_from_now(ttl_secs: int = DEFAULT_TTL_SECS, now: Optional[float] = None) -> int:
    """Absolute expiration (unix seconds) `ttl_secs` after `now` (default: wall clock)."""
    _require_non_negative("ttl_secs", ttl_secs)
    base = time.time() if now is None else float(now)
    return int(base) + int(ttl_secs)


def build_raw_transaction(
    sender: Union[AccountAddress, str],
    sequence_number: int,
    payload: TransactionPayload,
    max_gas_amount: int,
    gas_unit_price: int,
    expiration_timestamp_secs: int,
    chain_id: int,
) -> RawTransaction:
    """
    Construct a RawTransaction from explicit values.

    Only local shape checks happen here; width limits (u64, u8) are enforced
    by the encoder when the transaction is signed or serialized.
    """
    _require_non_negative("sequence_number", sequence_number)
    _require_non_negative("max_gas_amount", max_gas_amount)
    _require_non_negative("gas_unit_price", gas_unit_price)
    _require_non_negative("expiration_timestamp_secs", expiration_timestamp_secs)
    _require_non_negative("chain_id", chain_id)
    return RawTransaction(
        sender=AccountAddress.coerce(sender),
        sequence_number=sequence_number,
        payload=payload,
        max_gas_amount=max_gas_amount,
        gas_unit_price=gas_unit_price,
        expiration_timestamp_secs=expiration_timestamp_secs,
        chain_id=chain_id,
    )


def coin_transfer_payload(
    receiver: Union[AccountAddress, str],
    amount: int,
    coin_type: str = APTOS_COIN,
) -> EntryFunction:
    """`0x1::coin::transfer<coin_type>(receiver, amount)`."""
    return entry_function(
        "0x1",
        "coin",
        "transfer",
        [coin_type],
        [encode_address(AccountAddress.coerce(receiver)), bcs.encode_u64(amount)],
    )


def build_coin_transfer(
    sender: Union[AccountAddress, str],
    receiver: Union[AccountAddress, str],
    amount: int,
    *,
    sequence_number: int,
    chain_id: int,
    max_gas_amount: int = DEFAULT_MAX_GAS_AMOUNT,
    gas_unit_price: int = DEFAULT_GAS_UNIT_PRICE,
    expiration_timestamp_secs: Optional[int] = None,
    coin_type: str = APTOS_COIN,
) -> RawTransaction:
    """
    Build a coin transfer. If `expiration_timestamp_secs` is None it is set to
    now + DEFAULT_TTL_SECS.
    """
    expiration = (
        expiration_timestamp_secs
        if expiration_timestamp_secs is not None
        else expiration_from_now()
    )
    return build_raw_transaction(
        sender,
        sequence_number,
        coin_transfer_payload(receiver, amount, coin_type),
        max_gas_amount,
        gas_unit_price,
        expiration,
        chain_id,
    )


__all__ = [
    "DEFAULT_MAX_GAS_AMOUNT",
    "DEFAULT_GAS_UNIT_PRICE",
    "DEFAULT_TTL_SECS",
    "APTOS_COIN",
    "expiration_from_now",
    "build_raw_transaction",
    "coin_transfer_payload",
    "build_coin_transfer",
]
