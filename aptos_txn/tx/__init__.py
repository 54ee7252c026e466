"""
aptos_txn.tx
============

Transaction pipeline helpers: build, encode, sign and send.

Submodules
----------
- build : RawTransaction assembly, coin-transfer payloads, expiration helpers.
- encode: BCS layout of payloads and transactions, signing message, tx hash.
- sign  : Ed25519 signing and verification of RawTransactions.
- send  : Submission and the poll-until-terminal protocol.

Typical usage
-------------
    from aptos_txn.tx import build, sign, send

    raw = build.build_coin_transfer(signer.address, "0xb0b", 717,
                                    sequence_number=5, chain_id=4)
    signed = sign.sign_transaction(raw, signer)
    result = await send.submit_and_wait(rest, signed)
"""

from __future__ import annotations

from . import build as build
from . import encode as encode
from . import send as send
from . import sign as sign

__all__ = ["build", "encode", "sign", "send"]
