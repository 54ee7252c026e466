"""
aptos_txn.tx.sign
=================

Bind a signing key to the canonical bytes of a RawTransaction.

    signed = sign_transaction(raw, signer)
    assert verify_signed_transaction(signed)
"""

from __future__ import annotations

import logging

from ..errors import SigningKeyError
from ..types.transaction import (ED25519_PUBLIC_KEY_LENGTH,
                                 ED25519_SIGNATURE_LENGTH,
                                 Ed25519Authenticator, RawTransaction,
                                 SignedTransaction)
from ..wallet.signer import Signer, verify_ed25519
from .encode import signing_message

__all__ = ["sign_transaction", "verify_signed_transaction"]

log = logging.getLogger(__name__)


def sign_transaction(raw: RawTransaction, signer: Signer) -> SignedTransaction:
    """
    Sign `raw` with `signer` and package the result.

    The signature covers ``sha3_256(b"APTOS::RawTransaction") || bcs(raw)``.
    Encoding errors (out-of-range fields) surface here as EncodeError, before
    the key is used.
    """
    message = signing_message(raw)
    public_key = bytes(signer.public_key)
    if len(public_key) != ED25519_PUBLIC_KEY_LENGTH:
        raise SigningKeyError(
            f"signer public key must be {ED25519_PUBLIC_KEY_LENGTH} bytes, "
            f"got {len(public_key)}"
        )
    signature = bytes(signer.sign(message))
    if len(signature) != ED25519_SIGNATURE_LENGTH:
        raise SigningKeyError(
            f"signer produced a {len(signature)}-byte signature, "
            f"expected {ED25519_SIGNATURE_LENGTH}"
        )
    log.debug(
        "signed txn sender=%s seq=%d", raw.sender, raw.sequence_number
    )
    return SignedTransaction(raw, Ed25519Authenticator(public_key, signature))


def verify_signed_transaction(signed: SignedTransaction) -> bool:
    """Recompute the signing message from `signed.raw_txn` and check the signature."""
    auth = signed.authenticator
    return verify_ed25519(auth.public_key, signing_message(signed.raw_txn), auth.signature)
