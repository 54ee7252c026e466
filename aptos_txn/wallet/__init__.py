"""
aptos_txn.wallet
================

Signing keys: the `Signer` protocol and the Ed25519 implementation.
"""

from .signer import Ed25519Signer, Signer, verify_ed25519

__all__ = [
    "Signer",
    "Ed25519Signer",
    "verify_ed25519",
]
