"""
aptos_txn.wallet.signer
=======================

Ed25519 signing keys for the transaction pipeline.

The pipeline only needs an opaque capability: something with a raw 32-byte
`public_key` and a `sign(message) -> bytes` method. `Signer` is that protocol;
`Ed25519Signer` is the concrete implementation backed by `cryptography`.
Hardware wallets, KMS clients or remote signers can be passed anywhere a
`Signer` is accepted.

Notes
-----
- Ed25519 signatures are deterministic: the same key and message always give
  the same 64 bytes.
- Domain separation is applied by the caller (see `aptos_txn.tx.encode.
  signing_message`); this layer signs exactly the bytes it is given.
"""

from __future__ import annotations

from typing import Optional, Protocol, Union, runtime_checkable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from ..address import AccountAddress
from ..errors import SigningKeyError
from ..utils.bytes import from_hex, to_hex

__all__ = [
    "PRIVATE_KEY_LENGTH",
    "Signer",
    "Ed25519Signer",
    "verify_ed25519",
]

PRIVATE_KEY_LENGTH = 32


@runtime_checkable
class Signer(Protocol):
    """Minimal interface the pipeline expects from a signing key."""

    @property
    def public_key(self) -> bytes: ...

    def sign(self, message: bytes) -> bytes: ...


def _raw_public_bytes(pub: ed25519.Ed25519PublicKey) -> bytes:
    return pub.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def verify_ed25519(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """Verify a raw Ed25519 signature; malformed keys or signatures verify False."""
    try:
        pub = ed25519.Ed25519PublicKey.from_public_bytes(bytes(public_key))
    except ValueError:
        return False
    try:
        pub.verify(bytes(signature), bytes(message))
    except InvalidSignature:
        return False
    return True


class Ed25519Signer:
    """
    An Ed25519 private key.

    Create instances via:
        - Ed25519Signer.generate()
        - Ed25519Signer.from_private_key(raw_32_bytes_or_hex)
    """

    def __init__(self, private_key: ed25519.Ed25519PrivateKey) -> None:
        if not isinstance(private_key, ed25519.Ed25519PrivateKey):
            raise SigningKeyError(
                f"expected an Ed25519 private key, got {type(private_key).__name__}"
            )
        self._sk = private_key
        self._pk = _raw_public_bytes(private_key.public_key())
        self._address: Optional[AccountAddress] = None

    # ---- Constructors ----

    @classmethod
    def generate(cls) -> "Ed25519Signer":
        return cls(ed25519.Ed25519PrivateKey.generate())

    @classmethod
    def from_private_key(cls, key: Union[bytes, bytearray, str]) -> "Ed25519Signer":
        """
        Import a raw 32-byte private key (bytes or 0x-hex).

        Raises SigningKeyError for anything that is not exactly 32 bytes.
        """
        if isinstance(key, str):
            try:
                raw = from_hex(key)
            except ValueError as e:
                raise SigningKeyError(f"private key is not valid hex: {e}") from e
        elif isinstance(key, (bytes, bytearray)):
            raw = bytes(key)
        else:
            raise SigningKeyError(f"unsupported private key type: {type(key).__name__}")
        if len(raw) != PRIVATE_KEY_LENGTH:
            raise SigningKeyError(
                f"ed25519 private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(raw)}"
            )
        return cls(ed25519.Ed25519PrivateKey.from_private_bytes(raw))

    # ---- Properties ----

    @property
    def public_key(self) -> bytes:
        return self._pk

    @property
    def address(self) -> AccountAddress:
        """Account address derived from the public key (single-key Ed25519 scheme)."""
        if self._address is None:
            self._address = AccountAddress.from_public_key(self._pk)
        return self._address

    def private_key_bytes(self) -> bytes:
        # Callers are responsible for secure storage.
        return self._sk.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    # ---- Operations ----

    def sign(self, message: bytes) -> bytes:
        return self._sk.sign(bytes(message))

    def verify(self, message: bytes, signature: bytes) -> bool:
        return verify_ed25519(self._pk, message, signature)

    def __repr__(self) -> str:
        return f"Ed25519Signer(public_key={to_hex(self._pk)})"
