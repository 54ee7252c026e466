from __future__ import annotations

import hashlib

from .bytes import BytesLike, ensure_bytes, to_hex


def sha3_256(data: BytesLike) -> bytes:
    """Return the NIST SHA3-256 digest of *data*."""
    return hashlib.sha3_256(ensure_bytes(data)).digest()


def sha3_256_hex(data: BytesLike, *, prefix: bool = True) -> str:
    return to_hex(sha3_256(data), prefix=prefix)


def domain_prefix(tag: str) -> bytes:
    """
    Hash of a domain-separation tag such as "APTOS::RawTransaction".

    The 32-byte result is prepended to BCS bytes before signing or hashing so
    that one encoding can never be mistaken for another context.
    """
    return sha3_256(tag.encode("ascii"))


__all__ = ["sha3_256", "sha3_256_hex", "domain_prefix"]
