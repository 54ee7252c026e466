"""
Utility helpers for the SDK.

Re-exports:
- bytes: hex helpers
- hash: SHA3-256 and domain-separation prefixes
- retry: backoff computation and async retry
"""

from .bytes import ensure_bytes, from_hex, normalize_hash, to_hex
from .hash import domain_prefix, sha3_256, sha3_256_hex
from .retry import RetryError, aretry_call, backoff_delay

__all__ = [
    # bytes
    "to_hex",
    "from_hex",
    "ensure_bytes",
    "normalize_hash",
    # hash
    "sha3_256",
    "sha3_256_hex",
    "domain_prefix",
    # retry
    "RetryError",
    "backoff_delay",
    "aretry_call",
]
