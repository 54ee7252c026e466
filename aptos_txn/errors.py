"""
Typed error classes for the transaction SDK.

These are raised by the BCS encoder, the address/type-tag parsers, the signer
and the REST client so callers can catch specific failure modes while still
being able to catch the base `AptosTxnError`.

Protocol outcomes (rejection, on-chain abort, timeout) are *not* exceptions;
see `aptos_txn.tx.send.SubmissionResult`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = [
    "AptosTxnError",
    "EncodeError",
    "ParseError",
    "AddressParseError",
    "TypeTagParseError",
    "SigningKeyError",
    "ApiError",
    "TransportError",
    "is_retriable_status",
    "api_error_from_response",
]


class AptosTxnError(Exception):
    """Base class for all SDK errors."""


class EncodeError(AptosTxnError, ValueError):
    """
    A value is outside the range or shape of its declared BCS type.

    Always raised synchronously, before any network access.
    """


@dataclass(eq=False)
class ParseError(AptosTxnError, ValueError):
    """Raised when a textual address or type descriptor is malformed."""

    message: str
    segment: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.segment is None:
            return self.message
        return f"{self.message}: {self.segment!r}"


class AddressParseError(ParseError):
    pass


class TypeTagParseError(ParseError):
    pass


class SigningKeyError(AptosTxnError, ValueError):
    """The signing key (or the signature it produced) is structurally invalid."""


def is_retriable_status(status: int) -> bool:
    # Typical transient HTTP statuses: 429/500/502/503/504
    return status == 429 or 500 <= status <= 599


@dataclass(eq=False)
class ApiError(AptosTxnError):
    """
    Raised when the node answers a request with an HTTP error status.

    Fields mirror the node's error body: {"message", "error_code", "vm_error_code"}.
    """

    status: int
    message: str
    error_code: Optional[str] = None
    vm_error_code: Optional[int] = None
    path: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"HTTP {self.status}"]
        if self.path:
            parts.append(self.path)
        if self.error_code:
            parts.append(f"error_code={self.error_code}")
        if self.vm_error_code is not None:
            parts.append(f"vm_error_code={self.vm_error_code}")
        parts.append(f"msg={self.message!r}")
        return " ".join(parts)

    @property
    def retriable(self) -> bool:
        return is_retriable_status(self.status)


@dataclass(eq=False)
class TransportError(AptosTxnError):
    """Connection drop, DNS failure or request timeout talking to the node."""

    message: str
    path: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" [{self.path}]" if self.path else ""
        return f"TransportError{where}: {self.message}"


def api_error_from_response(
    status: int, body: Any, *, path: Optional[str] = None
) -> ApiError:
    """
    Convert a node error body into ApiError.

    `body` should resemble: {"message": str, "error_code": str?, "vm_error_code": int?}
    but anything else (plain text, None) is tolerated.
    """
    if isinstance(body, dict):
        message = str(body.get("message") or f"HTTP {status}")
        error_code = body.get("error_code")
        vm_code = body.get("vm_error_code")
        return ApiError(
            status=status,
            message=message,
            error_code=str(error_code) if error_code is not None else None,
            vm_error_code=int(vm_code) if vm_code is not None else None,
            path=path,
        )
    text = str(body)[:256] if body else f"HTTP {status}"
    return ApiError(status=status, message=text, path=path)
