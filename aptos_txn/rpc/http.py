"""
Async REST client for the node API (``/v1``).

- Uses `httpx.AsyncClient`; one instance can be shared by many concurrent
  flows (the connection pool is concurrency-safe).
- Idempotent GETs are retried on transport failures and 429/5xx with jittered
  backoff. Transaction submission is never retried: a duplicate submission
  would be rejected anyway, and the caller decides what to do.
- HTTP error statuses become `ApiError`; connection failures and timeouts
  become `TransportError`.

Example:
    from aptos_txn.rpc.http import RestClient

    async with RestClient("https://fullnode.devnet.aptoslabs.com") as rest:
        chain_id = await rest.get_chain_id()
        seq = await rest.get_sequence_number("0xa11ce")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

import httpx

from ..address import AccountAddress
from ..errors import ApiError, TransportError, api_error_from_response
from ..utils.bytes import normalize_hash
from ..utils.retry import aretry_call
from ..version import user_agent
from .models import AccountInfo, LedgerInfo, PendingTransaction, TransactionView

__all__ = [
    "BCS_SIGNED_TRANSACTION",
    "LEDGER_TIMESTAMP_HEADER",
    "TransactionLookup",
    "RestClient",
]

BCS_SIGNED_TRANSACTION = "application/x.aptos.signed_transaction+bcs"
LEDGER_TIMESTAMP_HEADER = "X-Aptos-Ledger-TimestampUsec"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionLookup:
    """Result of a by-hash lookup: the view (None when unknown) and the ledger clock."""

    view: Optional[TransactionView]
    ledger_timestamp_usecs: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.view is not None


def _ledger_timestamp(resp: httpx.Response) -> Optional[int]:
    raw = resp.headers.get(LEDGER_TIMESTAMP_HEADER)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        log.debug("ignoring malformed %s header: %r", LEDGER_TIMESTAMP_HEADER, raw)
        return None


def _error_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _retriable(exc: BaseException) -> bool:
    if isinstance(exc, ApiError):
        return exc.retriable
    return isinstance(exc, TransportError)


class RestClient:
    """Thin async wrapper over the node's REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff: float = 0.2,
        max_backoff: float = 3.0,
        headers: Optional[Mapping[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"node URL must be http(s)://host[...], got {base_url!r}")
        base = base_url.rstrip("/")
        if not base.endswith("/v1"):
            base = base + "/v1"
        self.base_url = base
        self.timeout = float(timeout)
        self.max_retries = int(max_retries)
        self.backoff = float(backoff)
        self.max_backoff = float(max_backoff)

        merged: Dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": user_agent(),
        }
        if headers:
            merged.update(dict(headers))
        self._owns_client = client is None
        self._http = client or httpx.AsyncClient(timeout=self.timeout, headers=merged)
        if client is not None:
            self._http.headers.update(merged)

    # --- context manager -------------------------------------------------

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    # --- internals -------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        content: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None,
        allow_404: bool = False,
    ) -> httpx.Response:
        log.debug("%s %s", method, path)
        try:
            resp = await self._http.request(
                method, self._url(path), content=content, headers=headers
            )
        except httpx.TransportError as e:
            raise TransportError(f"{type(e).__name__}: {e}", path=path) from e
        if resp.status_code == 404 and allow_404:
            return resp
        if resp.status_code >= 400:
            raise api_error_from_response(resp.status_code, _error_body(resp), path=path)
        return resp

    async def _get(self, path: str, *, allow_404: bool = False) -> httpx.Response:
        def _on_retry(attempt: int, exc: BaseException, delay: float) -> None:
            log.warning(
                "GET %s failed (attempt %d/%d): %s; retrying in %.2fs",
                path, attempt, self.max_retries + 1, exc, delay,
            )

        return await aretry_call(
            self._request,
            "GET",
            path,
            allow_404=allow_404,
            retries=self.max_retries,
            base=self.backoff,
            max_delay=self.max_backoff,
            exceptions=(ApiError, TransportError),
            retry_if=_retriable,
            on_retry=_on_retry,
        )

    @staticmethod
    def _json(resp: httpx.Response, path: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(
                status=resp.status_code,
                message=f"non-JSON response: {resp.text[:256]}",
                path=path,
            ) from e

    # --- public API ------------------------------------------------------

    async def get_ledger_info(self) -> LedgerInfo:
        resp = await self._get("")
        return LedgerInfo.model_validate(self._json(resp, "/"))

    async def get_chain_id(self) -> int:
        return (await self.get_ledger_info()).chain_id

    async def get_account(self, address: Union[AccountAddress, str]) -> AccountInfo:
        path = f"/accounts/{AccountAddress.coerce(address).hex()}"
        resp = await self._get(path)
        return AccountInfo.model_validate(self._json(resp, path))

    async def get_sequence_number(self, address: Union[AccountAddress, str]) -> int:
        return (await self.get_account(address)).sequence_number

    async def get_transaction_by_hash(self, tx_hash: str) -> TransactionLookup:
        """
        Look up a transaction by hash. Unknown hashes (404) yield a lookup with
        `view=None`; the ledger clock header is reported either way.
        """
        path = f"/transactions/by_hash/{normalize_hash(tx_hash)}"
        resp = await self._get(path, allow_404=True)
        ts = _ledger_timestamp(resp)
        if resp.status_code == 404:
            return TransactionLookup(None, ts)
        return TransactionLookup(TransactionView.model_validate(self._json(resp, path)), ts)

    async def submit_bcs(self, signed_bytes: bytes) -> Optional[str]:
        """
        POST canonical signed-transaction bytes. Returns the hash the node
        reports, or None when a 2xx body carries no usable hash (the node
        still accepted the transaction). Raises ApiError only for HTTP error
        statuses, TransportError on network failure. Never retried.
        """
        path = "/transactions"
        resp = await self._request(
            "POST",
            path,
            content=bytes(signed_bytes),
            headers={"Content-Type": BCS_SIGNED_TRANSACTION},
        )
        try:
            # pydantic's ValidationError is a ValueError
            return PendingTransaction.model_validate(resp.json()).hash
        except ValueError as e:
            log.warning(
                "POST %s accepted (HTTP %d) but the body has no usable hash: %s",
                path, resp.status_code, e,
            )
            return None

    def __repr__(self) -> str:
        return f"RestClient({self.base_url!r})"
