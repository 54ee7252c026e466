"""
aptos_txn.tx.send
=================

Submit signed transactions and follow them to a terminal state.

Primary entry points
--------------------
- submit_transaction(client, signed) -> SubmissionResult
    POSTs the canonical bytes. Returns SUBMITTED, REJECTED (the node said no)
    or TRANSPORT_ERROR (we could not reach it). Never retried.

- check_transaction(client, tx_hash, expiration_timestamp_secs=None) -> SubmissionResult
    One status read: SUBMITTED / PENDING / COMMITTED_* / EXPIRED.

- wait_for_transaction(client, tx_hash, *, policy, expiration_timestamp_secs, cancel)
    Polls with a geometrically growing interval until a terminal state, the
    wait budget runs out, or `cancel` is set.

- submit_and_wait(client, signed, *, policy, cancel)
    Submit, then wait. A rejected or unreachable submission is returned as
    is, without polling.

State machine
-------------
::

    BUILT -> SUBMITTED -> PENDING -> COMMITTED_SUCCESS
                 |           |   \\-> COMMITTED_FAILURE
                 |           \\----> EXPIRED
                 |                   TIMED_OUT (budget / cancel, from any
                 |                              non-terminal state)
                 \\-> REJECTED | TRANSPORT_ERROR

Outcomes are values, not exceptions: a caller always gets a SubmissionResult
naming exactly one state. Only encoding problems (EncodeError, raised before
any network access) and non-transient lookup errors escape as exceptions.

Expiration is judged against the node's ledger clock (the
``X-Aptos-Ledger-TimestampUsec`` header), never the local clock.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Union

from ..errors import ApiError, TransportError
from ..rpc.http import TransactionLookup
from ..types.transaction import SignedTransaction
from ..utils.bytes import normalize_hash
from ..utils.retry import backoff_delay
from .encode import encode_signed_transaction, transaction_hash_hex

__all__ = [
    "TxStatus",
    "SubmissionResult",
    "WaitPolicy",
    "submit_transaction",
    "check_transaction",
    "wait_for_transaction",
    "submit_and_wait",
]

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Minimal client protocol to avoid tight coupling with RestClient
# -----------------------------------------------------------------------------


class _NodeClient(Protocol):
    async def submit_bcs(self, signed_bytes: bytes) -> Optional[str]: ...

    async def get_transaction_by_hash(self, tx_hash: str) -> TransactionLookup: ...


# -----------------------------------------------------------------------------
# Result types
# -----------------------------------------------------------------------------


class TxStatus(str, Enum):
    BUILT = "built"
    SUBMITTED = "submitted"
    PENDING = "pending"
    COMMITTED_SUCCESS = "committed_success"
    COMMITTED_FAILURE = "committed_failure"
    EXPIRED = "expired"
    TIMED_OUT = "timed_out"
    REJECTED = "rejected"
    TRANSPORT_ERROR = "transport_error"

    @property
    def is_terminal(self) -> bool:
        return self not in _IN_FLIGHT


_IN_FLIGHT = frozenset({TxStatus.BUILT, TxStatus.SUBMITTED, TxStatus.PENDING})


@dataclass(frozen=True)
class SubmissionResult:
    tx_hash: str
    status: TxStatus
    # Set once committed
    success: Optional[bool] = None
    vm_status: Optional[str] = None
    version: Optional[int] = None
    gas_used: Optional[int] = None
    # Human-readable cause for REJECTED / TRANSPORT_ERROR / TIMED_OUT / EXPIRED
    reason: Optional[str] = None
    http_status: Optional[int] = None
    error_code: Optional[str] = None
    polls: int = 0

    @classmethod
    def built(cls, signed: SignedTransaction) -> "SubmissionResult":
        return cls(transaction_hash_hex(signed), TxStatus.BUILT)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def committed(self) -> bool:
        return self.status in (TxStatus.COMMITTED_SUCCESS, TxStatus.COMMITTED_FAILURE)

    @property
    def ok(self) -> bool:
        return self.status is TxStatus.COMMITTED_SUCCESS


@dataclass(frozen=True)
class WaitPolicy:
    """
    How long and how often to poll.

    The n-th sleep is ``min(poll_interval_s * backoff**n, max_interval_s)``,
    never extending past ``timeout_s`` from the start of the wait. After a
    transient lookup failure the sleep is a jittered backoff instead; more than
    `max_transient_errors` consecutive failures end the wait as TIMED_OUT.
    """

    timeout_s: float = 30.0
    poll_interval_s: float = 0.5
    max_interval_s: float = 2.5
    backoff: float = 1.25
    max_transient_errors: int = 5

    def __post_init__(self) -> None:
        if self.timeout_s < 0:
            raise ValueError("timeout_s must be non-negative")
        if self.poll_interval_s <= 0:
            raise ValueError("poll_interval_s must be positive")
        if self.max_interval_s < self.poll_interval_s:
            raise ValueError("max_interval_s must be >= poll_interval_s")
        if self.backoff < 1.0:
            raise ValueError("backoff must be >= 1.0")
        if self.max_transient_errors < 0:
            raise ValueError("max_transient_errors must be non-negative")


# -----------------------------------------------------------------------------
# Submission
# -----------------------------------------------------------------------------


async def submit_transaction(client: _NodeClient, signed: SignedTransaction) -> SubmissionResult:
    """
    Submit `signed` once.

    The body is encoded before any I/O, so EncodeError propagates to the
    caller and nothing is sent.
    """
    body = encode_signed_transaction(signed)
    local_hash = transaction_hash_hex(signed)
    try:
        node_hash = await client.submit_bcs(body)
    except ApiError as e:
        log.warning(
            "submission rejected sender=%s seq=%d status=%d code=%s: %s",
            signed.sender, signed.sequence_number, e.status, e.error_code, e.message,
        )
        return SubmissionResult(
            local_hash,
            TxStatus.REJECTED,
            vm_status=str(e.vm_error_code) if e.vm_error_code is not None else None,
            reason=e.message,
            http_status=e.status,
            error_code=e.error_code,
        )
    except TransportError as e:
        log.warning("submission failed to reach node sender=%s: %s", signed.sender, e.message)
        return SubmissionResult(local_hash, TxStatus.TRANSPORT_ERROR, reason=e.message)

    if node_hash is None:
        log.warning("node accepted tx without a usable hash; tracking local hash %s", local_hash)
        node_hash = local_hash
    elif node_hash != local_hash:
        log.warning("node reported hash %s, computed %s", node_hash, local_hash)
    log.info(
        "submitted tx=%s sender=%s seq=%d",
        node_hash, signed.sender, signed.sequence_number,
    )
    return SubmissionResult(node_hash, TxStatus.SUBMITTED)


# -----------------------------------------------------------------------------
# Status reads
# -----------------------------------------------------------------------------


def _expired(lookup: TransactionLookup, expiration_timestamp_secs: Optional[int]) -> bool:
    if expiration_timestamp_secs is None or lookup.ledger_timestamp_usecs is None:
        return False
    return lookup.ledger_timestamp_usecs // 1_000_000 >= expiration_timestamp_secs


def _classify(
    tx_hash: str,
    lookup: TransactionLookup,
    expiration_timestamp_secs: Optional[int],
) -> SubmissionResult:
    view = lookup.view
    if view is not None and view.is_committed:
        status = TxStatus.COMMITTED_SUCCESS if view.success else TxStatus.COMMITTED_FAILURE
        return SubmissionResult(
            view.hash,
            status,
            success=view.success,
            vm_status=view.vm_status,
            version=view.version,
            gas_used=view.gas_used,
        )
    if _expired(lookup, expiration_timestamp_secs):
        return SubmissionResult(
            tx_hash,
            TxStatus.EXPIRED,
            reason=(
                f"ledger time {lookup.ledger_timestamp_usecs} us passed "
                f"expiration {expiration_timestamp_secs} s"
            ),
        )
    if view is None:
        return SubmissionResult(tx_hash, TxStatus.SUBMITTED)
    return SubmissionResult(tx_hash, TxStatus.PENDING)


async def check_transaction(
    client: _NodeClient,
    tx_hash: str,
    expiration_timestamp_secs: Optional[int] = None,
) -> SubmissionResult:
    """Read the current state of `tx_hash` once. Lookup errors propagate."""
    h = normalize_hash(tx_hash)
    lookup = await client.get_transaction_by_hash(h)
    return _classify(h, lookup, expiration_timestamp_secs)


# -----------------------------------------------------------------------------
# Waiting
# -----------------------------------------------------------------------------


async def _sleep(delay: float, cancel: Optional[asyncio.Event]) -> None:
    if cancel is None:
        await asyncio.sleep(delay)
        return
    try:
        await asyncio.wait_for(cancel.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return


async def _race_poll(
    lookup, timeout: float, cancel: Optional[asyncio.Event]
) -> Union["asyncio.Future[SubmissionResult]", str]:
    """
    Run one lookup against the remaining budget and the cancel event.

    Returns the finished lookup, or the reason the wait has to stop. The
    losing side is cancelled before returning.
    """
    poll = asyncio.ensure_future(lookup)
    stop = asyncio.ensure_future(cancel.wait()) if cancel is not None else None
    tasks = {poll} if stop is None else {poll, stop}
    try:
        done, _ = await asyncio.wait(tasks, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        unfinished = [t for t in tasks if not t.done()]
        for t in unfinished:
            t.cancel()
        if unfinished:
            await asyncio.gather(*unfinished, return_exceptions=True)
    if poll in done:
        return poll
    if stop is not None and stop in done:
        return "cancelled"
    return "wait budget exhausted during poll"


def _is_transient(exc: Exception) -> bool:
    if isinstance(exc, ApiError):
        return exc.retriable
    return isinstance(exc, TransportError)


def _timed_out(tx_hash: str, reason: str, polls: int, last: Optional[SubmissionResult]) -> SubmissionResult:
    last_status = last.status.value if last is not None else "none"
    log.warning("tx=%s timed out after %d polls (%s, last=%s)", tx_hash, polls, reason, last_status)
    return SubmissionResult(tx_hash, TxStatus.TIMED_OUT, reason=reason, polls=polls)


async def wait_for_transaction(
    client: _NodeClient,
    tx_hash: str,
    *,
    policy: Optional[WaitPolicy] = None,
    expiration_timestamp_secs: Optional[int] = None,
    cancel: Optional[asyncio.Event] = None,
) -> SubmissionResult:
    """
    Poll until `tx_hash` reaches a terminal state.

    Returns COMMITTED_SUCCESS, COMMITTED_FAILURE, EXPIRED or TIMED_OUT. Each
    poll is bounded by the remaining budget, so the call returns within
    roughly `policy.timeout_s` even against a hung node; setting `cancel`
    abandons an in-flight poll at once. Non-transient lookup
    errors (e.g. HTTP 400 for a malformed hash) propagate.
    """
    policy = policy or WaitPolicy()
    h = normalize_hash(tx_hash)
    loop = asyncio.get_running_loop()
    deadline = loop.time() + policy.timeout_s
    interval = policy.poll_interval_s
    transient = 0
    polls = 0
    last: Optional[SubmissionResult] = None

    while True:
        if cancel is not None and cancel.is_set():
            return _timed_out(h, "cancelled", polls, last)
        remaining = deadline - loop.time()
        if remaining <= 0:
            return _timed_out(h, "wait budget exhausted", polls, last)

        polls += 1
        outcome = await _race_poll(
            check_transaction(client, h, expiration_timestamp_secs), remaining, cancel
        )
        if isinstance(outcome, str):
            return _timed_out(h, outcome, polls, last)
        try:
            result = outcome.result()
        except (ApiError, TransportError) as e:
            if not _is_transient(e):
                raise
            transient += 1
            if transient > policy.max_transient_errors:
                return _timed_out(h, f"too many transient errors: {e}", polls, last)
            delay = backoff_delay(
                transient,
                base=policy.poll_interval_s,
                max_delay=policy.max_interval_s,
                jitter="equal",
            )
            log.warning(
                "poll %d for tx=%s failed (%d/%d): %s",
                polls, h, transient, policy.max_transient_errors, e,
            )
        else:
            transient = 0
            last = result
            log.debug("poll %d tx=%s status=%s", polls, h, result.status.value)
            if result.is_terminal:
                log.info(
                    "tx=%s %s version=%s vm_status=%s",
                    h, result.status.value, result.version, result.vm_status,
                )
                return SubmissionResult(
                    result.tx_hash,
                    result.status,
                    success=result.success,
                    vm_status=result.vm_status,
                    version=result.version,
                    gas_used=result.gas_used,
                    reason=result.reason,
                    polls=polls,
                )
            delay = interval
            interval = min(interval * policy.backoff, policy.max_interval_s)

        delay = min(delay, deadline - loop.time())
        if delay > 0:
            await _sleep(delay, cancel)


async def submit_and_wait(
    client: _NodeClient,
    signed: SignedTransaction,
    *,
    policy: Optional[WaitPolicy] = None,
    cancel: Optional[asyncio.Event] = None,
) -> SubmissionResult:
    """Submit `signed` and wait for it. REJECTED / TRANSPORT_ERROR skip the wait."""
    submitted = await submit_transaction(client, signed)
    if submitted.status is not TxStatus.SUBMITTED:
        return submitted
    return await wait_for_transaction(
        client,
        submitted.tx_hash,
        policy=policy,
        expiration_timestamp_secs=signed.expiration_timestamp_secs,
        cancel=cancel,
    )
