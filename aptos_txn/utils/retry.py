"""
Retry helpers with exponential backoff and jitter.

Implements the three AWS Architecture Blog strategies:
- full jitter        : sleep U(0, cap)
- equal jitter       : sleep cap/2 + U(0, cap/2)
- decorrelated jitter: sleep U(base, prev*3) capped

Only idempotent reads go through `aretry_call` (account / ledger / status
lookups). Transaction submission is never retried here.

Example
-------
from aptos_txn.utils.retry import aretry_call

info = await aretry_call(
    client._get_json, "/",
    retries=3, base=0.2, max_delay=2.0,
    retry_if=lambda e: getattr(e, "retriable", True),
)
"""

from __future__ import annotations

import asyncio
import random
import time
from typing import (Any, Awaitable, Callable, Literal, Optional, Sequence,
                    Tuple, Type, TypeVar, Union)

__all__ = [
    "RetryError",
    "BackoffState",
    "JitterMode",
    "backoff_delay",
    "aretry_call",
]

T = TypeVar("T")

JitterMode = Literal["full", "equal", "decorrelated"]


class RetryError(RuntimeError):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, last_exception: BaseException, attempts: int) -> None:
        super().__init__(f"exhausted after {attempts} attempts: {last_exception!r}")
        self.last_exception = last_exception
        self.attempts = attempts


class BackoffState:
    """Mutable state for decorrelated jitter."""

    __slots__ = ("prev_delay",)

    def __init__(self) -> None:
        self.prev_delay: float = 0.0


def backoff_delay(
    attempt: int,
    *,
    base: float,
    max_delay: float,
    jitter: JitterMode = "full",
    state: Optional[BackoffState] = None,
) -> float:
    """
    Compute a backoff delay (in seconds) for the given attempt (1-based).

    - base: initial backoff (seconds), e.g. 0.1
    - max_delay: maximum per-attempt delay (cap)
    - jitter: strategy name (full|equal|decorrelated)
    - state: required only for decorrelated to persist `prev_delay`
    """
    if attempt < 1:
        attempt = 1
    cap = min(base * (2 ** (attempt - 1)), max_delay)

    if jitter == "full":
        delay = random.uniform(0.0, cap)
    elif jitter == "equal":
        delay = (cap * 0.5) + random.uniform(0.0, cap * 0.5)
    elif jitter == "decorrelated":
        if state is None:
            state = BackoffState()
        high = max(base, state.prev_delay * 3.0 if state.prev_delay > 0 else base)
        delay = min(random.uniform(base, high), max_delay)
        state.prev_delay = delay
    else:
        raise ValueError(f"unknown jitter mode: {jitter}")
    return max(0.0, float(delay))


def _should_retry(
    exc: BaseException,
    exceptions: Tuple[Type[BaseException], ...],
    retry_if: Optional[Callable[[BaseException], bool]],
) -> bool:
    if not isinstance(exc, exceptions):
        return False
    if retry_if is not None:
        return bool(retry_if(exc))
    return True


async def aretry_call(
    fn: Callable[..., Awaitable[T]],
    *args: Any,
    retries: int = 3,
    base: float = 0.2,
    max_delay: float = 3.0,
    jitter: JitterMode = "full",
    exceptions: Union[Type[BaseException], Sequence[Type[BaseException]]] = Exception,
    retry_if: Optional[Callable[[BaseException], bool]] = None,
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    total_timeout: Optional[float] = None,
    **kwargs: Any,
) -> T:
    """
    Await `fn(*args, **kwargs)`, retrying on matching exceptions.

    `retries` is the number of *additional* attempts; `retries=0` calls once.
    When retries run out the last exception is re-raised unchanged so callers
    keep seeing the SDK's typed errors. `RetryError` is only raised when
    `total_timeout` cuts the schedule short.
    """
    if isinstance(exceptions, type):
        exc_types: Tuple[Type[BaseException], ...] = (exceptions,)
    else:
        exc_types = tuple(exceptions)

    deadline = time.monotonic() + total_timeout if total_timeout is not None else None
    state = BackoffState()

    attempt = 0
    while True:
        attempt += 1
        try:
            return await fn(*args, **kwargs)
        except Exception as exc:  # noqa: BLE001
            if not _should_retry(exc, exc_types, retry_if) or attempt > retries:
                raise

            sleep_s = backoff_delay(
                attempt,
                base=base,
                max_delay=max_delay,
                jitter=jitter,
                state=state if jitter == "decorrelated" else None,
            )
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise RetryError(exc, attempts=attempt) from exc
                sleep_s = min(sleep_s, remaining)

            if on_retry is not None:
                on_retry(attempt, exc, sleep_s)

            await asyncio.sleep(sleep_s)
