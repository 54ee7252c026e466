"""
SDK configuration: node endpoint, retry/timeouts, gas defaults and the wait
policy.

- Loads sane defaults and supports overrides via environment variables (APTOS_*).
- Provides helpers for building HTTP headers and validating endpoints.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .tx.build import (DEFAULT_GAS_UNIT_PRICE, DEFAULT_MAX_GAS_AMOUNT,
                       DEFAULT_TTL_SECS)
from .tx.send import WaitPolicy
from .version import user_agent

_DEFAULT_NODE = "http://127.0.0.1:8080"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v not in (None, "") else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


def _parse_chain_id(val: Any) -> Optional[int]:
    """None/'' means 'ask the node'."""
    if val is None or val == "":
        return None
    cid = int(val)
    if not 0 <= cid <= 0xFF:
        raise ValueError(f"chain_id must fit in a u8, got {cid}")
    return cid


@dataclass(slots=True)
class SDKConfig:
    # Core
    node_url: str = field(default_factory=lambda: _DEFAULT_NODE)
    # Fetched from the node when None
    chain_id: Optional[int] = None
    # HTTP behavior
    request_timeout: float = 10.0
    max_retries: int = 3
    backoff_factor: float = 0.2
    # Wait policy
    wait_timeout: float = 30.0
    poll_interval: float = 0.5
    max_poll_interval: float = 2.5
    poll_backoff: float = 1.25
    max_transient_errors: int = 5
    # Transaction defaults
    max_gas_amount: int = DEFAULT_MAX_GAS_AMOUNT
    gas_unit_price: int = DEFAULT_GAS_UNIT_PRICE
    txn_ttl_secs: int = DEFAULT_TTL_SECS
    # Headers / identity
    user_agent: str = field(default_factory=user_agent)

    @classmethod
    def from_env(cls, prefix: str = "APTOS_") -> "SDKConfig":
        """
        Create config from environment variables:

        APTOS_NODE_URL        (http/https)
        APTOS_CHAIN_ID        (int, optional)
        APTOS_TIMEOUT         (float seconds, HTTP)
        APTOS_MAX_RETRIES     (int, idempotent reads only)
        APTOS_BACKOFF         (float seconds, base retry delay)
        APTOS_WAIT_TIMEOUT    (float seconds, confirmation budget)
        APTOS_POLL_INTERVAL   (float seconds, first poll interval)
        APTOS_MAX_GAS         (int)
        APTOS_GAS_PRICE       (int)
        APTOS_TXN_TTL         (int seconds)
        APTOS_USER_AGENT      (str)
        """
        node = _env(f"{prefix}NODE_URL", _DEFAULT_NODE)
        _ensure_scheme(node, ("http", "https"))

        return cls(
            node_url=node or _DEFAULT_NODE,
            chain_id=_parse_chain_id(_env(f"{prefix}CHAIN_ID")),
            request_timeout=float(_env(f"{prefix}TIMEOUT", "10.0")),
            max_retries=int(_env(f"{prefix}MAX_RETRIES", "3")),
            backoff_factor=float(_env(f"{prefix}BACKOFF", "0.2")),
            wait_timeout=float(_env(f"{prefix}WAIT_TIMEOUT", "30.0")),
            poll_interval=float(_env(f"{prefix}POLL_INTERVAL", "0.5")),
            max_gas_amount=int(_env(f"{prefix}MAX_GAS", str(DEFAULT_MAX_GAS_AMOUNT))),
            gas_unit_price=int(_env(f"{prefix}GAS_PRICE", str(DEFAULT_GAS_UNIT_PRICE))),
            txn_ttl_secs=int(_env(f"{prefix}TXN_TTL", str(DEFAULT_TTL_SECS))),
            user_agent=_env(f"{prefix}USER_AGENT") or user_agent(),
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data})
        if "chain_id" in overrides:
            data["chain_id"] = _parse_chain_id(overrides["chain_id"])
        if "node_url" in overrides:
            _ensure_scheme(data["node_url"], ("http", "https"))
        return cls(**data)

    def wait_policy(self) -> WaitPolicy:
        return WaitPolicy(
            timeout_s=self.wait_timeout,
            poll_interval_s=self.poll_interval,
            max_interval_s=max(self.max_poll_interval, self.poll_interval),
            backoff=self.poll_backoff,
            max_transient_errors=self.max_transient_errors,
        )

    def http_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_url": self.node_url,
            "chain_id": self.chain_id,
            "request_timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
            "backoff_factor": float(self.backoff_factor),
            "wait_timeout": float(self.wait_timeout),
            "poll_interval": float(self.poll_interval),
            "max_poll_interval": float(self.max_poll_interval),
            "poll_backoff": float(self.poll_backoff),
            "max_transient_errors": int(self.max_transient_errors),
            "max_gas_amount": int(self.max_gas_amount),
            "gas_unit_price": int(self.gas_unit_price),
            "txn_ttl_secs": int(self.txn_ttl_secs),
            "user_agent": self.user_agent,
        }


__all__ = ["SDKConfig"]
