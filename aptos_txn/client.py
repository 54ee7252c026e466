"""
High-level client tying the pipeline together.

    async with TransactionClient.from_config() as txc:
        result = await txc.transfer(signer, "0xb0b", 717)
        if result.ok:
            print("committed at version", result.version)

`TransactionClient` fills in what the network owns (sequence number, chain
id), applies gas and TTL defaults from `SDKConfig`, signs, submits and waits.
Reads that fail here (account lookup, ledger info) raise ApiError or
TransportError; once a transaction is signed, every outcome comes back as a
`SubmissionResult`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Union

from .address import AccountAddress
from .config import SDKConfig
from .rpc.http import RestClient
from .tx.build import (APTOS_COIN, build_raw_transaction,
                       coin_transfer_payload, expiration_from_now)
from .tx.send import SubmissionResult, WaitPolicy, submit_and_wait
from .tx.sign import sign_transaction
from .types.payload import TransactionPayload
from .types.transaction import RawTransaction, SignedTransaction
from .wallet.signer import Signer

__all__ = ["TransactionClient"]

log = logging.getLogger(__name__)


def _signer_address(signer: Signer) -> AccountAddress:
    addr = getattr(signer, "address", None)
    if isinstance(addr, AccountAddress):
        return addr
    return AccountAddress.from_public_key(signer.public_key)


class TransactionClient:
    def __init__(self, rest: RestClient, config: Optional[SDKConfig] = None) -> None:
        self.rest = rest
        self.config = config or SDKConfig()
        self._chain_id: Optional[int] = self.config.chain_id

    @classmethod
    def from_config(cls, config: Optional[SDKConfig] = None) -> "TransactionClient":
        cfg = config or SDKConfig.from_env()
        rest = RestClient(
            cfg.node_url,
            timeout=cfg.request_timeout,
            max_retries=cfg.max_retries,
            backoff=cfg.backoff_factor,
            headers=cfg.http_headers(),
        )
        return cls(rest, cfg)

    async def __aenter__(self) -> "TransactionClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        await self.rest.aclose()

    # ---- Network-owned values ----

    async def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = await self.rest.get_chain_id()
            log.debug("chain_id=%d", self._chain_id)
        return self._chain_id

    async def prepare(
        self,
        sender: Union[AccountAddress, str],
        payload: TransactionPayload,
        *,
        sequence_number: Optional[int] = None,
        max_gas_amount: Optional[int] = None,
        gas_unit_price: Optional[int] = None,
        expiration_timestamp_secs: Optional[int] = None,
    ) -> RawTransaction:
        """
        Build a RawTransaction for `sender`.

        Only the sequence number is read fresh on every call (unless given).
        The chain id comes from `SDKConfig.chain_id` or is fetched once and
        cached for the client's lifetime.
        """
        addr = AccountAddress.coerce(sender)
        if sequence_number is None:
            sequence_number, chain_id = await asyncio.gather(
                self.rest.get_sequence_number(addr), self.chain_id()
            )
        else:
            chain_id = await self.chain_id()
        cfg = self.config
        return build_raw_transaction(
            addr,
            sequence_number,
            payload,
            cfg.max_gas_amount if max_gas_amount is None else max_gas_amount,
            cfg.gas_unit_price if gas_unit_price is None else gas_unit_price,
            (
                expiration_from_now(cfg.txn_ttl_secs)
                if expiration_timestamp_secs is None
                else expiration_timestamp_secs
            ),
            chain_id,
        )

    # ---- Pipeline ----

    async def submit_signed(
        self,
        signed: SignedTransaction,
        *,
        policy: Optional[WaitPolicy] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> SubmissionResult:
        return await submit_and_wait(
            self.rest,
            signed,
            policy=policy or self.config.wait_policy(),
            cancel=cancel,
        )

    async def submit_entry_function(
        self,
        signer: Signer,
        payload: TransactionPayload,
        *,
        sequence_number: Optional[int] = None,
        max_gas_amount: Optional[int] = None,
        gas_unit_price: Optional[int] = None,
        expiration_timestamp_secs: Optional[int] = None,
        policy: Optional[WaitPolicy] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> SubmissionResult:
        raw = await self.prepare(
            _signer_address(signer),
            payload,
            sequence_number=sequence_number,
            max_gas_amount=max_gas_amount,
            gas_unit_price=gas_unit_price,
            expiration_timestamp_secs=expiration_timestamp_secs,
        )
        signed = sign_transaction(raw, signer)
        return await self.submit_signed(signed, policy=policy, cancel=cancel)

    async def transfer(
        self,
        signer: Signer,
        receiver: Union[AccountAddress, str],
        amount: int,
        *,
        coin_type: str = APTOS_COIN,
        sequence_number: Optional[int] = None,
        policy: Optional[WaitPolicy] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> SubmissionResult:
        """Transfer `amount` of `coin_type` from the signer's account to `receiver`."""
        return await self.submit_entry_function(
            signer,
            coin_transfer_payload(receiver, amount, coin_type),
            sequence_number=sequence_number,
            policy=policy,
            cancel=cancel,
        )
