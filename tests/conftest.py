from __future__ import annotations

import pytest
import pytest_asyncio

from aptos_txn.address import AccountAddress
from aptos_txn.rpc.http import RestClient
from aptos_txn.tx.build import build_coin_transfer
from aptos_txn.types.transaction import RawTransaction
from aptos_txn.wallet.signer import Ed25519Signer

NODE_URL = "http://node.test"
NOW = 1_700_000_000


def _seed(n: int = 32) -> bytes:
    # Deterministic test key: 0x00, 0x01, ..., 0x1f
    return bytes(range(n))


@pytest.fixture
def signer() -> Ed25519Signer:
    return Ed25519Signer.from_private_key(_seed())


@pytest.fixture
def receiver() -> AccountAddress:
    return AccountAddress.from_hex("0xb0b")


@pytest.fixture
def raw_txn(signer: Ed25519Signer, receiver: AccountAddress) -> RawTransaction:
    return build_coin_transfer(
        signer.address,
        receiver,
        717,
        sequence_number=5,
        chain_id=4,
        max_gas_amount=1_000_000,
        gas_unit_price=1,
        expiration_timestamp_secs=NOW + 10,
    )


@pytest_asyncio.fixture
async def rest():
    # Zero backoff keeps retry tests fast.
    client = RestClient(NODE_URL, max_retries=2, backoff=0.0, max_backoff=0.0)
    yield client
    await client.aclose()
