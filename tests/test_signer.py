from __future__ import annotations

import pytest

from aptos_txn.address import AccountAddress
from aptos_txn.errors import EncodeError, SigningKeyError
from aptos_txn.tx.build import coin_transfer_payload
from aptos_txn.tx.encode import (RAW_TRANSACTION_PREFIX,
                                 encode_raw_transaction,
                                 encode_signed_transaction, signing_message,
                                 transaction_hash, transaction_hash_hex)
from aptos_txn.tx.sign import sign_transaction, verify_signed_transaction
from aptos_txn.types.transaction import Ed25519Authenticator, SignedTransaction
from aptos_txn.utils.hash import sha3_256
from aptos_txn.wallet.signer import Ed25519Signer, Signer

from bcs_oracle import decode_all, signed_transaction


def test_signing_message_has_domain_prefix(raw_txn):
    msg = signing_message(raw_txn)
    assert RAW_TRANSACTION_PREFIX == sha3_256(b"APTOS::RawTransaction")
    assert msg[:32] == RAW_TRANSACTION_PREFIX
    assert msg[32:] == encode_raw_transaction(raw_txn)


def test_signer_satisfies_protocol(signer):
    assert isinstance(signer, Signer)
    assert len(signer.public_key) == 32
    assert signer.address == AccountAddress.from_public_key(signer.public_key)


def test_signing_is_deterministic_and_verifies(signer, raw_txn):
    a = sign_transaction(raw_txn, signer)
    b = sign_transaction(raw_txn, signer)
    assert a == b
    assert len(a.authenticator.signature) == 64
    assert a.authenticator.public_key == signer.public_key
    assert verify_signed_transaction(a)
    assert signer.verify(signing_message(raw_txn), a.authenticator.signature)


@pytest.mark.parametrize(
    "change",
    [
        {"sequence_number": 6},
        {"max_gas_amount": 999_999},
        {"gas_unit_price": 2},
        {"expiration_timestamp_secs": 1},
        {"chain_id": 5},
        {"sender": AccountAddress.from_hex("0xdead")},
        {"payload": coin_transfer_payload("0xb0b", 718)},
    ],
)
def test_mutating_any_field_breaks_verification(signer, raw_txn, change):
    signed = sign_transaction(raw_txn, signer)
    tampered = SignedTransaction(raw_txn.with_changes(**change), signed.authenticator)
    assert not verify_signed_transaction(tampered)


def test_signature_from_another_key_fails(signer, raw_txn):
    other = Ed25519Signer.from_private_key(b"\x07" * 32)
    signed = sign_transaction(raw_txn, signer)
    forged = SignedTransaction(
        raw_txn, Ed25519Authenticator(other.public_key, signed.authenticator.signature)
    )
    assert not verify_signed_transaction(forged)


def test_signing_without_prefix_does_not_verify(signer, raw_txn):
    bare = signer.sign(encode_raw_transaction(raw_txn))
    signed = SignedTransaction(raw_txn, Ed25519Authenticator(signer.public_key, bare))
    assert not verify_signed_transaction(signed)


@pytest.mark.parametrize("key", [b"\x01" * 31, b"\x01" * 33, "0x1234", "0xzz", 42])
def test_bad_private_keys_raise(key):
    with pytest.raises(SigningKeyError):
        Ed25519Signer.from_private_key(key)  # type: ignore[arg-type]


def test_private_key_hex_import_matches_bytes(signer):
    again = Ed25519Signer.from_private_key("0x" + bytes(range(32)).hex())
    assert again.public_key == signer.public_key
    assert again.private_key_bytes() == bytes(range(32))


class _ShortSigner:
    public_key = b"\x01" * 32

    def sign(self, message: bytes) -> bytes:
        return b"\x00" * 10


class _ShortKeySigner:
    public_key = b"\x01" * 16

    def sign(self, message: bytes) -> bytes:
        return b"\x00" * 64


@pytest.mark.parametrize("bad", [_ShortSigner(), _ShortKeySigner()])
def test_malformed_signer_output_raises(raw_txn, bad):
    with pytest.raises(SigningKeyError):
        sign_transaction(raw_txn, bad)


def test_encode_error_surfaces_before_signing(raw_txn):
    calls = []

    class _Recorder:
        public_key = b"\x01" * 32

        def sign(self, message: bytes) -> bytes:
            calls.append(message)
            return b"\x00" * 64

    with pytest.raises(EncodeError):
        sign_transaction(raw_txn.with_changes(chain_id=300), _Recorder())
    assert calls == []


def test_signed_layout_and_hash(signer, raw_txn):
    signed = sign_transaction(raw_txn, signer)
    enc = encode_signed_transaction(signed)
    raw_len = len(encode_raw_transaction(raw_txn))
    # variant 0, then length-prefixed 32-byte key and 64-byte signature
    assert enc[raw_len:] == (
        b"\x00" + b"\x20" + signer.public_key + b"\x40" + signed.authenticator.signature
    )
    assert decode_all(enc, signed_transaction) == signed

    prefix = sha3_256(b"APTOS::Transaction")
    assert transaction_hash(signed) == sha3_256(prefix + b"\x00" + enc)
    assert transaction_hash_hex(signed) == "0x" + transaction_hash(signed).hex()


def test_authenticator_lengths_checked_at_encoding(raw_txn):
    bad = SignedTransaction(raw_txn, Ed25519Authenticator(b"\x01" * 32, b"\x02" * 63))
    with pytest.raises(EncodeError):
        encode_signed_transaction(bad)
