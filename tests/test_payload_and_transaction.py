from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from aptos_txn import bcs
from aptos_txn.address import AccountAddress
from aptos_txn.errors import EncodeError, TypeTagParseError
from aptos_txn.tx.build import (build_coin_transfer, build_raw_transaction,
                                expiration_from_now)
from aptos_txn.tx.encode import (encode_address, encode_payload,
                                 encode_raw_transaction)
from aptos_txn.types.payload import (EntryFunction, ModuleBundle, ModuleId,
                                     Script, TransactionArgument,
                                     entry_function)
from aptos_txn.types.type_tag import U64, StructTag

from bcs_oracle import decode_all, payload, raw_transaction

APTOS_COIN = StructTag.from_str("0x1::aptos_coin::AptosCoin")


def test_entry_function_natural_and_helper_agree(receiver):
    args = [encode_address(receiver), bcs.encode_u64(717)]
    a = EntryFunction.natural("0x1::coin", "transfer", ["0x1::aptos_coin::AptosCoin"], args)
    b = entry_function("0x1", "coin", "transfer", [APTOS_COIN], args)
    assert a == b
    assert a.module == ModuleId(AccountAddress.from_hex("0x1"), "coin")
    assert str(a) == "0x1::coin::transfer<0x1::aptos_coin::AptosCoin>(2 args)"


def test_entry_function_rejects_non_bytes_args_and_bad_names():
    with pytest.raises(TypeError):
        EntryFunction.natural("0x1::coin", "transfer", [], [717])  # type: ignore[list-item]
    with pytest.raises(TypeTagParseError):
        EntryFunction.natural("0x1::coin", "trans fer")
    with pytest.raises(TypeTagParseError):
        ModuleId.from_str("0x1")


def test_entry_function_payload_bytes():
    ef = entry_function("0x1", "coin", "transfer", [], [bcs.encode_u8(9)])
    expected = (
        b"\x02"  # EntryFunction variant
        + bytes(31) + b"\x01"
        + b"\x04coin"
        + b"\x08transfer"
        + b"\x00"  # no type args
        + b"\x01" + b"\x01\x09"  # one arg: bytes([9])
    )
    assert encode_payload(ef) == expected


def test_end_to_end_layout(signer, receiver, raw_txn):
    enc = encode_raw_transaction(raw_txn)

    struct_tag = 1 + 32 + (1 + len("aptos_coin")) + (1 + len("AptosCoin")) + 1
    payload_len = (
        1  # variant
        + 32 + (1 + len("coin"))  # module id
        + (1 + len("transfer"))
        + 1 + struct_tag  # type args
        + 1 + (1 + 32) + (1 + 8)  # args: address, u64
    )
    assert len(enc) == 32 + 8 + payload_len + 8 + 8 + 8 + 1

    assert enc[:32] == signer.address.value
    assert enc[32:40] == (5).to_bytes(8, "little")
    assert enc[-1] == 4
    assert enc[-9:-1] == raw_txn.expiration_timestamp_secs.to_bytes(8, "little")
    assert enc[-17:-9] == (1).to_bytes(8, "little")
    assert enc[-25:-17] == (1_000_000).to_bytes(8, "little")
    # the amount is the final argument of the payload
    assert (717).to_bytes(8, "little") in enc

    assert decode_all(enc, raw_transaction) == raw_txn


def test_raw_transaction_changes_are_copies(raw_txn):
    bumped = raw_txn.with_changes(sequence_number=6)
    assert raw_txn.sequence_number == 5
    assert bumped.sequence_number == 6
    assert encode_raw_transaction(bumped) != encode_raw_transaction(raw_txn)


def test_out_of_range_fields_fail_at_encoding(raw_txn):
    with pytest.raises(EncodeError):
        encode_raw_transaction(raw_txn.with_changes(chain_id=256))
    with pytest.raises(EncodeError):
        encode_raw_transaction(raw_txn.with_changes(max_gas_amount=2**64))


def test_builder_rejects_negative_and_non_int():
    ef = entry_function("0x1", "coin", "transfer")
    with pytest.raises(ValueError):
        build_raw_transaction("0x1", -1, ef, 1, 1, 1, 1)
    with pytest.raises(TypeError):
        build_raw_transaction("0x1", True, ef, 1, 1, 1, 1)


def test_expiration_from_now():
    assert expiration_from_now(10, now=1_700_000_000.9) == 1_700_000_010
    with pytest.raises(ValueError):
        expiration_from_now(-1)


def test_coin_transfer_uses_default_ttl(receiver):
    raw = build_coin_transfer("0xa11ce", receiver, 1, sequence_number=0, chain_id=1)
    assert raw.expiration_timestamp_secs >= expiration_from_now(0)
    assert isinstance(raw.payload, EntryFunction)
    assert raw.payload.type_args == (APTOS_COIN,)


def test_script_and_module_bundle_payloads():
    script = Script(
        b"\xa1\x1c\xeb\x0b",
        (U64,),
        (
            TransactionArgument.u64(717),
            TransactionArgument.address("0x1"),
            TransactionArgument.boolean(True),
            TransactionArgument.u8_vector(b"\x01\x02"),
            TransactionArgument.u256(2**200),
        ),
    )
    enc = encode_payload(script)
    assert enc[0] == 0
    assert decode_all(enc, payload) == script

    bundle = ModuleBundle((b"\x01\x02", b"\x03"))
    enc = encode_payload(bundle)
    assert enc == b"\x01" + b"\x02" + b"\x02\x01\x02" + b"\x01\x03"
    assert decode_all(enc, payload) == bundle


def test_encode_payload_rejects_foreign_objects():
    with pytest.raises(EncodeError):
        encode_payload("0x1::coin::transfer")  # type: ignore[arg-type]


@given(
    seq=st.integers(min_value=0, max_value=2**64 - 1),
    gas=st.integers(min_value=0, max_value=2**64 - 1),
    price=st.integers(min_value=0, max_value=2**64 - 1),
    exp=st.integers(min_value=0, max_value=2**64 - 1),
    chain=st.integers(min_value=0, max_value=255),
    args=st.lists(st.binary(max_size=40), max_size=5),
)
def test_raw_transaction_roundtrip(seq, gas, price, exp, chain, args):
    ef = entry_function("0x1", "coin", "transfer", ["0x1::aptos_coin::AptosCoin"], args)
    raw = build_raw_transaction("0xcafe", seq, ef, gas, price, exp, chain)
    enc = encode_raw_transaction(raw)
    assert decode_all(enc, raw_transaction) == raw
    assert encode_raw_transaction(raw) == enc
