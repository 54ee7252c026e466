from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from aptos_txn.address import AccountAddress, is_valid
from aptos_txn.errors import AddressParseError, TypeTagParseError
from aptos_txn.tx.encode import encode_address, encode_type_tag
from aptos_txn.types.type_tag import (ADDRESS, BOOL, U8, U64, U128, U256,
                                      PrimitiveTypeTag, StructTag, TypeTagKind,
                                      VectorTypeTag, parse_type_tag)
from aptos_txn.utils.hash import sha3_256

from bcs_oracle import decode_all, type_tag

ONE = AccountAddress(bytes(31) + b"\x01")


# ---- Addresses ---------------------------------------------------------------


@pytest.mark.parametrize("text", ["0x1", "0x01", "1", "0X1", "  0x1  ", "0x" + "0" * 63 + "1"])
def test_short_forms_are_left_padded(text):
    assert AccountAddress.from_hex(text) == ONE


def test_hex_is_case_insensitive():
    assert AccountAddress.from_hex("0xABCDEF") == AccountAddress.from_hex("0xabcdef")


@pytest.mark.parametrize(
    "text",
    ["", "0x", "0xzz", "0x" + "1" * 65, "hello", "0x1::coin"],
)
def test_invalid_addresses_raise(text):
    with pytest.raises(AddressParseError):
        AccountAddress.from_hex(text)
    assert not is_valid(text)


def test_constructor_requires_exactly_32_bytes():
    with pytest.raises(ValueError):
        AccountAddress(b"\x01" * 31)
    with pytest.raises(TypeError):
        AccountAddress("0x1")  # type: ignore[arg-type]


def test_rendering_short_for_special_long_otherwise():
    assert str(ONE) == "0x1"
    assert str(AccountAddress.from_hex("0xf")) == "0xf"
    ten = AccountAddress.from_hex("0x10")
    assert str(ten) == "0x" + "0" * 62 + "10"
    assert ONE.hex() == "0x" + "0" * 63 + "1"
    # the rendered form always parses back
    assert AccountAddress.from_hex(str(ten)) == ten


def test_address_from_public_key():
    pk = bytes(range(32))
    assert AccountAddress.from_public_key(pk).value == sha3_256(pk + b"\x00")


def test_encode_address_is_32_raw_bytes():
    assert encode_address(ONE) == bytes(31) + b"\x01"


@given(st.binary(min_size=32, max_size=32), st.binary(min_size=32, max_size=32))
def test_distinct_addresses_encode_differently(a, b):
    if a != b:
        assert encode_address(AccountAddress(a)) != encode_address(AccountAddress(b))


@given(st.binary(min_size=32, max_size=32))
def test_address_text_roundtrip(raw):
    addr = AccountAddress(raw)
    assert AccountAddress.from_hex(str(addr)) == addr
    assert AccountAddress.from_hex(addr.hex()) == addr


# ---- Type tags ---------------------------------------------------------------


def test_struct_tag_parse():
    tag = StructTag.from_str("0x1::aptos_coin::AptosCoin")
    assert tag.address == ONE
    assert tag.module == "aptos_coin"
    assert tag.name == "AptosCoin"
    assert tag.type_args == ()


def test_nested_generics_and_whitespace():
    tag = parse_type_tag(" 0x1::coin::CoinStore < 0x1::aptos_coin::AptosCoin > ")
    assert isinstance(tag, StructTag)
    assert tag.name == "CoinStore"
    assert tag.type_args == (StructTag(ONE, "aptos_coin", "AptosCoin"),)

    pair = parse_type_tag("0x1::pair::Pair<u64, vector<0x1::string::String>>")
    assert pair.type_args == (U64, VectorTypeTag(StructTag(ONE, "string", "String")))
    assert str(pair) == "0x1::pair::Pair<u64, vector<0x1::string::String>>"
    assert parse_type_tag(str(pair)) == pair


@pytest.mark.parametrize(
    "name,tag",
    [("bool", BOOL), ("u8", U8), ("u64", U64), ("u128", U128), ("u256", U256), ("address", ADDRESS)],
)
def test_primitives(name, tag):
    assert parse_type_tag(name) == tag


@pytest.mark.parametrize(
    "text",
    [
        "",
        "0x1::coin",
        "0x1::::Coin",
        "0x1::coin::",
        "0x1::coin::Coin<u64",
        "0x1::coin::Coin<u64>>",
        "0x1::coin::Coin<>",
        "0x1::coin::Coin<u64,>",
        "u63",
        "vector<u8, u8>",
        "u8<u8>",
        "0xzz::coin::Coin",
        "0x1::co-in::Coin",
    ],
)
def test_malformed_type_tags_raise(text):
    with pytest.raises(TypeTagParseError) as ei:
        parse_type_tag(text)
    assert ei.value.message


def test_parse_error_names_the_segment():
    with pytest.raises(TypeTagParseError) as ei:
        parse_type_tag("u63")
    assert ei.value.segment == "u63"


@pytest.mark.parametrize(
    "tag,expected",
    [
        (BOOL, "00"),
        (U8, "01"),
        (U64, "02"),
        (U128, "03"),
        (ADDRESS, "04"),
        (PrimitiveTypeTag(TypeTagKind.SIGNER), "05"),
        (VectorTypeTag(U8), "0601"),
        (PrimitiveTypeTag(TypeTagKind.U16), "08"),
        (PrimitiveTypeTag(TypeTagKind.U32), "09"),
        (U256, "0a"),
    ],
)
def test_type_tag_variant_bytes(tag, expected):
    assert encode_type_tag(tag).hex() == expected


def test_struct_tag_bytes():
    tag = StructTag.from_str("0x1::aptos_coin::AptosCoin")
    expected = (
        b"\x07"
        + bytes(31) + b"\x01"
        + b"\x0aaptos_coin"
        + b"\x09AptosCoin"
        + b"\x00"
    )
    assert encode_type_tag(tag) == expected


def test_primitive_type_tag_rejects_composite_kinds():
    with pytest.raises(ValueError):
        PrimitiveTypeTag(TypeTagKind.VECTOR)


_leaf = st.sampled_from([BOOL, U8, U64, U128, U256, ADDRESS])


def _structs(children):
    return st.builds(
        StructTag,
        st.binary(min_size=32, max_size=32).map(AccountAddress),
        st.from_regex(r"[a-z_][a-z0-9_]{0,8}", fullmatch=True),
        st.from_regex(r"[A-Z][A-Za-z0-9]{0,8}", fullmatch=True),
        st.lists(children, max_size=3).map(tuple),
    )


_type_tags = st.recursive(
    _leaf,
    lambda children: st.one_of(children.map(VectorTypeTag), _structs(children)),
    max_leaves=8,
)


@given(_type_tags)
def test_type_tag_roundtrip_through_oracle_and_text(tag):
    assert decode_all(encode_type_tag(tag), type_tag) == tag
    assert parse_type_tag(str(tag)) == tag
