"""
aptos_txn.tx.encode
===================

BCS encoding of the transaction model.

This module provides:
- `encode_address`, `encode_type_tag`, `encode_struct_tag` - descriptors
- `encode_payload` (and one encoder per payload variant)
- `encode_raw_transaction(raw)` - the bytes the signature covers
- `signing_message(raw)` - domain prefix || encode_raw_transaction(raw)
- `encode_signed_transaction(signed)` - the wire body for submission
- `transaction_hash(signed)` - the hash the node reports for a user txn

Layouts
-------
RawTransaction (struct, in order)::

    sender                     32 bytes, no length prefix
    sequence_number            u64
    payload                    TransactionPayload enum
    max_gas_amount             u64
    gas_unit_price             u64
    expiration_timestamp_secs  u64
    chain_id                   u8

EntryFunction::

    module     ModuleId { address: 32 bytes, name: str }
    function   str
    type_args  vector<TypeTag>
    args       vector<vector<u8>>

SignedTransaction::

    raw_txn        RawTransaction
    authenticator  TransactionAuthenticator enum, Ed25519 = 0:
                   { public_key: bytes(32), signature: bytes(64) }

Domain separation
-----------------
The signed message is ``sha3_256(b"APTOS::RawTransaction") || bcs(raw_txn)``.
The transaction hash is ``sha3_256(sha3_256(b"APTOS::Transaction") || 0x00 ||
bcs(signed_txn))`` where ``0x00`` selects the UserTransaction variant.

Model types are plain values; everything that turns them into bytes lives
here, so there is exactly one place where the layout is defined.
"""

from __future__ import annotations

from typing import Never, NoReturn

from .. import bcs
from ..address import ADDRESS_LENGTH, AccountAddress
from ..errors import EncodeError
from ..types.payload import (EntryFunction, ModuleBundle, ModuleId,
                             PayloadKind, Script, TransactionArgument,
                             TransactionArgumentKind, TransactionPayload)
from ..types.transaction import (ED25519_PUBLIC_KEY_LENGTH,
                                 ED25519_SIGNATURE_LENGTH,
                                 Ed25519Authenticator, RawTransaction,
                                 SignedTransaction)
from ..types.type_tag import (PrimitiveTypeTag, StructTag, TypeTag,
                              TypeTagKind, VectorTypeTag)
from ..utils.bytes import to_hex
from ..utils.hash import domain_prefix, sha3_256

__all__ = [
    "RAW_TRANSACTION_PREFIX",
    "TRANSACTION_PREFIX",
    "AUTHENTICATOR_ED25519",
    "USER_TRANSACTION_VARIANT",
    "encode_address",
    "encode_type_tag",
    "encode_struct_tag",
    "encode_module_id",
    "encode_entry_function",
    "encode_transaction_argument",
    "encode_script",
    "encode_module_bundle",
    "encode_payload",
    "encode_raw_transaction",
    "signing_message",
    "encode_authenticator",
    "encode_signed_transaction",
    "transaction_hash",
    "transaction_hash_hex",
]

RAW_TRANSACTION_PREFIX = domain_prefix("APTOS::RawTransaction")
TRANSACTION_PREFIX = domain_prefix("APTOS::Transaction")

AUTHENTICATOR_ED25519 = 0
USER_TRANSACTION_VARIANT = 0


def _unknown_variant(value: Never, what: str) -> NoReturn:
    raise EncodeError(f"not a {what}: {type(value).__name__}")


# -----------------------------------------------------------------------------
# Descriptors
# -----------------------------------------------------------------------------


def encode_address(address: AccountAddress) -> bytes:
    if not isinstance(address, AccountAddress):
        raise EncodeError(f"expected AccountAddress, got {type(address).__name__}")
    return bcs.encode_fixed_bytes(address.value, ADDRESS_LENGTH)


def encode_struct_tag(tag: StructTag) -> bytes:
    return bcs.encode_struct(
        encode_address(tag.address),
        bcs.encode_str(tag.module),
        bcs.encode_str(tag.name),
        bcs.encode_sequence(tag.type_args, encode_type_tag),
    )


def encode_type_tag(tag: TypeTag) -> bytes:
    match tag:
        case PrimitiveTypeTag(kind=kind):
            return bcs.encode_variant(int(kind))
        case VectorTypeTag(element=element):
            return bcs.encode_variant(TypeTagKind.VECTOR, encode_type_tag(element))
        case StructTag():
            return bcs.encode_variant(TypeTagKind.STRUCT, encode_struct_tag(tag))
        case _:
            _unknown_variant(tag, "TypeTag")


# -----------------------------------------------------------------------------
# Payloads
# -----------------------------------------------------------------------------


def encode_module_id(module: ModuleId) -> bytes:
    return encode_address(module.address) + bcs.encode_str(module.name)


def encode_entry_function(fn: EntryFunction) -> bytes:
    return bcs.encode_struct(
        encode_module_id(fn.module),
        bcs.encode_str(fn.function),
        bcs.encode_sequence(fn.type_args, encode_type_tag),
        bcs.encode_sequence(fn.args, bcs.encode_bytes),
    )


def encode_transaction_argument(arg: TransactionArgument) -> bytes:
    kind = arg.kind
    v = arg.value
    match kind:
        case TransactionArgumentKind.U8:
            body = bcs.encode_u8(v)  # type: ignore[arg-type]
        case TransactionArgumentKind.U16:
            body = bcs.encode_u16(v)  # type: ignore[arg-type]
        case TransactionArgumentKind.U32:
            body = bcs.encode_u32(v)  # type: ignore[arg-type]
        case TransactionArgumentKind.U64:
            body = bcs.encode_u64(v)  # type: ignore[arg-type]
        case TransactionArgumentKind.U128:
            body = bcs.encode_u128(v)  # type: ignore[arg-type]
        case TransactionArgumentKind.U256:
            body = bcs.encode_u256(v)  # type: ignore[arg-type]
        case TransactionArgumentKind.ADDRESS:
            body = encode_address(v)  # type: ignore[arg-type]
        case TransactionArgumentKind.U8_VECTOR:
            body = bcs.encode_bytes(v)  # type: ignore[arg-type]
        case TransactionArgumentKind.BOOL:
            body = bcs.encode_bool(v)  # type: ignore[arg-type]
        case _:
            _unknown_variant(kind, "TransactionArgument kind")
    return bcs.encode_variant(int(kind), body)


def encode_script(script: Script) -> bytes:
    return bcs.encode_struct(
        bcs.encode_bytes(script.code),
        bcs.encode_sequence(script.type_args, encode_type_tag),
        bcs.encode_sequence(script.args, encode_transaction_argument),
    )


def encode_module_bundle(bundle: ModuleBundle) -> bytes:
    return bcs.encode_sequence(bundle.modules, bcs.encode_bytes)


def encode_payload(payload: TransactionPayload) -> bytes:
    match payload:
        case Script():
            return bcs.encode_variant(PayloadKind.SCRIPT, encode_script(payload))
        case ModuleBundle():
            return bcs.encode_variant(
                PayloadKind.MODULE_BUNDLE, encode_module_bundle(payload)
            )
        case EntryFunction():
            return bcs.encode_variant(
                PayloadKind.ENTRY_FUNCTION, encode_entry_function(payload)
            )
        case _:
            _unknown_variant(payload, "TransactionPayload")


# -----------------------------------------------------------------------------
# Transactions
# -----------------------------------------------------------------------------


def encode_raw_transaction(raw: RawTransaction) -> bytes:
    return bcs.encode_struct(
        encode_address(raw.sender),
        bcs.encode_u64(raw.sequence_number),
        encode_payload(raw.payload),
        bcs.encode_u64(raw.max_gas_amount),
        bcs.encode_u64(raw.gas_unit_price),
        bcs.encode_u64(raw.expiration_timestamp_secs),
        bcs.encode_u8(raw.chain_id),
    )


def signing_message(raw: RawTransaction) -> bytes:
    """The exact byte string the sender's key signs."""
    return RAW_TRANSACTION_PREFIX + encode_raw_transaction(raw)


def encode_authenticator(auth: Ed25519Authenticator) -> bytes:
    if not isinstance(auth, Ed25519Authenticator):
        raise EncodeError(f"unsupported authenticator: {type(auth).__name__}")
    if len(auth.public_key) != ED25519_PUBLIC_KEY_LENGTH:
        raise EncodeError(
            f"ed25519 public key must be {ED25519_PUBLIC_KEY_LENGTH} bytes, "
            f"got {len(auth.public_key)}"
        )
    if len(auth.signature) != ED25519_SIGNATURE_LENGTH:
        raise EncodeError(
            f"ed25519 signature must be {ED25519_SIGNATURE_LENGTH} bytes, "
            f"got {len(auth.signature)}"
        )
    return bcs.encode_variant(
        AUTHENTICATOR_ED25519,
        bcs.encode_bytes(auth.public_key) + bcs.encode_bytes(auth.signature),
    )


def encode_signed_transaction(signed: SignedTransaction) -> bytes:
    return encode_raw_transaction(signed.raw_txn) + encode_authenticator(
        signed.authenticator
    )


def transaction_hash(signed: SignedTransaction) -> bytes:
    body = encode_signed_transaction(signed)
    return sha3_256(TRANSACTION_PREFIX + bytes([USER_TRANSACTION_VARIANT]) + body)


def transaction_hash_hex(signed: SignedTransaction) -> str:
    return to_hex(transaction_hash(signed))
