"""
Value types of the transaction pipeline.

Nothing here performs encoding or network I/O; see `aptos_txn.bcs`,
`aptos_txn.tx.encode` and `aptos_txn.tx.send` for that.
"""

from .payload import (EntryFunction, ModuleBundle, ModuleId, PayloadKind,
                      Script, TransactionArgument, TransactionArgumentKind,
                      TransactionPayload, entry_function)
from .transaction import (Ed25519Authenticator, RawTransaction,
                          SignedTransaction, TransactionAuthenticator)
from .type_tag import (ADDRESS, BOOL, SIGNER, U8, U16, U32, U64, U128, U256,
                       PrimitiveTypeTag, StructTag, TypeTag, TypeTagKind,
                       VectorTypeTag, coerce_type_tag, parse_type_tag)

__all__ = [
    # type tags
    "TypeTag",
    "TypeTagKind",
    "PrimitiveTypeTag",
    "VectorTypeTag",
    "StructTag",
    "parse_type_tag",
    "coerce_type_tag",
    "BOOL", "U8", "U16", "U32", "U64", "U128", "U256", "ADDRESS", "SIGNER",
    # payloads
    "PayloadKind",
    "ModuleId",
    "EntryFunction",
    "TransactionArgument",
    "TransactionArgumentKind",
    "Script",
    "ModuleBundle",
    "TransactionPayload",
    "entry_function",
    # transactions
    "RawTransaction",
    "Ed25519Authenticator",
    "TransactionAuthenticator",
    "SignedTransaction",
]
