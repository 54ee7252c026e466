"""
aptos-txn: Python SDK
Build, sign, submit and confirm Aptos transactions.
Convenience exports for the most common APIs.
"""

import logging

from .version import __version__  # noqa: F401

# Core config & errors
from .config import SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    AptosTxnError,
    EncodeError,
    ParseError,
    AddressParseError,
    TypeTagParseError,
    SigningKeyError,
    ApiError,
    TransportError,
)

# Addresses & types
from .address import AccountAddress  # noqa: F401
from .types import (  # noqa: F401
    EntryFunction,
    ModuleId,
    RawTransaction,
    SignedTransaction,
    StructTag,
    TypeTag,
    entry_function,
    parse_type_tag,
)

# Wallet
from .wallet.signer import Ed25519Signer, Signer  # noqa: F401

# RPC
from .rpc.http import RestClient  # noqa: F401

# Tx helpers
from .tx.build import build_coin_transfer, build_raw_transaction  # noqa: F401
from .tx.encode import (  # noqa: F401
    encode_raw_transaction,
    encode_signed_transaction,
    signing_message,
    transaction_hash_hex,
)
from .tx.sign import sign_transaction, verify_signed_transaction  # noqa: F401
from .tx.send import (  # noqa: F401
    SubmissionResult,
    TxStatus,
    WaitPolicy,
    check_transaction,
    submit_and_wait,
    submit_transaction,
    wait_for_transaction,
)

# High-level client
from .client import TransactionClient  # noqa: F401

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Core
    "SDKConfig",
    "AptosTxnError", "EncodeError", "ParseError", "AddressParseError",
    "TypeTagParseError", "SigningKeyError", "ApiError", "TransportError",
    # Types
    "AccountAddress", "TypeTag", "StructTag", "parse_type_tag",
    "ModuleId", "EntryFunction", "entry_function",
    "RawTransaction", "SignedTransaction",
    # Wallet
    "Signer", "Ed25519Signer",
    # RPC
    "RestClient",
    # Tx
    "build_raw_transaction", "build_coin_transfer",
    "encode_raw_transaction", "encode_signed_transaction",
    "signing_message", "transaction_hash_hex",
    "sign_transaction", "verify_signed_transaction",
    "TxStatus", "SubmissionResult", "WaitPolicy",
    "submit_transaction", "check_transaction",
    "wait_for_transaction", "submit_and_wait",
    # Client
    "TransactionClient",
]
