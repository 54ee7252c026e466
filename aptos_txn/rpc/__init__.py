"""
aptos_txn.rpc
=============

Async REST access to a node: the client and the response models it returns.
"""

from .http import RestClient, TransactionLookup
from .models import AccountInfo, LedgerInfo, PendingTransaction, TransactionView

__all__ = [
    "RestClient",
    "TransactionLookup",
    "AccountInfo",
    "LedgerInfo",
    "PendingTransaction",
    "TransactionView",
]
