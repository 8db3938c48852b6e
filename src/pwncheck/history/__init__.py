"""
Encrypted local history of recently checked passwords.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from pwncheck.history.cache import HISTORY_KEY, MAX_HISTORY, HistoryCache
from pwncheck.history.encryption import SymmetricVault
from pwncheck.history.store import KeyValueStore, MemoryStore, SQLiteStore

__all__ = [
    "HistoryCache",
    "HISTORY_KEY",
    "MAX_HISTORY",
    "SymmetricVault",
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
]
