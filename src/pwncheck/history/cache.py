"""
Bounded, encrypted history of recently checked passwords.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json
import logging
import sqlite3
import threading

from pwncheck.config import Settings
from pwncheck.errors import DecodeError
from pwncheck.history.encryption import SymmetricVault
from pwncheck.history.store import KeyValueStore, SQLiteStore

logger = logging.getLogger(__name__)

HISTORY_KEY = "passwordHistory"
MAX_HISTORY = 5


class HistoryCache:
    """Most-recent-first list of distinct passwords, persisted encrypted.

    The cache is the only writer of the history record. Corrupted or
    undecryptable records are discarded rather than reported, and a
    failed write never raises into the caller.
    """

    def __init__(
        self,
        store: KeyValueStore,
        vault: SymmetricVault,
        key: str,
        limit: int = MAX_HISTORY,
    ):
        """Initialize history cache.

        Args:
            store: Local key-value store holding the encrypted record
            vault: Cipher used for the record
            key: Secret key for the vault
            limit: Maximum number of passwords retained
        """
        self.store = store
        self.vault = vault
        self.key = key
        self.limit = limit
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "HistoryCache":
        if settings.using_insecure_key:
            logger.warning(
                "PWNCHECK_SECRET_KEY not set; password history is encrypted with the "
                "insecure development key. Do not rely on it outside local development."
            )
        return cls(
            store=SQLiteStore(settings.get_history_path()),
            vault=SymmetricVault(iterations=settings.kdf_iterations),
            key=settings.secret_key,
        )

    def load(self) -> list[str]:
        """Load the persisted history.

        Returns an empty list when there is no record. A record that
        cannot be decrypted or parsed is removed and also yields [].
        """
        with self._lock:
            try:
                ciphertext = self.store.get(HISTORY_KEY)
            except (sqlite3.Error, OSError) as e:
                logger.error(f"Failed to read password history: {e}")
                return []

            if ciphertext is None:
                return []

            try:
                return self._decode(ciphertext)
            except DecodeError as e:
                logger.warning(f"Discarding unreadable password history: {e}")
                self._discard()
                return []

    def record(self, password: str, current: list[str]) -> list[str]:
        """Add a password to the front of the history.

        Args:
            password: Password that was just checked
            current: History as currently held by the caller

        Returns:
            The new history, or ``current`` unchanged when the password is
            empty or already present (nothing is written in that case)
        """
        history, _ = self.remember(password, current)
        return history

    def remember(self, password: str, current: list[str]) -> tuple[list[str], bool | None]:
        """Like record(), but also report whether the record was written.

        The flag is True when written, False when the write failed (the new
        history is still returned) and None when there was nothing to add.
        """
        if not password or password in current:
            return current, None

        history = [password, *current][: self.limit]

        with self._lock:
            try:
                ciphertext = self.vault.encrypt(json.dumps(history), self.key)
                self.store.set(HISTORY_KEY, ciphertext)
            except (sqlite3.Error, OSError) as e:
                logger.error(f"Failed to save password history: {e}")
                return history, False

        return history, True

    def clear(self) -> None:
        """Remove the persisted history."""
        with self._lock:
            self._discard()

    def _decode(self, ciphertext: str) -> list[str]:
        plaintext = self.vault.decrypt(ciphertext, self.key)
        try:
            data = json.loads(plaintext)
        except ValueError as e:
            raise DecodeError(f"History is not valid JSON: {e}") from e

        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise DecodeError("History must be a JSON array of strings")

        # Re-establish the invariants in case the record was written elsewhere
        history: list[str] = []
        for item in data:
            if item and item not in history:
                history.append(item)
        return history[: self.limit]

    def _discard(self) -> None:
        try:
            self.store.remove(HISTORY_KEY)
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to remove password history: {e}")
