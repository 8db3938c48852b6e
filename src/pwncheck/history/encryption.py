"""
Encryption at rest for the password history.

Fernet (AES-128-CBC with HMAC-SHA256) keyed by PBKDF2-SHA256 over an
opaque string key. Every ciphertext carries its own random salt, so the
transform is stateless: the same key decrypts any record it produced.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import base64
import binascii
import secrets

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from pwncheck.config import DEFAULT_KDF_ITERATIONS
from pwncheck.errors import DecodeError

SALT_LENGTH = 16
KEY_LENGTH = 32


class SymmetricVault:
    """Reversible string encryption with a string key."""

    def __init__(self, iterations: int = DEFAULT_KDF_ITERATIONS):
        """Initialize vault.

        Args:
            iterations: PBKDF2 iterations used to stretch the key
        """
        self.iterations = iterations

    def _fernet(self, key: str, salt: bytes) -> Fernet:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=self.iterations,
        )
        # surrogatepass: any str is a usable key, including undecodable env bytes
        derived = kdf.derive(key.encode("utf-8", "surrogatepass"))
        return Fernet(base64.urlsafe_b64encode(derived))

    def encrypt(self, plaintext: str, key: str) -> str:
        """Encrypt a string value.

        Args:
            plaintext: String to encrypt
            key: Opaque secret key

        Returns:
            URL-safe base64 string of salt + Fernet token
        """
        salt = secrets.token_bytes(SALT_LENGTH)
        token = self._fernet(key, salt).encrypt(plaintext.encode("utf-8", "surrogatepass"))
        return base64.urlsafe_b64encode(salt + token).decode("ascii")

    def decrypt(self, ciphertext: str, key: str) -> str:
        """Decrypt a value produced by encrypt().

        Raises:
            DecodeError: If the ciphertext is malformed, truncated, tampered
                with, or was encrypted under a different key
        """
        try:
            raw = base64.urlsafe_b64decode(ciphertext.encode("ascii"))
        except (binascii.Error, UnicodeEncodeError, ValueError) as e:
            raise DecodeError(f"Ciphertext is not valid base64: {e}") from e

        if len(raw) <= SALT_LENGTH:
            raise DecodeError("Ciphertext is truncated")

        salt, token = raw[:SALT_LENGTH], raw[SALT_LENGTH:]
        try:
            plaintext = self._fernet(key, salt).decrypt(token)
        except InvalidToken as e:
            raise DecodeError("Decryption failed - wrong key or corrupted data") from e

        try:
            return plaintext.decode("utf-8", "surrogatepass")
        except UnicodeDecodeError as e:
            raise DecodeError("Decrypted data is not valid UTF-8") from e
