"""
SHA-1 digests for the Pwned Passwords range protocol.

The range API keys its buckets by the first five characters of the
uppercase hex SHA-1 of a password. Only that prefix is ever sent; the
remaining suffix is compared locally.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import hashlib
import string
from dataclasses import dataclass

PREFIX_LENGTH = 5
DIGEST_LENGTH = 40

_HEX_DIGITS = set(string.hexdigits)


@dataclass(frozen=True)
class Digest:
    """Uppercase hex SHA-1 digest of a secret."""

    hex: str

    def __post_init__(self):
        value = self.hex.upper()
        if len(value) != DIGEST_LENGTH or not set(value) <= _HEX_DIGITS:
            raise ValueError(f"Expected {DIGEST_LENGTH} hex characters")
        object.__setattr__(self, "hex", value)

    @property
    def prefix(self) -> str:
        return self.hex[:PREFIX_LENGTH]

    @property
    def suffix(self) -> str:
        return self.hex[PREFIX_LENGTH:]

    def __repr__(self) -> str:
        # Keep the private suffix out of tracebacks and logs
        return f"Digest(prefix={self.prefix!r})"


def digest(secret: str) -> Digest:
    """Compute the SHA-1 digest of a secret (UTF-8 encoded).

    Undecodable bytes smuggled in through surrogate escapes (as Python
    does for command-line arguments) are hashed as the original bytes.

    Raises:
        ValueError: If the secret holds any other lone surrogate
    """
    try:
        raw = secret.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError as e:
        raise ValueError("Password is not valid Unicode text") from e
    return Digest(hashlib.sha1(raw).hexdigest().upper())


def split(value: Digest) -> tuple[str, str]:
    """Split a digest into its public prefix and private suffix."""
    return value.prefix, value.suffix
