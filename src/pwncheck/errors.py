"""
Error taxonomy shared by the exposure clients and the history cache.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""


class PwnCheckError(Exception):
    """Base exception for pwncheck."""

    pass


class NetworkError(PwnCheckError):
    """Transport failure or unexpected HTTP status.

    ``status`` is the HTTP status code, or None when no response was
    received (connection failure, timeout).
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class DecodeError(PwnCheckError):
    """Malformed ciphertext or an unparsable provider payload."""

    pass
