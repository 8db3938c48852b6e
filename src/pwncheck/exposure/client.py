"""
Breach lookup clients.

Implements two lookups:
- Password checking with k-anonymity (Pwned Passwords range API)
- Email breach lookups (HIBP v3 breachedaccount API)

Both clients return result objects that carry any failure in
``result.error`` so a caller can never mistake "could not verify" for
"not found".

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json
import logging
from urllib.parse import quote

from pwncheck.config import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    HIBP_API_BASE,
    PASSWORDS_API,
    Settings,
)
from pwncheck.errors import DecodeError, NetworkError
from pwncheck.exposure import hashing
from pwncheck.exposure.models import (
    Breach,
    EmailCheckResult,
    ExposureResult,
    PasswordCheckResult,
    RangeEntry,
)
from pwncheck.exposure.transport import AiohttpTransport, Transport

logger = logging.getLogger(__name__)


def match_suffix(body: str, suffix: str) -> ExposureResult:
    """Scan a range response for a hash suffix.

    The first matching record wins. Malformed lines are skipped, and a
    zero count (padding record) is reported as not found.
    """
    suffix = suffix.upper()
    skipped = 0
    for line in body.splitlines():
        entry = RangeEntry.parse(line)
        if entry is None:
            if line.strip():
                skipped += 1
            continue
        if entry.suffix == suffix:
            if entry.count > 0:
                return ExposureResult.found_with(entry.count)
            return ExposureResult.not_found()

    if skipped:
        logger.debug(f"Skipped {skipped} malformed range record(s)")
    return ExposureResult.not_found()


def parse_breaches(body: str) -> list[Breach]:
    """Parse a breachedaccount response body.

    Raises:
        DecodeError: If the body is not a JSON array of breach records
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        raise DecodeError(f"Breach response is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise DecodeError(f"Breach response must be a JSON array, got {type(data).__name__}")

    return [Breach.from_api_response(item) for item in data]


class _ProviderClient:
    """Shared transport ownership for the lookup clients."""

    def __init__(
        self,
        transport: Transport | None,
        timeout: float,
        user_agent: str,
    ):
        self._owns_transport = transport is None
        self.transport = transport or AiohttpTransport(timeout=timeout, user_agent=user_agent)

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class BreachRangeClient(_ProviderClient):
    """Pwned Passwords client using the k-anonymity range API.

    Only the first 5 characters of the SHA-1 hash are sent to the API.
    The full password and the full hash never leave this process.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        base_url: str = PASSWORDS_API,
        padding: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """Initialize range client.

        Args:
            transport: GET transport (an aiohttp transport is created if omitted)
            base_url: Range API base URL
            padding: Ask the API to pad responses with zero-count records
            timeout: Request timeout for the default transport
            user_agent: User-Agent for the default transport
        """
        super().__init__(transport, timeout, user_agent)
        self.base_url = base_url.rstrip("/")
        self.padding = padding

    @classmethod
    def from_settings(cls, settings: Settings, transport: Transport | None = None) -> "BreachRangeClient":
        return cls(
            transport=transport,
            base_url=settings.passwords_api,
            padding=settings.padding,
            timeout=settings.timeout,
            user_agent=settings.user_agent,
        )

    async def check_password(self, password: str) -> PasswordCheckResult | None:
        """Check if a password has been exposed in data breaches.

        Args:
            password: Password to check (NOT stored or logged)

        Returns:
            PasswordCheckResult, or None for an empty password (no request is made)
        """
        if not password:
            return None

        value = hashing.digest(password)
        password = None  # noqa: F841

        return await self._lookup(value)

    async def check_hash(self, sha1_hash: str) -> PasswordCheckResult:
        """Check a pre-computed SHA-1 hash against Pwned Passwords.

        Args:
            sha1_hash: Full SHA-1 hash of the password (any case)

        Raises:
            ValueError: If the hash is not 40 hex characters
        """
        return await self._lookup(hashing.Digest(sha1_hash.strip()))

    async def _lookup(self, value: hashing.Digest) -> PasswordCheckResult:
        prefix, suffix = hashing.split(value)
        result = PasswordCheckResult(hash_prefix=prefix)

        url = f"{self.base_url}/range/{prefix}"
        headers = {"Add-Padding": "true"} if self.padding else None

        try:
            response = await self.transport.get(url, headers=headers)
        except NetworkError as e:
            logger.error(f"Range lookup for prefix {prefix} failed: {e}")
            result.error = e
            return result

        # Every prefix exists, so a 404 here is as unexpected as a 500
        if response.status != 200:
            logger.error(f"Range lookup for prefix {prefix} returned HTTP {response.status}")
            result.error = NetworkError(
                f"HTTP {response.status} from range API",
                status=response.status,
            )
            return result

        result.exposure = match_suffix(response.text, suffix)
        logger.debug(f"Range lookup for prefix {prefix}: found={result.exposure.found}")
        return result


class EmailExposureClient(_ProviderClient):
    """HIBP breached-account client.

    This endpoint has no k-anonymity scheme: the full email address is
    sent to the provider.
    """

    STATUS_MESSAGES = {
        400: "Email address was rejected by the provider",
        401: "Invalid API key",
        403: "API key required or access denied",
    }

    def __init__(
        self,
        transport: Transport | None = None,
        base_url: str = HIBP_API_BASE,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """Initialize email client.

        Args:
            transport: GET transport (an aiohttp transport is created if omitted)
            base_url: HIBP API base URL
            api_key: HIBP API key, sent as the hibp-api-key header when set
            timeout: Request timeout for the default transport
            user_agent: User-Agent for the default transport
        """
        super().__init__(transport, timeout, user_agent)
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    @classmethod
    def from_settings(cls, settings: Settings, transport: Transport | None = None) -> "EmailExposureClient":
        return cls(
            transport=transport,
            base_url=settings.hibp_api,
            api_key=settings.hibp_api_key,
            timeout=settings.timeout,
            user_agent=settings.user_agent,
        )

    async def check_email(self, email: str) -> EmailCheckResult | None:
        """Check if an email address has been in any data breaches.

        Args:
            email: Email address to check, sent URL-escaped as given

        Returns:
            EmailCheckResult, or None for an empty email (no request is made)
        """
        if not email:
            return None

        url = f"{self.base_url}/breachedaccount/{quote(email, safe='')}?truncateResponse=false"
        headers = {"hibp-api-key": self.api_key} if self.api_key else None

        result = EmailCheckResult(email=email)

        try:
            response = await self.transport.get(url, headers=headers)
        except NetworkError as e:
            logger.error(f"Email lookup failed: {e}")
            result.error = e
            return result

        if response.status == 404:
            # Not found - no breaches for this account
            result.breaches = []
            return result

        if response.status != 200:
            result.error = NetworkError(self._status_message(response), status=response.status)
            logger.error(f"Email lookup failed: {result.error}")
            return result

        try:
            result.breaches = parse_breaches(response.text)
        except DecodeError as e:
            logger.error(f"Email lookup returned an unreadable body: {e}")
            result.error = e

        return result

    def _status_message(self, response) -> str:
        if response.status == 429:
            retry_after = response.headers.get("Retry-After", "60")
            return f"Rate limited. Retry after {retry_after}s"
        message = self.STATUS_MESSAGES.get(response.status)
        if message:
            return message
        return f"HTTP {response.status}: {response.text[:200]}"
