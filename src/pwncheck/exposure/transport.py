"""
HTTP transport for the breach lookup clients.

The clients only need one unauthenticated GET per request, so the
transport is a small interface. A proxying transport (for example one
that adds provider credentials server-side) can replace
AiohttpTransport without touching the clients' matching logic.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import aiohttp

from pwncheck.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from pwncheck.errors import NetworkError


@dataclass
class TransportResponse:
    """Status, body and headers of a completed request."""

    status: int
    text: str
    headers: dict[str, str] = field(default_factory=dict)


class Transport(ABC):
    """Abstract GET transport."""

    @abstractmethod
    async def get(self, url: str, headers: dict[str, str] | None = None) -> TransportResponse:
        """Issue a GET request.

        Returns the response whatever its status.

        Raises:
            NetworkError: If no response was received, or its body could
                not be decoded as text
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        pass

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class AiohttpTransport(Transport):
    """Transport backed by a lazily created aiohttp session."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """Initialize transport.

        Args:
            timeout: Total request timeout in seconds
            user_agent: User-Agent header for requests
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self._session: aiohttp.ClientSession | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session exists."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def get(self, url: str, headers: dict[str, str] | None = None) -> TransportResponse:
        session = await self._ensure_session()

        request_headers = {"User-Agent": self.user_agent}
        if headers:
            request_headers.update(headers)

        try:
            async with session.get(
                url,
                headers=request_headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                body = await response.read()
                try:
                    text = body.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise NetworkError(
                        f"Response body is not valid UTF-8 (HTTP {response.status})",
                        status=response.status,
                    ) from e
                return TransportResponse(
                    status=response.status,
                    text=text,
                    headers=dict(response.headers),
                )
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request failed: {e}") from e
