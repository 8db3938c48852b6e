"""
Caller-owned checker session.

Holds the state of one interactive session (current history, last
result) so the clients and the cache can stay stateless.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from pwncheck.config import Settings
from pwncheck.exposure.client import BreachRangeClient, EmailExposureClient
from pwncheck.exposure.models import EmailCheckResult, PasswordCheckResult
from pwncheck.exposure.transport import AiohttpTransport, Transport
from pwncheck.history.cache import HistoryCache
from pwncheck.strength import StrengthReport, StrengthScorer, ZxcvbnScorer

logger = logging.getLogger(__name__)


@dataclass
class PasswordReport:
    """Everything a single password check produced."""

    strength: StrengthReport | None = None
    result: PasswordCheckResult | None = None
    history: list[str] = field(default_factory=list)
    # True if this check wrote the history, False if the write failed,
    # None if nothing was added
    remembered: bool | None = None


class CheckerSession:
    """Score, look up and remember passwords; look up emails.

    The history cache does blocking SQLite I/O and key derivation, so
    every cache call runs in a worker thread. The history is loaded on
    ``async with`` entry, or lazily by the first check.
    """

    def __init__(
        self,
        range_client: BreachRangeClient,
        email_client: EmailExposureClient,
        history: HistoryCache | None = None,
        scorer: StrengthScorer | None = None,
    ):
        """Initialize session.

        Args:
            range_client: Password range lookup client
            email_client: Email breach lookup client
            history: History cache (history is not kept when omitted)
            scorer: Strength scorer (no strength report when omitted)
        """
        self.range_client = range_client
        self.email_client = email_client
        self.cache = history
        self.scorer = scorer
        self.history: list[str] = []
        self._history_loaded = history is None
        self.last_password_result: PasswordCheckResult | None = None
        self.last_email_result: EmailCheckResult | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Transport | None = None,
        keep_history: bool = True,
    ) -> "CheckerSession":
        """Build a session whose clients share one transport."""
        transport = transport or AiohttpTransport(
            timeout=settings.timeout,
            user_agent=settings.user_agent,
        )
        return cls(
            range_client=BreachRangeClient.from_settings(settings, transport),
            email_client=EmailExposureClient.from_settings(settings, transport),
            history=HistoryCache.from_settings(settings) if keep_history else None,
            scorer=ZxcvbnScorer(),
        )

    async def close(self) -> None:
        await self.range_client.transport.close()
        await self.email_client.transport.close()
        if self.cache:
            self.cache.store.close()

    async def __aenter__(self) -> "CheckerSession":
        await self.load_history()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def load_history(self) -> list[str]:
        """Load the persisted history once per session."""
        if not self._history_loaded:
            self.history = await asyncio.to_thread(self.cache.load)
            self._history_loaded = True
        return self.history

    def strength(self, password: str) -> StrengthReport | None:
        if not self.scorer or not password:
            return None
        return self.scorer.score(password)

    async def check_password(self, password: str, remember: bool = False) -> PasswordReport:
        """Score and look up a password, optionally adding it to the history.

        The history is updated even when the lookup fails, and a history
        failure never affects the lookup result.

        Raises:
            ValueError: If the password holds a lone surrogate that has no
                byte representation
        """
        await self.load_history()
        if not password:
            return PasswordReport(history=self.history)

        report = PasswordReport(strength=self.strength(password))
        report.result = await self.range_client.check_password(password)
        self.last_password_result = report.result

        if remember and self.cache:
            self.history, report.remembered = await asyncio.to_thread(
                self.cache.remember, password, self.history
            )
            logger.debug(f"History holds {len(self.history)} password(s)")

        report.history = self.history
        return report

    async def check_email(self, email: str) -> EmailCheckResult | None:
        self.last_email_result = await self.email_client.check_email(email)
        return self.last_email_result

    async def clear_history(self) -> None:
        if self.cache:
            await asyncio.to_thread(self.cache.clear)
        self.history = []
        self._history_loaded = True
