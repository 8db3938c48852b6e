"""
Data models for breach lookups.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pwncheck.errors import DecodeError, PwnCheckError


class RiskLevel(str, Enum):
    """Risk level based on password exposure."""

    SAFE = "safe"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class RangeEntry:
    """One ``SUFFIX:COUNT`` record of a range response."""

    suffix: str
    count: int

    @classmethod
    def parse(cls, line: str) -> "RangeEntry | None":
        """Parse a response line, returning None if it is malformed."""
        hash_suffix, sep, count = line.strip().partition(":")
        if not sep or not hash_suffix:
            return None
        try:
            value = int(count)
        except ValueError:
            return None
        if value < 0:
            return None
        return cls(suffix=hash_suffix.upper(), count=value)


@dataclass(frozen=True)
class ExposureResult:
    """Either not found (0 occurrences) or found with a positive count."""

    occurrences: int = 0

    def __post_init__(self):
        if self.occurrences < 0:
            raise ValueError("occurrences cannot be negative")

    @classmethod
    def not_found(cls) -> "ExposureResult":
        return cls(0)

    @classmethod
    def found_with(cls, count: int) -> "ExposureResult":
        if count < 1:
            raise ValueError("a found result needs at least one occurrence")
        return cls(count)

    @property
    def found(self) -> bool:
        return self.occurrences > 0

    @property
    def risk_level(self) -> RiskLevel:
        """Determine risk level based on occurrences."""
        if self.occurrences == 0:
            return RiskLevel.SAFE
        elif self.occurrences < 10:
            return RiskLevel.LOW
        elif self.occurrences < 100:
            return RiskLevel.MEDIUM
        elif self.occurrences < 10000:
            return RiskLevel.HIGH
        else:
            return RiskLevel.CRITICAL

    @property
    def risk_description(self) -> str:
        """Get human-readable risk description."""
        descriptions = {
            RiskLevel.SAFE: "This password has not been found in any known data breaches.",
            RiskLevel.LOW: f"This password has been seen {self.occurrences} times in data breaches. Consider changing it.",
            RiskLevel.MEDIUM: f"This password has been seen {self.occurrences} times. You should change it.",
            RiskLevel.HIGH: f"This password has been seen {self.occurrences:,} times! Change it immediately.",
            RiskLevel.CRITICAL: f"This password has been seen {self.occurrences:,} times! It's extremely common and must be changed.",
        }
        return descriptions[self.risk_level]


@dataclass
class PasswordCheckResult:
    """Result of checking a password against Pwned Passwords.

    Exactly one of ``exposure`` and ``error`` is set. A result with an
    error means the password could not be verified, not that it is safe.
    """

    hash_prefix: str = ""  # Only first 5 chars of SHA-1
    exposure: ExposureResult | None = None
    error: PwnCheckError | None = None
    checked_at: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.error is None and self.exposure is not None

    @property
    def is_pwned(self) -> bool:
        return self.ok and self.exposure.found

    @property
    def occurrences(self) -> int | None:
        return self.exposure.occurrences if self.exposure else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data: dict[str, Any] = {
            "hash_prefix": self.hash_prefix,
            "ok": self.ok,
            "is_pwned": self.is_pwned,
            "occurrences": self.occurrences,
            "checked_at": self.checked_at.isoformat(),
            "error": str(self.error) if self.error else None,
        }
        if self.exposure is not None:
            data["risk_level"] = self.exposure.risk_level.value
            data["risk_description"] = self.exposure.risk_description
        return data


@dataclass
class Breach:
    """A single data breach an email address appeared in."""

    name: str
    breach_date: str
    title: str | None = None
    domain: str | None = None
    pwn_count: int | None = None
    data_classes: list[str] = field(default_factory=list)
    is_verified: bool | None = None
    is_sensitive: bool | None = None

    @classmethod
    def from_api_response(cls, data: Any) -> "Breach":
        """Create Breach from an HIBP API record.

        Raises:
            DecodeError: If the record is not an object or lacks Name/BreachDate
        """
        if not isinstance(data, dict):
            raise DecodeError(f"Breach record must be an object, got {type(data).__name__}")

        name = data.get("Name")
        breach_date = data.get("BreachDate")
        if not isinstance(name, str) or not isinstance(breach_date, str):
            raise DecodeError("Breach record is missing Name or BreachDate")

        data_classes = data.get("DataClasses") or []
        if not isinstance(data_classes, list):
            data_classes = []

        pwn_count = data.get("PwnCount")
        return cls(
            name=name,
            breach_date=breach_date,
            title=data.get("Title"),
            domain=data.get("Domain"),
            pwn_count=pwn_count if isinstance(pwn_count, int) else None,
            data_classes=[str(d) for d in data_classes],
            is_verified=data.get("IsVerified"),
            is_sensitive=data.get("IsSensitive"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "breach_date": self.breach_date,
            "title": self.title,
            "domain": self.domain,
            "pwn_count": self.pwn_count,
            "data_classes": self.data_classes,
            "is_verified": self.is_verified,
            "is_sensitive": self.is_sensitive,
        }


@dataclass
class EmailCheckResult:
    """Result of checking an email against HIBP.

    ``breaches`` is an empty list when the provider confirmed the address
    is not breached, and None when the lookup failed (see ``error``).
    """

    email: str
    breaches: list[Breach] | None = None
    error: PwnCheckError | None = None
    checked_at: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.error is None and self.breaches is not None

    @property
    def is_breached(self) -> bool:
        return self.ok and len(self.breaches) > 0

    @property
    def breach_count(self) -> int:
        return len(self.breaches) if self.breaches else 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "email": self.email,
            "ok": self.ok,
            "is_breached": self.is_breached,
            "breach_count": self.breach_count,
            "breaches": [b.to_dict() for b in self.breaches] if self.breaches else [],
            "checked_at": self.checked_at.isoformat(),
            "error": str(self.error) if self.error else None,
        }
