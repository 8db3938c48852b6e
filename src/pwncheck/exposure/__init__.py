"""
Breach exposure lookups.

Provides breach checking for email addresses and password exposure
checks using the Pwned Passwords range API with k-anonymity.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from pwncheck.exposure.models import (
    Breach,
    EmailCheckResult,
    ExposureResult,
    PasswordCheckResult,
    RangeEntry,
    RiskLevel,
)
from pwncheck.exposure.client import BreachRangeClient, EmailExposureClient
from pwncheck.exposure.transport import AiohttpTransport, Transport, TransportResponse

__all__ = [
    "BreachRangeClient",
    "EmailExposureClient",
    "Transport",
    "TransportResponse",
    "AiohttpTransport",
    "Breach",
    "EmailCheckResult",
    "ExposureResult",
    "PasswordCheckResult",
    "RangeEntry",
    "RiskLevel",
]
