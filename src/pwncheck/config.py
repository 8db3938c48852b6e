"""
Configuration for pwncheck.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import os
from dataclasses import dataclass
from pathlib import Path

# Development-only fallback. Anyone with this source can decrypt a history
# encrypted with it; set PWNCHECK_SECRET_KEY for real use.
INSECURE_DEFAULT_SECRET_KEY = "default-secret-key-for-dev"

PASSWORDS_API = "https://api.pwnedpasswords.com"
HIBP_API_BASE = "https://haveibeenpwned.com/api/v3"

DEFAULT_TIMEOUT = 10.0
DEFAULT_KDF_ITERATIONS = 480000  # OWASP 2023 recommendation for PBKDF2-SHA256
DEFAULT_USER_AGENT = "pwncheck/1.0"


@dataclass
class Settings:
    """Runtime settings for the exposure clients and the history cache."""

    # History encryption
    secret_key: str = INSECURE_DEFAULT_SECRET_KEY
    kdf_iterations: int = DEFAULT_KDF_ITERATIONS
    history_path: str | Path | None = None

    # Remote providers
    passwords_api: str = PASSWORDS_API
    hibp_api: str = HIBP_API_BASE
    hibp_api_key: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    padding: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        secret_key = os.environ.get("PWNCHECK_SECRET_KEY") or INSECURE_DEFAULT_SECRET_KEY

        try:
            timeout = float(os.environ.get("PWNCHECK_TIMEOUT", DEFAULT_TIMEOUT))
        except ValueError:
            timeout = DEFAULT_TIMEOUT

        try:
            iterations = int(os.environ.get("PWNCHECK_KDF_ITERATIONS", DEFAULT_KDF_ITERATIONS))
        except ValueError:
            iterations = DEFAULT_KDF_ITERATIONS

        return cls(
            secret_key=secret_key,
            kdf_iterations=iterations,
            history_path=os.environ.get("PWNCHECK_HISTORY_PATH"),
            passwords_api=os.environ.get("PWNCHECK_PASSWORDS_API", PASSWORDS_API),
            hibp_api=os.environ.get("PWNCHECK_HIBP_API", HIBP_API_BASE),
            hibp_api_key=os.environ.get("HIBP_API_KEY"),
            timeout=timeout,
            padding=os.environ.get("PWNCHECK_PADDING", "").lower() in ("true", "yes", "1"),
        )

    @property
    def using_insecure_key(self) -> bool:
        """True when history is protected by the built-in development key."""
        return self.secret_key == INSECURE_DEFAULT_SECRET_KEY

    def get_history_path(self) -> Path:
        """Get the history database path."""
        if self.history_path:
            return Path(self.history_path).expanduser()
        return Path.home() / ".pwncheck" / "history.db"

    def validate(self) -> list[str]:
        """Validate settings, returning a list of problems."""
        errors = []
        if not self.secret_key:
            errors.append("secret_key must not be empty")
        if self.timeout <= 0:
            errors.append("timeout must be positive")
        if self.kdf_iterations < 1:
            errors.append("kdf_iterations must be at least 1")
        return errors
