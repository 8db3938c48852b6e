"""Shared pytest fixtures for all tests."""

import json

import pytest

from pwncheck.config import Settings
from pwncheck.errors import NetworkError
from pwncheck.exposure.transport import Transport, TransportResponse
from pwncheck.history.cache import HistoryCache
from pwncheck.history.encryption import SymmetricVault
from pwncheck.history.store import MemoryStore

# SHA-1("password123") = CBFDAC6008F9CAB4083784CBD1874F76618D2A97
PASSWORD123_PREFIX = "CBFDA"
PASSWORD123_SUFFIX = "C6008F9CAB4083784CBD1874F76618D2A97"

TEST_KEY = "test-secret-key"


class FakeTransport(Transport):
    """Transport that records requests and replays canned responses."""

    def __init__(self, status: int = 200, text: str = "", headers: dict | None = None, error: Exception | None = None):
        self.status = status
        self.text = text
        self.headers = headers or {}
        self.error = error
        self.requests: list[tuple[str, dict | None]] = []
        self.closed = False

    async def get(self, url, headers=None):
        self.requests.append((url, headers))
        if self.error:
            raise self.error
        return TransportResponse(status=self.status, text=self.text, headers=self.headers)

    async def close(self):
        self.closed = True


# ============================================================================
# Transport Fixtures
# ============================================================================


@pytest.fixture
def range_body() -> str:
    """Range response for prefix CBFDA that contains password123 three times."""
    return "\r\n".join([
        "0018A45C4D1DEF81644B54AB7F969B88D65:1",
        "00D4F6E8FA6EECAD2A3AA415EEC418D38EC:2",
        f"{PASSWORD123_SUFFIX}:3",
        "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF:10",
    ])


@pytest.fixture
def breaches_body() -> str:
    return json.dumps([
        {
            "Name": "Adobe",
            "Title": "Adobe",
            "Domain": "adobe.com",
            "BreachDate": "2013-10-04",
            "PwnCount": 152445165,
            "DataClasses": ["Email addresses", "Password hints", "Passwords", "Usernames"],
            "IsVerified": True,
        },
        {
            "Name": "LinkedIn",
            "BreachDate": "2012-05-05",
        },
    ])


@pytest.fixture
def network_error() -> NetworkError:
    return NetworkError("Request timed out after 10.0s")


# ============================================================================
# History Fixtures
# ============================================================================


@pytest.fixture
def vault() -> SymmetricVault:
    """Vault with few KDF iterations to keep tests fast."""
    return SymmetricVault(iterations=1000)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(store: MemoryStore, vault: SymmetricVault) -> HistoryCache:
    return HistoryCache(store=store, vault=vault, key=TEST_KEY)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a temporary history database."""
    return Settings(
        secret_key=TEST_KEY,
        kdf_iterations=1000,
        history_path=tmp_path / "history.db",
    )
