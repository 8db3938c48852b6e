"""Tests for the k-anonymity password range client."""

import pytest

from conftest import PASSWORD123_PREFIX, PASSWORD123_SUFFIX, FakeTransport
from pwncheck.config import Settings
from pwncheck.errors import NetworkError
from pwncheck.exposure.client import BreachRangeClient, match_suffix
from pwncheck.exposure.models import ExposureResult, RangeEntry, RiskLevel


class TestRangeEntry:
    def test_parses_record(self):
        assert RangeEntry.parse("0018a45c4d1def81644b54ab7f969b88d65:21") == RangeEntry(
            "0018A45C4D1DEF81644B54AB7F969B88D65", 21
        )

    @pytest.mark.parametrize("line", ["", "NOSEPARATOR", ":5", "ABC:", "ABC:many", "ABC:-1"])
    def test_malformed_lines_are_none(self, line):
        assert RangeEntry.parse(line) is None


class TestMatchSuffix:
    def test_first_match_wins(self):
        body = f"{PASSWORD123_SUFFIX}:3\r\n{PASSWORD123_SUFFIX}:99"
        assert match_suffix(body, PASSWORD123_SUFFIX).occurrences == 3

    def test_match_is_case_insensitive(self):
        body = f"{PASSWORD123_SUFFIX.lower()}:7"
        assert match_suffix(body, PASSWORD123_SUFFIX) == ExposureResult(7)

    def test_skips_malformed_lines(self):
        body = f"garbage\r\n\r\n{PASSWORD123_SUFFIX}:4\r\n"
        assert match_suffix(body, PASSWORD123_SUFFIX).occurrences == 4

    def test_accepts_bare_newlines(self):
        body = f"AAAA:1\n{PASSWORD123_SUFFIX}:5\n"
        assert match_suffix(body, PASSWORD123_SUFFIX).occurrences == 5

    def test_zero_count_padding_is_not_found(self):
        body = f"{PASSWORD123_SUFFIX}:0"
        assert not match_suffix(body, PASSWORD123_SUFFIX).found

    def test_empty_body_is_not_found(self):
        assert match_suffix("", PASSWORD123_SUFFIX) == ExposureResult.not_found()


class TestExposureResult:
    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            ExposureResult(-1)

    def test_found_needs_positive_count(self):
        with pytest.raises(ValueError):
            ExposureResult.found_with(0)

    @pytest.mark.parametrize(
        "count, level",
        [(0, RiskLevel.SAFE), (3, RiskLevel.LOW), (50, RiskLevel.MEDIUM), (9999, RiskLevel.HIGH), (10000, RiskLevel.CRITICAL)],
    )
    def test_risk_levels(self, count, level):
        assert ExposureResult(count).risk_level == level


class TestCheckPassword:
    @pytest.mark.asyncio
    async def test_found(self, range_body):
        transport = FakeTransport(text=range_body)
        client = BreachRangeClient(transport=transport)

        result = await client.check_password("password123")

        assert result.ok
        assert result.is_pwned
        assert result.exposure == ExposureResult.found_with(3)
        assert result.hash_prefix == PASSWORD123_PREFIX

    @pytest.mark.asyncio
    async def test_not_found(self):
        transport = FakeTransport(text="0018A45C4D1DEF81644B54AB7F969B88D65:1\r\n00D4F6E8FA6EECAD2A3AA415EEC418D38EC:2")
        client = BreachRangeClient(transport=transport)

        result = await client.check_password("password123")

        assert result.ok
        assert not result.is_pwned
        assert result.occurrences == 0

    @pytest.mark.asyncio
    async def test_only_prefix_is_sent(self, range_body):
        transport = FakeTransport(text=range_body)
        client = BreachRangeClient(transport=transport, base_url="https://proxy.example/")

        await client.check_password("password123")

        assert len(transport.requests) == 1
        url, headers = transport.requests[0]
        assert url == f"https://proxy.example/range/{PASSWORD123_PREFIX}"
        assert PASSWORD123_SUFFIX not in url
        assert "password123" not in url
        assert headers is None

    @pytest.mark.asyncio
    async def test_padding_header(self, range_body):
        transport = FakeTransport(text=range_body)
        client = BreachRangeClient(transport=transport, padding=True)

        await client.check_password("password123")

        assert transport.requests[0][1] == {"Add-Padding": "true"}

    @pytest.mark.asyncio
    async def test_empty_password_is_noop(self):
        transport = FakeTransport()
        client = BreachRangeClient(transport=transport)

        assert await client.check_password("") is None
        assert transport.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 429, 500, 503])
    async def test_non_success_status_is_error(self, status):
        client = BreachRangeClient(transport=FakeTransport(status=status, text="nope"))

        result = await client.check_password("password123")

        assert not result.ok
        assert result.exposure is None
        assert isinstance(result.error, NetworkError)
        assert result.error.status == status
        assert not result.is_pwned

    @pytest.mark.asyncio
    async def test_transport_failure_is_error(self, network_error):
        client = BreachRangeClient(transport=FakeTransport(error=network_error))

        result = await client.check_password("password123")

        assert result.error is network_error
        assert result.error.status is None
        assert result.occurrences is None

    @pytest.mark.asyncio
    async def test_check_hash(self, range_body):
        transport = FakeTransport(text=range_body)
        client = BreachRangeClient(transport=transport)

        result = await client.check_hash("cbfdac6008f9cab4083784cbd1874f76618d2a97")

        assert result.occurrences == 3
        assert transport.requests[0][0].endswith(f"/range/{PASSWORD123_PREFIX}")

    @pytest.mark.asyncio
    async def test_check_hash_rejects_malformed(self):
        client = BreachRangeClient(transport=FakeTransport())
        with pytest.raises(ValueError):
            await client.check_hash("not-a-hash")

    @pytest.mark.asyncio
    async def test_to_dict_never_contains_password_or_suffix(self, range_body):
        client = BreachRangeClient(transport=FakeTransport(text=range_body))

        result = await client.check_password("password123")
        dumped = str(result.to_dict())

        assert "password123" not in dumped
        assert PASSWORD123_SUFFIX not in dumped
        assert result.to_dict()["risk_level"] == "low"


class TestClientLifecycle:
    @pytest.mark.asyncio
    async def test_does_not_close_injected_transport(self):
        transport = FakeTransport()
        async with BreachRangeClient(transport=transport):
            pass
        assert not transport.closed

    def test_from_settings(self):
        settings = Settings(passwords_api="https://proxy.example", padding=True)
        client = BreachRangeClient.from_settings(settings, FakeTransport())
        assert client.base_url == "https://proxy.example"
        assert client.padding is True
