"""Tests for the email breach lookup client."""

import json

import pytest

from conftest import FakeTransport
from pwncheck.errors import DecodeError, NetworkError
from pwncheck.exposure.client import EmailExposureClient, parse_breaches
from pwncheck.exposure.models import Breach


class TestBreach:
    def test_keeps_fields_verbatim(self):
        breach = Breach.from_api_response({"Name": "Adobe", "BreachDate": "2013-10-04"})
        assert breach.name == "Adobe"
        assert breach.breach_date == "2013-10-04"
        assert breach.pwn_count is None
        assert breach.data_classes == []

    @pytest.mark.parametrize(
        "record",
        [
            ["Adobe"],
            "Adobe",
            {"Name": "Adobe"},
            {"BreachDate": "2013-10-04"},
            {"Name": 7, "BreachDate": "2013-10-04"},
        ],
    )
    def test_rejects_bad_records(self, record):
        with pytest.raises(DecodeError):
            Breach.from_api_response(record)


class TestParseBreaches:
    def test_empty_array(self):
        assert parse_breaches("[]") == []

    @pytest.mark.parametrize("body", ["", "not json", '{"Name": "Adobe"}', "null"])
    def test_rejects_non_array(self, body):
        with pytest.raises(DecodeError):
            parse_breaches(body)


class TestCheckEmail:
    @pytest.mark.asyncio
    async def test_two_breaches(self, breaches_body):
        client = EmailExposureClient(transport=FakeTransport(text=breaches_body))

        result = await client.check_email("user@example.com")

        assert result.ok
        assert result.is_breached
        assert result.breach_count == 2
        assert [(b.name, b.breach_date) for b in result.breaches] == [
            ("Adobe", "2013-10-04"),
            ("LinkedIn", "2012-05-05"),
        ]
        assert result.breaches[0].pwn_count == 152445165
        assert result.breaches[0].is_verified is True

    @pytest.mark.asyncio
    async def test_not_found_status_is_empty_list(self):
        client = EmailExposureClient(transport=FakeTransport(status=404))

        result = await client.check_email("nobody@example.com")

        assert result.ok
        assert result.breaches == []
        assert result.error is None
        assert not result.is_breached

    @pytest.mark.asyncio
    async def test_unparsable_body_is_error_not_empty(self):
        client = EmailExposureClient(transport=FakeTransport(text="<html>maintenance</html>"))

        result = await client.check_email("user@example.com")

        assert not result.ok
        assert result.breaches is None
        assert isinstance(result.error, DecodeError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, message",
        [(401, "Invalid API key"), (403, "access denied"), (500, "HTTP 500")],
    )
    async def test_other_statuses_are_network_errors(self, status, message):
        client = EmailExposureClient(transport=FakeTransport(status=status, text="boom"))

        result = await client.check_email("user@example.com")

        assert isinstance(result.error, NetworkError)
        assert result.error.status == status
        assert message in str(result.error)
        assert result.breaches is None

    @pytest.mark.asyncio
    async def test_rate_limit_message(self):
        client = EmailExposureClient(
            transport=FakeTransport(status=429, headers={"Retry-After": "2"})
        )

        result = await client.check_email("user@example.com")

        assert result.error.status == 429
        assert "Retry after 2s" in str(result.error)

    @pytest.mark.asyncio
    async def test_transport_failure(self, network_error):
        client = EmailExposureClient(transport=FakeTransport(error=network_error))

        result = await client.check_email("user@example.com")

        assert result.error is network_error
        assert not result.ok

    @pytest.mark.asyncio
    async def test_email_is_url_escaped(self):
        transport = FakeTransport(status=404)
        client = EmailExposureClient(transport=transport, base_url="https://hibp.example/api/v3")

        await client.check_email("First.Last+tag@example.com")

        url, _ = transport.requests[0]
        assert url == (
            "https://hibp.example/api/v3/breachedaccount/"
            "First.Last%2Btag%40example.com?truncateResponse=false"
        )

    @pytest.mark.asyncio
    async def test_api_key_header(self):
        transport = FakeTransport(status=404)
        client = EmailExposureClient(transport=transport, api_key="abc123")

        await client.check_email("user@example.com")

        assert transport.requests[0][1] == {"hibp-api-key": "abc123"}

    @pytest.mark.asyncio
    async def test_empty_email_is_noop(self):
        transport = FakeTransport()
        client = EmailExposureClient(transport=transport)

        assert await client.check_email("") is None
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_to_dict(self, breaches_body):
        client = EmailExposureClient(transport=FakeTransport(text=breaches_body))

        result = await client.check_email("user@example.com")
        data = result.to_dict()

        assert data["breach_count"] == 2
        assert data["breaches"][1] == {
            "name": "LinkedIn",
            "breach_date": "2012-05-05",
            "title": None,
            "domain": None,
            "pwn_count": None,
            "data_classes": [],
            "is_verified": None,
            "is_sensitive": None,
        }
        json.dumps(data)
