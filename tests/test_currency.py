"""Tests for the currency conversion endpoint."""

from decimal import Decimal

import pytest

CONVERT_URL = "/api/v1/currency/convert"


class TestConvertEndpoint:

    @pytest.mark.asyncio
    async def test_same_currency_is_identity(self, client, rate_provider):
        response = await client.post(CONVERT_URL, json={"amount": 100, "from": "USD", "to": "USD"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["convertedAmount"] == 100
        assert body["rate"] == 1
        assert body["from"] == "USD"
        assert body["to"] == "USD"
        assert rate_provider.calls == []

    @pytest.mark.asyncio
    async def test_live_rate_used(self, client, rate_provider):
        rate_provider.tables = {"EUR": {"XOF": Decimal("655.957")}}

        response = await client.post(CONVERT_URL, json={"amount": 10, "from": "EUR", "to": "XOF"})

        assert response.status_code == 200
        assert response.json()["convertedAmount"] == 6559.57
        assert rate_provider.calls == ["EUR"]

    @pytest.mark.asyncio
    async def test_service_down_uses_fallback(self, client, rate_provider):
        rate_provider.fail = True

        response = await client.post(CONVERT_URL, json={"amount": 10, "from": "USD", "to": "XOF"})

        assert response.status_code == 200
        body = response.json()
        assert body["rate"] == 602.5
        assert body["convertedAmount"] == 6025

    @pytest.mark.asyncio
    async def test_lowercase_codes(self, client, rate_provider):
        rate_provider.tables = {"USD": {"EUR": Decimal("0.9")}}

        response = await client.post(CONVERT_URL, json={"amount": 10, "from": "usd", "to": "eur"})

        assert response.status_code == 200
        body = response.json()
        assert body["from"] == "USD"
        assert body["to"] == "EUR"
        assert body["convertedAmount"] == 9

    @pytest.mark.asyncio
    async def test_unknown_pair(self, client, rate_provider):
        rate_provider.fail = True

        response = await client.post(CONVERT_URL, json={"amount": 10, "from": "USD", "to": "JPY"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "JPY" in body["message"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload,field", [
        ({"from": "USD", "to": "XOF"}, "amount"),
        ({"amount": "abc", "from": "USD", "to": "XOF"}, "amount"),
        ({"amount": -5, "from": "USD", "to": "XOF"}, "amount"),
        ({"amount": 10**27, "from": "USD", "to": "XOF"}, "amount"),
        ({"amount": 10, "from": "DOLLAR", "to": "XOF"}, "from"),
        ({"amount": 10, "from": "USD"}, "to"),
    ])
    async def test_invalid_payload(self, client, rate_provider, payload, field):
        response = await client.post(CONVERT_URL, json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Données invalides pour la conversion"
        assert field in body["errors"]
        assert rate_provider.calls == []

    @pytest.mark.asyncio
    async def test_provider_crash_is_500(self, client, rate_provider):
        async def explode(base_currency):
            raise RuntimeError("unexpected")

        rate_provider.fetch_rates = explode

        response = await client.post(CONVERT_URL, json={"amount": 10, "from": "USD", "to": "XOF"})

        assert response.status_code == 500
        assert response.json()["success"] is False
