"""Tests for the registration payment breakdown (service and endpoint)."""

from decimal import Decimal

import pytest

from app.config import DEFAULT_USD_ESTIMATE_RATES
from app.services.rate_service import CurrencyNormalizer, CurrencyRateSource
from app.services.registration_service import (
    InsufficientPaymentError,
    RegistrationPaymentService,
)
from tests.fakes import FakeRateProvider

BREAKDOWN_URL = "/api/v1/registration/payment-breakdown"

XOF_TABLE = {"USD": {"XOF": Decimal("600")}}


def _service(provider) -> RegistrationPaymentService:
    normalizer = CurrencyNormalizer(
        CurrencyRateSource(provider),
        estimate_rates=DEFAULT_USD_ESTIMATE_RATES,
        base_currency="USD",
    )
    return RegistrationPaymentService(normalizer)


# ---------------------------------------------------------------------------
# RegistrationPaymentService
# ---------------------------------------------------------------------------


class TestRegistrationPaymentService:

    @pytest.mark.asyncio
    async def test_xof_payment_normalized(self):
        payment = await _service(FakeRateProvider(XOF_TABLE)).compute(
            amount=Decimal("60250"),
            fees=Decimal("1205"),
            pack_price=Decimal("48"),
            duration_months=2,
            currency="XOF",
        )

        # 60250 / 600 = 100.4166.. -> 100 whole dollars, fees 2.0083.. -> 2.01
        assert payment.amount_usd == Decimal("100.42")
        assert payment.fees_usd == Decimal("2.01")
        assert payment.net_usd == Decimal("97.99")
        assert payment.pack_cost == Decimal("96")
        assert payment.currency == "XOF"

    @pytest.mark.asyncio
    async def test_insufficient_payment_raises(self):
        with pytest.raises(InsufficientPaymentError) as exc_info:
            await _service(FakeRateProvider(XOF_TABLE)).compute(
                amount=Decimal("60250"),
                fees=Decimal("1205"),
                pack_price=Decimal("50"),
                duration_months=2,
                currency="XOF",
            )
        assert exc_info.value.net_usd == Decimal("97.99")
        assert exc_info.value.pack_cost == Decimal("100")

    @pytest.mark.asyncio
    async def test_usd_is_not_converted(self):
        provider = FakeRateProvider()
        payment = await _service(provider).compute(
            amount=Decimal("105.50"),
            fees=Decimal("5.55"),
            pack_price=Decimal("100"),
            duration_months=1,
        )

        assert provider.calls == []
        assert payment.currency == "USD"
        # 105.50 rounds half up to 106; USD fees are taken as-is
        assert payment.net_usd == Decimal("100.45")
        assert payment.fees_usd == Decimal("5.55")

    @pytest.mark.asyncio
    async def test_exact_cover_is_enough(self):
        payment = await _service(FakeRateProvider()).compute(
            amount=Decimal("100"),
            fees=Decimal("0"),
            pack_price=Decimal("25"),
            duration_months=4,
            currency="usd",
        )
        assert payment.net_usd == payment.pack_cost

    @pytest.mark.asyncio
    async def test_service_down_uses_estimate(self):
        payment = await _service(FakeRateProvider(fail=True)).compute(
            amount=Decimal("100000"),
            fees=Decimal("0"),
            pack_price=Decimal("100"),
            duration_months=1,
            currency="XOF",
        )
        # 100000 * 0.0017 = 170
        assert payment.amount_usd == Decimal("170.00")
        assert payment.net_usd == Decimal("170")


# ---------------------------------------------------------------------------
# POST /registration/payment-breakdown
# ---------------------------------------------------------------------------


class TestPaymentBreakdownEndpoint:

    @pytest.mark.asyncio
    async def test_breakdown(self, client, rate_provider):
        rate_provider.tables = XOF_TABLE

        response = await client.post(BREAKDOWN_URL, json={
            "amount": 60250, "fees": 1205, "currency": "XOF",
            "pack_price": 48, "duration_months": 2,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["amount_usd"] == 100.42
        assert body["data"]["fees_usd"] == 2.01
        assert body["data"]["net_usd"] == 97.99
        assert body["data"]["pack_cost"] == 96

    @pytest.mark.asyncio
    async def test_insufficient(self, client, rate_provider):
        rate_provider.tables = XOF_TABLE

        response = await client.post(BREAKDOWN_URL, json={
            "amount": 60250, "fees": 1205, "currency": "XOF",
            "pack_price": 50, "duration_months": 2,
        })

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Le montant payé est insuffisant pour couvrir le coût du pack",
        }

    @pytest.mark.asyncio
    async def test_invalid_duration(self, client, rate_provider):
        response = await client.post(BREAKDOWN_URL, json={
            "amount": 100, "fees": 0, "pack_price": 50, "duration_months": 0,
        })

        assert response.status_code == 400
        assert "duration_months" in response.json()["errors"]

    @pytest.mark.asyncio
    async def test_amount_above_limit(self, client, rate_provider):
        response = await client.post(BREAKDOWN_URL, json={
            "amount": 10**27, "fees": 0, "pack_price": 50, "duration_months": 1,
        })

        assert response.status_code == 400
        assert "amount" in response.json()["errors"]
