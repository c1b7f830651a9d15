"""
FX rate engine — rate fetching with static fallback, USD normalization,
and direct currency conversion.

Two conversion paths exist and behave differently:

* ``CurrencyNormalizer`` (registration) fetches the USD table and inverts
  ``USD -> X`` to get ``X -> USD``. Unknown currencies fall back to a
  fixed USD estimate, and finally to the unconverted amount.
* ``CurrencyConverter`` (``/currency/convert``) fetches the source
  currency's own table and reads ``rates[target]`` directly. A missing
  target is reported to the caller as RateUnavailableError.

Rates are fetched on every call; there is no cache and no retry. A failed
fetch is replaced by the static fallback table configured for that path.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Protocol

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CENT = Decimal("0.01")
ONE = Decimal("1")

# Mock rates per 1 USD (deterministic for dev/testing)
MOCK_RATES_PER_USD: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.92"),
    "XOF": Decimal("605.00"),
    "XAF": Decimal("605.00"),
    "CDF": Decimal("2800.00"),
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class RateFetchError(Exception):
    """Raised by a rate provider when live rates cannot be obtained."""
    pass


class RateUnavailableError(Exception):
    """Raised when no rate exists for a requested currency pair."""

    def __init__(self, source: str, target: str):
        self.source = source
        self.target = target
        super().__init__(f"Taux de conversion non disponible pour la devise {target}")


# ---------------------------------------------------------------------------
# Rate provider protocol
# ---------------------------------------------------------------------------


class RateProvider(Protocol):
    async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
        """Fetch {target: rate} per 1 unit of *base_currency*."""
        ...


class MockRateProvider:
    """Deterministic cross rates derived from MOCK_RATES_PER_USD."""

    async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
        base_per_usd = MOCK_RATES_PER_USD.get(base_currency)
        if base_per_usd is None:
            raise RateFetchError(f"Mock provider has no rates for {base_currency}")
        return {
            code: (per_usd / base_per_usd).quantize(Decimal("0.000001"), rounding=ROUND_HALF_UP)
            for code, per_usd in MOCK_RATES_PER_USD.items()
        }


class ExchangeRateAPIProvider:
    """Fetch live rates from open.er-api.com (no API key required)."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.FX_RATE_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.FX_RATE_TIMEOUT_SECONDS
        self.transport = transport

    async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
        url = f"{self.base_url}/{base_currency}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise RateFetchError(f"Rate API request failed for {base_currency}: {exc}") from exc

        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            raise RateFetchError(f"Rate API response for {base_currency} has no rates")

        try:
            return {code: Decimal(str(rate)) for code, rate in rates.items()}
        except InvalidOperation as exc:
            raise RateFetchError(f"Rate API returned a non-numeric rate: {exc}") from exc


# Module-level provider override (for tests)
_provider: RateProvider | None = None


def get_rate_provider() -> RateProvider:
    """Return the configured rate provider."""
    if _provider is not None:
        return _provider
    if settings.FX_RATE_MOCK:
        return MockRateProvider()
    return ExchangeRateAPIProvider()


def set_rate_provider(provider: RateProvider | None) -> None:
    """Override the rate provider (for testing)."""
    global _provider
    _provider = provider


# ---------------------------------------------------------------------------
# Rate source with fallback
# ---------------------------------------------------------------------------


class CurrencyRateSource:
    """
    Live rates with a static fallback table.

    ``get_rates`` never raises: a RateFetchError from the provider is
    logged and replaced wholesale by ``fallback_rates[base]``, or by an
    empty mapping when the table has no entry for that base.
    """

    def __init__(
        self,
        provider: RateProvider | None = None,
        fallback_rates: dict[str, dict[str, Decimal]] | None = None,
    ):
        self.provider = provider or get_rate_provider()
        self.fallback_rates = fallback_rates or {}

    async def get_rates(self, base_currency: str) -> dict[str, Decimal]:
        try:
            rates = await self.provider.fetch_rates(base_currency)
        except RateFetchError as exc:
            logger.warning(
                "Live rates unavailable for %s, using fallback table: %s",
                base_currency, exc,
            )
            return dict(self.fallback_rates.get(base_currency, {}))

        logger.info("Fetched %d live rates for %s", len(rates), base_currency)
        return rates


# ---------------------------------------------------------------------------
# Registration path: normalize to the base currency
# ---------------------------------------------------------------------------


class CurrencyNormalizer:
    """Convert amounts into the base currency (USD) for registration payments."""

    def __init__(
        self,
        rate_source: CurrencyRateSource,
        estimate_rates: dict[str, Decimal] | None = None,
        base_currency: str | None = None,
    ):
        self.rate_source = rate_source
        self.estimate_rates = estimate_rates if estimate_rates is not None else {}
        self.base_currency = (base_currency or settings.BASE_CURRENCY).upper()

    async def to_base(self, amount: Decimal, from_currency: str) -> Decimal:
        """
        Return *amount* expressed in the base currency, unrounded.

        Order of precedence:
            1. same currency -> amount unchanged
            2. live base table -> amount * (1 / rates[from])
            3. fixed estimate table -> amount * estimate[from]
            4. unknown currency -> amount unchanged
        """
        currency = from_currency.upper()
        if currency == self.base_currency:
            return amount

        rates = await self.rate_source.get_rates(self.base_currency)
        rate = rates.get(currency)
        if rate is not None and rate > 0:
            return amount * (ONE / rate)

        estimate = self.estimate_rates.get(currency)
        if estimate is not None:
            logger.warning(
                "No live %s rate for %s, using estimate %s",
                self.base_currency, currency, estimate,
            )
            return amount * estimate

        logger.warning(
            "Unknown currency %s, amount %s left unconverted", currency, amount,
        )
        return amount


# ---------------------------------------------------------------------------
# Direct path: convert between two currencies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConversionResult:
    amount: Decimal
    from_currency: str
    to_currency: str
    rate: Decimal
    converted_amount: Decimal


class CurrencyConverter:
    """Direct conversion used by the public conversion endpoint."""

    def __init__(self, rate_source: CurrencyRateSource):
        self.rate_source = rate_source

    async def convert(
        self, amount: Decimal, from_currency: str, to_currency: str,
    ) -> ConversionResult:
        source = from_currency.upper()
        target = to_currency.upper()

        if source == target:
            return ConversionResult(amount, source, target, ONE, amount)

        rates = await self.rate_source.get_rates(source)
        rate = rates.get(target)
        if rate is None:
            logger.error(
                "No rate for %s/%s (available: %s)", source, target, sorted(rates),
            )
            raise RateUnavailableError(source, target)

        converted = (amount * rate).quantize(CENT, rounding=ROUND_HALF_UP)
        logger.info("Converted %s %s = %s %s (rate %s)", amount, source, converted, target, rate)
        return ConversionResult(amount, source, target, rate, converted)
