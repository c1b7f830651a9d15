"""
Registration payment breakdown.

A new member pays for a pack in any currency. The paid amount and the
platform fees are normalized to USD, and the net amount must cover the
pack price for the chosen duration. The USD amount is rounded to whole
units before the fees are subtracted.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from app.services.rate_service import CurrencyNormalizer

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
UNIT = Decimal("1")


class InsufficientPaymentError(Exception):
    """Raised when the net USD amount does not cover the pack cost."""

    def __init__(self, net_usd: Decimal, pack_cost: Decimal):
        self.net_usd = net_usd
        self.pack_cost = pack_cost
        super().__init__("Le montant payé est insuffisant pour couvrir le coût du pack")


@dataclass(frozen=True)
class RegistrationPayment:
    amount: Decimal
    fees: Decimal
    currency: str
    amount_usd: Decimal
    fees_usd: Decimal
    net_usd: Decimal
    pack_cost: Decimal


class RegistrationPaymentService:

    def __init__(self, normalizer: CurrencyNormalizer):
        self.normalizer = normalizer

    async def compute(
        self,
        amount: Decimal,
        fees: Decimal,
        pack_price: Decimal,
        duration_months: int,
        currency: str | None = None,
    ) -> RegistrationPayment:
        currency = (currency or self.normalizer.base_currency).upper()

        amount_usd = await self.normalizer.to_base(amount, currency)
        fees_usd = await self.normalizer.to_base(fees, currency)
        if currency != self.normalizer.base_currency:
            fees_usd = fees_usd.quantize(CENT, rounding=ROUND_HALF_UP)

        net_usd = amount_usd.quantize(UNIT, rounding=ROUND_HALF_UP) - fees_usd
        pack_cost = pack_price * duration_months

        if net_usd < pack_cost:
            logger.info(
                "Insufficient registration payment: %s %s -> net %s USD < %s USD",
                amount, currency, net_usd, pack_cost,
            )
            raise InsufficientPaymentError(net_usd, pack_cost)

        return RegistrationPayment(
            amount=amount,
            fees=fees,
            currency=currency,
            amount_usd=amount_usd.quantize(CENT, rounding=ROUND_HALF_UP),
            fees_usd=fees_usd,
            net_usd=net_usd,
            pack_cost=pack_cost,
        )
