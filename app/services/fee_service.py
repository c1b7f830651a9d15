"""
Fee pipeline — validate, resolve the fee schedule, compute the fee.

Transfers add the fee on top of the amount (``total = amount + fee``).
Withdrawals deduct it (``total = amount - fee``, the net paid out).
The literal payment method ``"wallet"`` is an alias for
``"solifin-wallet"`` on transfers only.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fee_schedule import FeeSchedule
from app.schemas.common import MAX_AMOUNT

logger = logging.getLogger(__name__)

WALLET_ALIAS = "wallet"
SOLIFIN_WALLET = "solifin-wallet"

PARAMETERS_REQUIRED = "Les paramètres payment_method et amount sont requis"

TRANSFER = "transfer"
WITHDRAWAL = "withdrawal"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FeePipelineError(Exception):
    """Base class for fee pipeline failures shown to the caller."""
    pass


class FeeValidationError(FeePipelineError):
    """Missing or malformed request parameters."""
    pass


class FeeScheduleNotFoundError(FeePipelineError):
    """No active fee schedule matches the payment method/type."""

    def __init__(self, payment_method: str, payment_type: str | None = None):
        self.payment_method = payment_method
        self.payment_type = payment_type
        super().__init__("Aucun frais de transaction trouvé pour ce moyen de paiement")


# ---------------------------------------------------------------------------
# Input parsing
# ---------------------------------------------------------------------------


def parse_amount(value) -> Decimal:
    """
    Parse a request amount into a non-negative Decimal.

    Accepts numbers and numeric strings. Anything else (missing, blank,
    booleans, NaN/Infinity, negative values, amounts above MAX_AMOUNT)
    raises FeeValidationError.
    """
    if value is None or isinstance(value, bool):
        raise FeeValidationError("Le montant est requis")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise FeeValidationError("Le montant est requis")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise FeeValidationError("Le montant doit être un nombre valide")
    if not amount.is_finite():
        raise FeeValidationError("Le montant doit être un nombre valide")
    if amount < 0:
        raise FeeValidationError("Le montant ne peut pas être négatif")
    if amount > MAX_AMOUNT:
        raise FeeValidationError("Le montant dépasse la limite autorisée")
    return amount


def normalize_payment_method(payment_method: str) -> str:
    """Map the ``wallet`` shorthand to the platform wallet method."""
    if payment_method == WALLET_ALIAS:
        return SOLIFIN_WALLET
    return payment_method


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class FeeScheduleStore:
    """Read-only access to active fee schedules."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_active_fee(
        self, payment_method: str, payment_type: str | None = None,
    ) -> FeeSchedule | None:
        query = select(FeeSchedule).where(
            FeeSchedule.payment_method == payment_method,
            FeeSchedule.is_active.is_(True),
        )
        if payment_type:
            query = query.where(FeeSchedule.payment_type == payment_type)
        query = query.order_by(FeeSchedule.created_at).limit(1)

        result = await self.db.execute(query)
        return result.scalars().first()


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FeeCalculationResult:
    kind: str
    amount: Decimal
    fee: Decimal
    percentage: Decimal
    total: Decimal
    payment_method: str
    payment_type: str | None


class FeePipeline:
    """Validate -> resolve schedule -> compute fee -> result."""

    def __init__(self, store: FeeScheduleStore):
        self.store = store

    async def calculate_transfer_fee(
        self,
        payment_method: str | None,
        amount,
        payment_type: str | None = None,
        currency: str | None = None,
    ) -> FeeCalculationResult:
        """Fee added on top of a transfer. *currency* is accepted but unused."""
        method, value = self._validate(payment_method, amount)
        method = normalize_payment_method(method)
        schedule = await self._resolve(method, payment_type)

        fee = schedule.calculate_transfer_fee(value)
        logger.info(
            "Transfer fee %s on %s via %s/%s (%s%%)",
            fee, value, method, payment_type, schedule.transfer_fee_percentage,
        )
        return FeeCalculationResult(
            kind=TRANSFER,
            amount=value,
            fee=fee,
            percentage=schedule.transfer_fee_percentage,
            total=value + fee,
            payment_method=method,
            payment_type=payment_type,
        )

    async def calculate_withdrawal_fee(
        self,
        payment_method: str | None,
        amount,
        payment_type: str | None = None,
        currency: str | None = None,
    ) -> FeeCalculationResult:
        """Fee deducted from a withdrawal; raises WithdrawalFeeExceedsAmountError."""
        method, value = self._validate(payment_method, amount)
        schedule = await self._resolve(method, payment_type)

        fee = schedule.calculate_withdrawal_fee(value)
        logger.info(
            "Withdrawal fee %s on %s via %s/%s (%s%%)",
            fee, value, method, payment_type, schedule.withdrawal_fee_percentage,
        )
        return FeeCalculationResult(
            kind=WITHDRAWAL,
            amount=value,
            fee=fee,
            percentage=schedule.withdrawal_fee_percentage,
            total=value - fee,
            payment_method=method,
            payment_type=payment_type,
        )

    # --- helpers ---

    @staticmethod
    def _validate(payment_method: str | None, amount) -> tuple[str, Decimal]:
        if not payment_method or not payment_method.strip():
            raise FeeValidationError(PARAMETERS_REQUIRED)
        if amount is None or (isinstance(amount, str) and not amount.strip()):
            raise FeeValidationError(PARAMETERS_REQUIRED)
        return payment_method.strip(), parse_amount(amount)

    async def _resolve(self, payment_method: str, payment_type: str | None) -> FeeSchedule:
        schedule = await self.store.find_active_fee(payment_method, payment_type)
        if schedule is None:
            logger.info("No active fee schedule for %s/%s", payment_method, payment_type)
            raise FeeScheduleNotFoundError(payment_method, payment_type)
        return schedule
