"""
FeeSchedule model — one row per payment method / payment type pair.

Holds the percentages used for transfer and withdrawal fees, plus the
fixed minimum and optional cap applied to withdrawal fees. Rows are
written by back-office tooling; the fee pipeline only reads active ones.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Numeric,
    String,
    event,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, validates

from app.database import Base

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


class WithdrawalFeeExceedsAmountError(Exception):
    """Raised when a withdrawal fee would be larger than the withdrawal."""

    def __init__(self, amount: Decimal, fee: Decimal):
        self.amount = amount
        self.fee = fee
        super().__init__("Les frais de retrait dépassent le montant du retrait")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class FeeSchedule(Base):
    __tablename__ = "transaction_fees"
    __table_args__ = (
        CheckConstraint(
            "transfer_fee_percentage >= 0 AND transfer_fee_percentage <= 100",
            name="ck_transaction_fees_transfer_pct",
        ),
        CheckConstraint(
            "withdrawal_fee_percentage >= 0 AND withdrawal_fee_percentage <= 100",
            name="ck_transaction_fees_withdrawal_pct",
        ),
        CheckConstraint("fee_fixed >= 0", name="ck_transaction_fees_fee_fixed"),
        CheckConstraint(
            "fee_cap IS NULL OR fee_cap >= fee_fixed",
            name="ck_transaction_fees_fee_cap",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    payment_method: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    # NULL means the row applies to every type of the method
    payment_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    transfer_fee_percentage: Mapped[Decimal] = mapped_column(
        Numeric(precision=8, scale=4), default=Decimal("0")
    )
    withdrawal_fee_percentage: Mapped[Decimal] = mapped_column(
        Numeric(precision=8, scale=4), default=Decimal("0")
    )
    fee_fixed: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2), default=Decimal("0")
    )
    fee_cap: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=10, scale=2), nullable=True
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ------------------------------------------------------------------
    # Configuration validation
    # ------------------------------------------------------------------

    @validates("transfer_fee_percentage", "withdrawal_fee_percentage")
    def _validate_percentage(self, key, value):
        value = _to_decimal(value)
        if value < 0 or value > HUNDRED:
            raise ValueError(f"{key} must be between 0 and 100, got {value}")
        return value

    @validates("fee_fixed")
    def _validate_fee_fixed(self, key, value):
        value = _to_decimal(value)
        if value < 0:
            raise ValueError(f"fee_fixed must be non-negative, got {value}")
        if self.fee_cap is not None and value > self.fee_cap:
            raise ValueError("fee_fixed cannot be greater than fee_cap")
        return value

    @validates("fee_cap")
    def _validate_fee_cap(self, key, value):
        if value is None:
            return None
        value = _to_decimal(value)
        if value < 0:
            raise ValueError(f"fee_cap must be non-negative, got {value}")
        if self.fee_fixed is not None and value < self.fee_fixed:
            raise ValueError("fee_cap cannot be lower than fee_fixed")
        return value

    # ------------------------------------------------------------------
    # Fee calculation
    # ------------------------------------------------------------------

    def calculate_transfer_fee(self, amount: Decimal) -> Decimal:
        """Fee added on top of a transfer: ``amount * pct / 100``, to the cent."""
        fee = amount * self.transfer_fee_percentage / HUNDRED
        return fee.quantize(CENT, rounding=ROUND_HALF_UP)

    def calculate_withdrawal_fee(self, amount: Decimal) -> Decimal:
        """
        Fee deducted from a withdrawal.

        The percentage fee is raised to ``fee_fixed`` and lowered to
        ``fee_cap`` (when set), then rounded to the cent. A fee larger than
        the withdrawal means the schedule does not fit this amount and
        raises WithdrawalFeeExceedsAmountError rather than being clamped.
        """
        fee = amount * self.withdrawal_fee_percentage / HUNDRED
        if fee < self.fee_fixed:
            fee = self.fee_fixed
        if self.fee_cap is not None and fee > self.fee_cap:
            fee = self.fee_cap
        fee = fee.quantize(CENT, rounding=ROUND_HALF_UP)

        if fee > amount:
            raise WithdrawalFeeExceedsAmountError(amount, fee)
        return fee

    def __repr__(self) -> str:
        return (
            f"<FeeSchedule {self.payment_method}/{self.payment_type or '*'} "
            f"transfer={self.transfer_fee_percentage}% "
            f"withdrawal={self.withdrawal_fee_percentage}% "
            f"active={self.is_active}>"
        )


# ---------------------------------------------------------------------------
# Auto-set Python-side defaults on construction
# ---------------------------------------------------------------------------


@event.listens_for(FeeSchedule, "init")
def _set_defaults(target, args, kwargs):
    if "id" not in kwargs:
        target.id = uuid.uuid4()
    if "transfer_fee_percentage" not in kwargs:
        target.transfer_fee_percentage = Decimal("0")
    if "withdrawal_fee_percentage" not in kwargs:
        target.withdrawal_fee_percentage = Decimal("0")
    if "fee_fixed" not in kwargs:
        target.fee_fixed = Decimal("0")
    if "is_active" not in kwargs:
        target.is_active = True
    if "created_at" not in kwargs:
        target.created_at = datetime.now(timezone.utc)
    if "updated_at" not in kwargs:
        target.updated_at = datetime.now(timezone.utc)
