"""SQLAlchemy ORM models for Solifin Payments."""

from app.models.fee_schedule import FeeSchedule, WithdrawalFeeExceedsAmountError

__all__ = [
    "FeeSchedule", "WithdrawalFeeExceedsAmountError",
]
