"""
Pydantic schemas for transfer and withdrawal fee calculation.

The two endpoints keep different envelopes (``success`` for transfers,
``status``/``data`` for withdrawals) because existing clients read them.
"""

from typing import Any

from pydantic import BaseModel, Field

from app.schemas.common import JsonDecimal


class FeeCalculationRequest(BaseModel):
    """Fee request; ``amount`` is parsed by the fee pipeline, not here."""
    payment_method: str | None = Field(None, examples=["card"])
    payment_type: str | None = Field(None, examples=["credit-card"])
    amount: Any = Field(None, examples=[100])
    currency: str | None = Field(None, max_length=3, examples=["USD"])


class TransferFeeResponse(BaseModel):
    success: bool = True
    fee: JsonDecimal
    percentage: JsonDecimal
    total: JsonDecimal
    payment_method: str
    payment_type: str | None


class WithdrawalFeeData(BaseModel):
    amount: JsonDecimal
    percentage: JsonDecimal
    fee: JsonDecimal
    total: JsonDecimal
    payment_method: str
    payment_type: str | None


class WithdrawalFeeResponse(BaseModel):
    status: str = "success"
    data: WithdrawalFeeData
