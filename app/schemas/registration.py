"""
Pydantic schemas for the registration payment breakdown.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from app.schemas.common import MAX_AMOUNT, JsonDecimal


class RegistrationPaymentRequest(BaseModel):
    amount: Decimal = Field(..., ge=0, le=MAX_AMOUNT, examples=[60250])
    fees: Decimal = Field(..., ge=0, le=MAX_AMOUNT, examples=[1205])
    currency: str | None = Field(None, max_length=3, examples=["XOF"])
    pack_price: Decimal = Field(..., ge=0, le=MAX_AMOUNT, examples=[50])
    duration_months: int = Field(..., ge=1, le=120, examples=[2])


class RegistrationPaymentData(BaseModel):
    amount: JsonDecimal
    fees: JsonDecimal
    currency: str
    amount_usd: JsonDecimal
    fees_usd: JsonDecimal
    net_usd: JsonDecimal
    pack_cost: JsonDecimal


class RegistrationPaymentResponse(BaseModel):
    success: bool = True
    data: RegistrationPaymentData
