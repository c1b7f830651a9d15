"""
Pydantic schemas for direct currency conversion.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from app.schemas.common import MAX_AMOUNT, JsonDecimal


class ConvertRequest(BaseModel):
    amount: Decimal = Field(..., ge=0, le=MAX_AMOUNT, examples=[100])
    from_currency: str = Field(..., alias="from", min_length=1, max_length=3, examples=["USD"])
    to_currency: str = Field(..., alias="to", min_length=1, max_length=3, examples=["XOF"])


class ConvertResponse(BaseModel):
    """Camel-cased ``convertedAmount`` is part of the public contract."""
    success: bool = True
    convertedAmount: JsonDecimal
    from_currency: str = Field(..., serialization_alias="from")
    to_currency: str = Field(..., serialization_alias="to")
    rate: JsonDecimal
