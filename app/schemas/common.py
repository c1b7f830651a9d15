"""
Shared schema types.

Monetary values are Decimal internally and JSON numbers on the wire,
which is what the web and mobile clients expect.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer, ValidationError

# Upper bound for request amounts; keeps every cent-quantized result
# within the default 28-digit decimal precision.
MAX_AMOUNT = Decimal("1000000000000000")

JsonDecimal = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


def validation_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by field name: ``{"amount": ["..."]}``."""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        errors.setdefault(field, []).append(err["msg"])
    return errors
