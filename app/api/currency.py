"""
Currency conversion endpoint.

Converts an amount between two currencies using the live rate table of
the source currency, or the direct fallback table when the rate service
is unreachable. A pair missing from both is a 400, never a silent 1:1.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.api.deps import get_currency_converter
from app.schemas.common import validation_errors
from app.schemas.currency import ConvertRequest, ConvertResponse
from app.services.rate_service import CurrencyConverter, RateUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/convert", response_model=ConvertResponse)
async def convert(
    payload: dict[str, Any] = Body(...),
    converter: CurrencyConverter = Depends(get_currency_converter),
):
    """
    Convert ``amount`` from ``from`` to ``to``.

    Same-currency requests return the amount unchanged with ``rate = 1``
    and make no external call. Converted amounts are rounded to 2 places.
    """
    try:
        request = ConvertRequest.model_validate(payload)
    except ValidationError as exc:
        logger.info("Invalid conversion request: %s", exc.error_count())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": "Données invalides pour la conversion",
                "errors": validation_errors(exc),
            },
        )

    try:
        result = await converter.convert(
            request.amount, request.from_currency, request.to_currency,
        )
    except RateUnavailableError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": str(exc)},
        )
    except Exception:
        logger.exception("Currency conversion failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Erreur lors de la conversion de devise"},
        )

    return ConvertResponse(
        convertedAmount=result.converted_amount,
        from_currency=result.from_currency,
        to_currency=result.to_currency,
        rate=result.rate,
    )
