"""
Registration payment endpoint.

Checks that a pack payment, once normalized to USD and net of fees,
covers the pack price for the requested duration. Nothing is persisted.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.api.deps import get_registration_service
from app.schemas.common import validation_errors
from app.schemas.registration import (
    RegistrationPaymentData,
    RegistrationPaymentRequest,
    RegistrationPaymentResponse,
)
from app.services.registration_service import (
    InsufficientPaymentError,
    RegistrationPaymentService,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/payment-breakdown", response_model=RegistrationPaymentResponse)
async def payment_breakdown(
    payload: dict[str, Any] = Body(...),
    service: RegistrationPaymentService = Depends(get_registration_service),
):
    """Normalize a registration payment to USD and check it covers the pack."""
    try:
        request = RegistrationPaymentRequest.model_validate(payload)
    except ValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": "Données de paiement invalides",
                "errors": validation_errors(exc),
            },
        )

    try:
        payment = await service.compute(
            amount=request.amount,
            fees=request.fees,
            pack_price=request.pack_price,
            duration_months=request.duration_months,
            currency=request.currency,
        )
    except InsufficientPaymentError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": str(exc)},
        )
    except Exception:
        logger.exception("Registration payment breakdown failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Erreur lors de la conversion de la devise, veuillez utiliser le $",
            },
        )

    return RegistrationPaymentResponse(
        data=RegistrationPaymentData(
            amount=payment.amount,
            fees=payment.fees,
            currency=payment.currency,
            amount_usd=payment.amount_usd,
            fees_usd=payment.fees_usd,
            net_usd=payment.net_usd,
            pack_cost=payment.pack_cost,
        )
    )
