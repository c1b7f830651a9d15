"""
Transaction fee endpoints.

Transfer and withdrawal fee quotes for a payment method. Transfers answer
with a ``success`` envelope, withdrawals with ``status``/``data``; both
shapes are relied on by existing clients.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.api.deps import get_fee_pipeline
from app.models.fee_schedule import WithdrawalFeeExceedsAmountError
from app.schemas.common import validation_errors
from app.schemas.fee import (
    FeeCalculationRequest,
    TransferFeeResponse,
    WithdrawalFeeData,
    WithdrawalFeeResponse,
)
from app.services.fee_service import (
    FeePipeline,
    FeeScheduleNotFoundError,
    FeeValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

GENERIC_ERROR = "Erreur lors du calcul des frais de transaction"
INVALID_REQUEST = "Paramètres de calcul des frais invalides"


def _transfer_error(status_code: int, message: str, errors: dict | None = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def _withdrawal_error(status_code: int, message: str, errors: dict | None = None) -> JSONResponse:
    content = {"status": "error", "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


# ---------------------------------------------------------------------------
# POST /transfer
# ---------------------------------------------------------------------------


@router.post("/transfer", response_model=TransferFeeResponse)
async def calculate_transfer_fee(
    payload: dict[str, Any] = Body(...),
    pipeline: FeePipeline = Depends(get_fee_pipeline),
):
    """
    Quote the fee added on top of a transfer.

    ``payment_method="wallet"`` is treated as ``"solifin-wallet"``.
    Returns ``total = amount + fee``.
    """
    try:
        request = FeeCalculationRequest.model_validate(payload)
    except ValidationError as exc:
        return _transfer_error(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST, validation_errors(exc))

    try:
        result = await pipeline.calculate_transfer_fee(
            request.payment_method,
            request.amount,
            payment_type=request.payment_type,
            currency=request.currency,
        )
    except FeeValidationError as exc:
        return _transfer_error(status.HTTP_400_BAD_REQUEST, str(exc))
    except FeeScheduleNotFoundError as exc:
        return _transfer_error(status.HTTP_404_NOT_FOUND, str(exc))
    except Exception:
        logger.exception("Transfer fee calculation failed")
        return _transfer_error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)

    return TransferFeeResponse(
        fee=result.fee,
        percentage=result.percentage,
        total=result.total,
        payment_method=result.payment_method,
        payment_type=result.payment_type,
    )


# ---------------------------------------------------------------------------
# POST /withdrawal
# ---------------------------------------------------------------------------


@router.post("/withdrawal", response_model=WithdrawalFeeResponse)
async def calculate_withdrawal_fee(
    payload: dict[str, Any] = Body(...),
    pipeline: FeePipeline = Depends(get_fee_pipeline),
):
    """
    Quote the fee deducted from a withdrawal.

    ``data.total`` is the net amount paid out (``amount - fee``).
    No payment method aliasing is applied.
    """
    try:
        request = FeeCalculationRequest.model_validate(payload)
    except ValidationError as exc:
        return _withdrawal_error(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST, validation_errors(exc))

    try:
        result = await pipeline.calculate_withdrawal_fee(
            request.payment_method,
            request.amount,
            payment_type=request.payment_type,
            currency=request.currency,
        )
    except FeeValidationError as exc:
        return _withdrawal_error(status.HTTP_400_BAD_REQUEST, str(exc))
    except FeeScheduleNotFoundError as exc:
        return _withdrawal_error(status.HTTP_404_NOT_FOUND, str(exc))
    except WithdrawalFeeExceedsAmountError as exc:
        logger.warning(
            "Withdrawal fee %s exceeds amount %s for %s/%s",
            exc.fee, exc.amount, request.payment_method, request.payment_type,
        )
        return _withdrawal_error(422, str(exc))
    except Exception:
        logger.exception("Withdrawal fee calculation failed")
        return _withdrawal_error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)

    return WithdrawalFeeResponse(
        data=WithdrawalFeeData(
            amount=result.amount,
            percentage=result.percentage,
            fee=result.fee,
            total=result.total,
            payment_method=result.payment_method,
            payment_type=result.payment_type,
        )
    )
