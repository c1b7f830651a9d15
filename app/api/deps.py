"""
Reusable FastAPI dependencies wiring services to their collaborators.

Dependencies:
  - get_fee_schedule_store   — FeeScheduleStore bound to the request session
  - get_fee_pipeline         — FeePipeline over that store
  - get_currency_converter   — direct converter with the direct fallback table
  - get_currency_normalizer  — USD normalizer with the estimate table
  - get_registration_service — registration breakdown over the normalizer

Each request builds its own services; nothing is shared or cached.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.services.fee_service import FeePipeline, FeeScheduleStore
from app.services.rate_service import (
    CurrencyConverter,
    CurrencyNormalizer,
    CurrencyRateSource,
)
from app.services.registration_service import RegistrationPaymentService


async def get_fee_schedule_store(db: AsyncSession = Depends(get_db)) -> FeeScheduleStore:
    return FeeScheduleStore(db)


async def get_fee_pipeline(
    store: FeeScheduleStore = Depends(get_fee_schedule_store),
) -> FeePipeline:
    return FeePipeline(store)


async def get_currency_converter() -> CurrencyConverter:
    return CurrencyConverter(
        CurrencyRateSource(fallback_rates=settings.FX_FALLBACK_RATES)
    )


async def get_currency_normalizer() -> CurrencyNormalizer:
    # No direct fallback here: a failed USD fetch goes to the estimate table
    return CurrencyNormalizer(
        CurrencyRateSource(),
        estimate_rates=settings.FX_USD_ESTIMATE_RATES,
        base_currency=settings.BASE_CURRENCY,
    )


async def get_registration_service(
    normalizer: CurrencyNormalizer = Depends(get_currency_normalizer),
) -> RegistrationPaymentService:
    return RegistrationPaymentService(normalizer)
