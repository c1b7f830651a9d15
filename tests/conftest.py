"""
Shared test fixtures for Solifin Payments.

Provides an async test client, an in-memory fee schedule store, a
scriptable rate provider, and a mocked database session.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_fee_schedule_store
from app.database import get_db
from app.models.fee_schedule import FeeSchedule
from app.services import rate_service
from tests.fakes import FakeFeeScheduleStore, FakeRateProvider


# --- Rate provider ---


@pytest.fixture(autouse=True)
def reset_rate_provider():
    """Never let a provider override leak between tests."""
    yield
    rate_service.set_rate_provider(None)


@pytest.fixture
def rate_provider():
    """Install a FakeRateProvider (empty, so every fetch fails) for the test."""
    provider = FakeRateProvider()
    rate_service.set_rate_provider(provider)
    return provider


# --- Fee schedules ---


def _make_schedule(**overrides) -> FeeSchedule:
    """Create a FeeSchedule instance with test defaults via the normal constructor."""
    defaults = {
        "payment_method": "card",
        "transfer_fee_percentage": Decimal("5"),
        "withdrawal_fee_percentage": Decimal("2"),
    }
    defaults.update(overrides)
    return FeeSchedule(**defaults)


@pytest.fixture
def make_schedule():
    """Factory fixture for creating FeeSchedule instances."""
    return _make_schedule


@pytest.fixture
def fee_store(make_schedule):
    """Store preloaded with card, wallet, mobile money and an inactive row."""
    return FakeFeeScheduleStore([
        make_schedule(payment_method="card"),
        make_schedule(
            payment_method="solifin-wallet",
            transfer_fee_percentage=Decimal("1.5"),
            withdrawal_fee_percentage=Decimal("1"),
        ),
        make_schedule(
            payment_method="m-pesa",
            payment_type="mobile-money",
            transfer_fee_percentage=Decimal("2.5"),
            withdrawal_fee_percentage=Decimal("2.5"),
            fee_fixed=Decimal("1.00"),
            fee_cap=Decimal("10.00"),
        ),
        make_schedule(
            payment_method="paypal",
            transfer_fee_percentage=Decimal("4.4"),
            is_active=False,
        ),
    ])


# --- Mock Database Session ---


@pytest.fixture
def mock_db():
    """AsyncMock database session whose execute() finds nothing by default."""
    db = AsyncMock()

    mock_result = MagicMock()
    mock_result.scalars.return_value.first.return_value = None
    db.execute = AsyncMock(return_value=mock_result)
    db.commit = AsyncMock()
    db.rollback = AsyncMock()

    return db


# --- Dependency Override Helpers ---


@pytest_asyncio.fixture
async def client(mock_db, fee_store):
    """
    Async HTTP test client with get_db and the fee schedule store
    overridden to use test doubles.
    """
    from app.main import app

    async def override_get_db():
        yield mock_db

    async def override_get_store():
        return fee_store

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_fee_schedule_store] = override_get_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
