"""
Fee schedule seeder — populates transaction_fees for development.

Usage:
    python scripts/seed_data.py

Creates one active schedule per payment method/type used by the web
client (cards, mobile money, the platform wallet) plus an inactive
legacy row, so lookups, aliasing and the inactive filter can all be
exercised locally.

Idempotent: skips (payment_method, payment_type) pairs that already exist.
"""

import asyncio
from decimal import Decimal

from sqlalchemy import select

from app.database import async_session
from app.models.fee_schedule import FeeSchedule

SAMPLE_SCHEDULES: list[dict] = [
    # --- Cards ---------------------------------------------------------------
    {
        "payment_method": "card",
        "payment_type": None,
        "transfer_fee_percentage": Decimal("5.00"),
        "withdrawal_fee_percentage": Decimal("3.50"),
        "fee_fixed": Decimal("0.50"),
    },
    {
        "payment_method": "visa",
        "payment_type": "credit-card",
        "transfer_fee_percentage": Decimal("3.00"),
        "withdrawal_fee_percentage": Decimal("3.00"),
        "fee_fixed": Decimal("0.30"),
        "fee_cap": Decimal("25.00"),
    },
    # --- Mobile money -------------------------------------------------------
    {
        "payment_method": "m-pesa",
        "payment_type": "mobile-money",
        "transfer_fee_percentage": Decimal("2.50"),
        "withdrawal_fee_percentage": Decimal("2.00"),
    },
    {
        "payment_method": "orange-money",
        "payment_type": "mobile-money",
        "transfer_fee_percentage": Decimal("2.50"),
        "withdrawal_fee_percentage": Decimal("2.50"),
    },
    # --- Platform wallet (``wallet`` is an alias on transfers) ---------------
    {
        "payment_method": "solifin-wallet",
        "payment_type": None,
        "transfer_fee_percentage": Decimal("0"),
        "withdrawal_fee_percentage": Decimal("1.00"),
    },
    # --- Retired ------------------------------------------------------------
    {
        "payment_method": "paypal",
        "payment_type": "e-wallet",
        "transfer_fee_percentage": Decimal("4.40"),
        "withdrawal_fee_percentage": Decimal("4.40"),
        "is_active": False,
    },
]


async def seed() -> None:
    """Insert sample fee schedules. Safe to run multiple times."""

    async with async_session() as session:
        rows = await session.execute(
            select(FeeSchedule.payment_method, FeeSchedule.payment_type)
        )
        existing = {tuple(row) for row in rows.all()}

        created: list[FeeSchedule] = []
        for data in SAMPLE_SCHEDULES:
            key = (data["payment_method"], data["payment_type"])
            if key in existing:
                continue
            schedule = FeeSchedule(**data)
            session.add(schedule)
            created.append(schedule)

        await session.commit()
        print(f"  Fee schedules: {len(created)} new, {len(SAMPLE_SCHEDULES) - len(created)} existing")
        _print_summary(created)


def _print_summary(schedules: list[FeeSchedule]) -> None:
    """Print a readable summary of seeded schedules."""
    if not schedules:
        return
    print("\n  Seed complete!")
    for s in schedules:
        cap = f", cap {s.fee_cap}" if s.fee_cap is not None else ""
        state = "active" if s.is_active else "inactive"
        print(
            f"    {s.payment_method}/{s.payment_type or '*'}: "
            f"transfer {s.transfer_fee_percentage}%, "
            f"withdrawal {s.withdrawal_fee_percentage}% "
            f"(min {s.fee_fixed}{cap}) [{state}]"
        )


if __name__ == "__main__":
    asyncio.run(seed())
