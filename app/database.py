"""
Async SQLAlchemy setup for the fee schedule database (PostgreSQL/asyncpg).

The fee pipeline only reads from ``transaction_fees``; schedules are
maintained by back-office tooling and loaded with ``scripts/seed_data.py``
in development.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_size=settings.DATABASE_POOL_SIZE,
    echo=settings.DEBUG,
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """Declarative base for ORM models."""
    pass


async def get_db() -> AsyncSession:
    """FastAPI dependency yielding a request-scoped session."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
