"""
Solifin Payments — FastAPI application entry point.

Configures logging, middleware, and registers the fee, currency and
registration payment routers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api import currency, fees, registration

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    from app.database import engine

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Transaction fees and currency normalization for the Solifin membership platform.",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers ---
app.include_router(fees.router, prefix="/api/v1/transaction-fees", tags=["Transaction fees"])
app.include_router(currency.router, prefix="/api/v1/currency", tags=["Currency"])
app.include_router(registration.router, prefix="/api/v1/registration", tags=["Registration"])


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": "0.1.0",
    }
