"""
Naija Tax Calculator - FastAPI Application Entry Point

This is the main entry point for the FastAPI application.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import init_db, close_db, get_async_session
from app.routers import tax, calculations
from app.services.tax_calculators import NIGERIA_2026_RATES
from app.utils.error_handling import setup_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Tax year: {NIGERIA_2026_RATES.tax_year}")

    # Create tables in development; other environments provision the schema
    if settings.is_development:
        await init_db()
        logger.info("Database tables initialized")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await close_db()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Nigerian tax calculator for the 2026 Tax Reform: PIT, CIT, CGT and VAT",
    version="0.1.0",
    docs_url="/api/docs" if not settings.is_production else None,
    redoc_url="/api/redoc" if not settings.is_production else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Standardized error responses
setup_exception_handlers(app)


# ===========================================
# API ROUTES
# ===========================================

@app.get("/api")
async def api_info():
    """API information endpoint."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
        "environment": settings.app_env,
        "tax_year": NIGERIA_2026_RATES.tax_year,
        "api_docs": "/api/docs" if not settings.is_production else "disabled",
        "endpoints": {
            "tax": f"/api/{settings.api_version}/tax",
            "calculations": f"/api/{settings.api_version}/users/{{owner_id}}/calculations",
        },
    }


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_async_session)):
    """Health check endpoint."""
    await db.execute(text("SELECT 1"))
    return {
        "status": "healthy",
        "database": "connected",
    }


# Tax calculators
app.include_router(tax.router, prefix=f"/api/{settings.api_version}/tax", tags=["Tax Calculators"])

# Calculation history
app.include_router(
    calculations.router,
    prefix=f"/api/{settings.api_version}/users",
    tags=["Calculation History"],
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
