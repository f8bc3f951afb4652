"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bizcalc.config.settings import get_settings
from bizcalc.config.logging_config import setup_logging
from bizcalc.repositories.sqlalchemy.database import init_db
from bizcalc.api.routers import (
    pricing_router,
    invoices_router,
    estimates_router,
    tax_reports_router,
)
from bizcalc.core.exceptions import AppError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()
    yield
    # Shutdown (nothing to clean up)


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Pricing, payment terms, markup and tax-lot calculations for business documents",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(pricing_router)
app.include_router(invoices_router)
app.include_router(estimates_router)
app.include_router(tax_reports_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status_code = 404 if exc.code == "NOT_FOUND" else 400
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
