"""API routers package."""

from bizcalc.api.routers.pricing import router as pricing_router
from bizcalc.api.routers.invoices import router as invoices_router
from bizcalc.api.routers.estimates import router as estimates_router
from bizcalc.api.routers.tax_reports import router as tax_reports_router

__all__ = [
    "pricing_router",
    "invoices_router",
    "estimates_router",
    "tax_reports_router",
]
