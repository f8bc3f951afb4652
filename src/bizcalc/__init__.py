"""Pricing, payment-term, markup and tax-lot calculations for business documents."""

__version__ = "0.1.0"
