"""Product search and monthly sales reports.

This module provides the ``/product`` endpoints: faceted search, monthly
totals, a price histogram and a category distribution.
"""

from app.features.products.routes import router
from app.features.products.schemas import (
    CategoryCount,
    PriceRangeResponse,
    ProductResponse,
    SaleStatistics,
)
from app.features.products.service import PRICE_BANDS, ProductService

__all__ = [
    "PRICE_BANDS",
    "CategoryCount",
    "PriceRangeResponse",
    "ProductResponse",
    "ProductService",
    "SaleStatistics",
    "router",
]
