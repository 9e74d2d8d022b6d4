"""API routes for product search and monthly sales reports.

Mounted under ``/product``. All endpoints are read-only.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import get_logger
from app.features.products.params import (
    ReportPeriod,
    category_month,
    histogram_period,
    search_month,
    stats_period,
)
from app.features.products.schemas import (
    CategoryCount,
    PriceRangeResponse,
    ProductResponse,
    SaleStatistics,
)
from app.features.products.service import ProductService

logger = get_logger(__name__)

router = APIRouter(prefix="/product", tags=["product"])


# =============================================================================
# Search
# =============================================================================


@router.get(
    "/getData",
    response_model=list[ProductResponse],
    summary="Search products",
    description="""
Search product sale records by text and/or sale month.

**Filters** (both optional, AND-combined):
- `search`: case-insensitive substring of title, description or category.
  A numeric term also matches products priced at or below it.
- `month`: sales within that month (1-12) of the configured report year.

**Errors**:
- 400 if `month` is not an integer between 1 and 12
- 404 if no product matches

**Example**: `GET /product/getData?search=shirt&month=3`
""",
)
async def get_data(
    search: str | None = Query(
        None,
        description="Text matched against title, description and category.",
    ),
    month: int | None = Depends(search_month),
    db: AsyncSession = Depends(get_db),
) -> list[ProductResponse]:
    """Search products.

    Args:
        search: Free-text search term (optional).
        month: Sale month filter (optional).
        db: Database session.

    Returns:
        Matching products.
    """
    service = ProductService()
    return await service.search_products(db=db, search=search, month=month)


# =============================================================================
# Reports
# =============================================================================


@router.get(
    "/stats",
    response_model=SaleStatistics,
    summary="Monthly sales totals",
    description="""
Total sale amount over sold items, and counts of sold and unsold items,
for records sold in the given month and year. Values are 0 when nothing
matches.

**Example**: `GET /product/stats?month=3&year=2021`
""",
)
async def get_stats(
    period: ReportPeriod = Depends(stats_period),
    db: AsyncSession = Depends(get_db),
) -> SaleStatistics:
    """Compute monthly sales statistics.

    Args:
        period: Validated month and year.
        db: Database session.

    Returns:
        Monthly totals.
    """
    service = ProductService()
    return await service.compute_statistics(db=db, month=period.month, year=period.year)


@router.get(
    "/price",
    response_model=PriceRangeResponse,
    summary="Monthly price histogram",
    description="""
Number of items per price band for the given month and year.

Bands: `0-100`, `101-200`, ..., `801-900`, `901-above`. Every band is
upper-inclusive; all ten are always returned.

**Example**: `GET /product/price?month=3&year=2021`
""",
)
async def get_price_ranges(
    period: ReportPeriod = Depends(histogram_period),
    db: AsyncSession = Depends(get_db),
) -> PriceRangeResponse:
    """Compute the monthly price histogram.

    Args:
        period: Validated month and year.
        db: Database session.

    Returns:
        Item count per price band.
    """
    service = ProductService()
    return await service.compute_price_ranges(db=db, month=period.month, year=period.year)


@router.get(
    "/category",
    response_model=list[CategoryCount],
    summary="Monthly category distribution",
    description="""
Number of items per category for the given month, across all years.
Always returns the configured categories, with 0 for those without sales.

**Example**: `GET /product/category?month=3`
""",
)
async def get_category_distribution(
    month: int = Depends(category_month),
    db: AsyncSession = Depends(get_db),
) -> list[CategoryCount]:
    """Compute the monthly category distribution.

    Args:
        month: Validated month.
        db: Database session.

    Returns:
        Item count per category.
    """
    service = ProductService()
    return await service.compute_category_distribution(db=db, month=month)
