"""Service layer for product search and sales reports.

Every report runs as a single aggregate statement: the sale date string is
normalized to a UTC timestamp, rows are matched on month (and year), then
grouped into the report's fixed shape. Missing buckets are filled with zero
here, after the query.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, DateTime, Select, and_, cast, extract, func, or_, select
from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import DatabaseError, NotFoundError
from app.core.logging import get_logger
from app.features.products.models import Product
from app.features.products.schemas import (
    CategoryCount,
    PriceRangeResponse,
    ProductResponse,
    SaleStatistics,
)

logger = get_logger(__name__)


# =============================================================================
# Price bands
# =============================================================================


@dataclass(frozen=True)
class PriceBand:
    """A histogram band: ``lower < price <= upper``.

    ``lower_inclusive`` turns the lower bound into ``>=``; ``upper=None``
    leaves the band open-ended.
    """

    label: str
    lower: int
    upper: int | None = None
    lower_inclusive: bool = False

    def condition(self, price: ColumnElement[Any]) -> ColumnElement[bool]:
        """SQL predicate selecting prices inside the band."""
        lower = price >= self.lower if self.lower_inclusive else price > self.lower
        if self.upper is None:
            return lower
        return and_(lower, price <= self.upper)


PRICE_BANDS: tuple[PriceBand, ...] = (
    PriceBand("0-100", 0, 100, lower_inclusive=True),
    *(PriceBand(f"{low + 1}-{low + 100}", low, low + 100) for low in range(100, 900, 100)),
    PriceBand("901-above", 900),
)


# =============================================================================
# Query helpers
# =============================================================================


def sale_timestamp() -> ColumnElement[datetime]:
    """Sale date string cast to a UTC timestamp."""
    return func.timezone(
        "UTC",
        cast(Product.date_of_sale, DateTime(timezone=True)),
        type_=DateTime(),
    )


def in_month(month: int, year: int | None = None) -> ColumnElement[bool]:
    """Match sales in ``month``, optionally restricted to ``year``."""
    sold_at = sale_timestamp()
    clauses = [extract("month", sold_at) == month]
    if year is not None:
        clauses.append(extract("year", sold_at) == year)
    return and_(*clauses)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` datetime range covering one month."""
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def parse_price_term(term: str) -> float | None:
    """Read a search term as a price threshold, if it is a finite number."""
    if "_" in term:
        return None
    try:
        value = float(term)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def build_search_filter(search: str | None) -> ColumnElement[bool] | None:
    """Build the OR-combined text (and price) filter for a search term.

    Args:
        search: Free-text term; blank terms apply no filter.

    Returns:
        Filter expression, or None when there is nothing to filter on.
    """
    if search is None or not search.strip():
        return None

    clauses: list[ColumnElement[bool]] = [
        Product.title.icontains(search, autoescape=True),
        Product.description.icontains(search, autoescape=True),
        Product.category.icontains(search, autoescape=True),
    ]

    threshold = parse_price_term(search)
    if threshold is not None:
        clauses.append(Product.price <= threshold)

    return or_(*clauses)


def _as_int(row: Any, name: str) -> int:
    return int(getattr(row, name, None) or 0)


# =============================================================================
# Service
# =============================================================================


class ProductService:
    """Searches product records and computes monthly sales reports.

    All methods are async and use SQLAlchemy 2.0 style queries. Database
    failures are re-raised as ``DatabaseError``.
    """

    def __init__(self) -> None:
        """Initialize product service."""
        self.settings = get_settings()

    async def _execute(
        self,
        db: AsyncSession,
        stmt: Select[Any],
        failure_message: str,
    ) -> Result[Any]:
        try:
            return await db.execute(stmt)
        except (SQLAlchemyError, OSError) as exc:
            raise DatabaseError(
                message=failure_message,
                details={"error": str(exc)},
            ) from exc

    async def search_products(
        self,
        db: AsyncSession,
        search: str | None = None,
        month: int | None = None,
    ) -> list[ProductResponse]:
        """Find products matching a search term and/or sale month.

        Args:
            db: Database session.
            search: Substring matched against title, description and category.
                Numeric terms also match products priced at or below them.
            month: Restrict to sales in this month of ``settings.search_year``.

        Returns:
            Matching products ordered by id.

        Raises:
            NotFoundError: If nothing matches.
        """
        stmt = select(Product)

        search_filter = build_search_filter(search)
        if search_filter is not None:
            stmt = stmt.where(search_filter)

        if month is not None:
            start, end = month_bounds(self.settings.search_year, month)
            sold_at = sale_timestamp()
            stmt = stmt.where(sold_at >= start, sold_at < end)

        stmt = stmt.order_by(Product.id)

        result = await self._execute(db, stmt, "Failed to fetch products.")
        products = result.scalars().all()

        logger.info(
            "products.search_completed",
            search=search,
            month=month,
            year=self.settings.search_year if month is not None else None,
            results=len(products),
        )

        if not products:
            raise NotFoundError(
                message="No products found",
                details={"search": search, "month": month},
            )

        return [ProductResponse.model_validate(product) for product in products]

    async def compute_statistics(
        self,
        db: AsyncSession,
        month: int,
        year: int,
    ) -> SaleStatistics:
        """Total sale amount and sold/unsold counts for a month.

        Args:
            db: Database session.
            month: Month (1-12).
            year: Year.

        Returns:
            Zero-filled monthly statistics.
        """
        is_sold = Product.sold.is_(True)
        stmt = select(
            func.coalesce(func.sum(Product.price).filter(is_sold), 0).label("total_sale_amount"),
            func.count().filter(is_sold).label("total_sold_items"),
            func.count().filter(Product.sold.is_(False)).label("total_not_sold_items"),
        ).where(in_month(month, year))

        result = await self._execute(db, stmt, "Failed to fetch monthly statistics.")
        row = result.one_or_none()

        total_sale_amount = float(getattr(row, "total_sale_amount", None) or 0)
        stats = SaleStatistics(
            month=month,
            year=year,
            total_sale_amount=round(total_sale_amount, 2),
            total_sold_items=_as_int(row, "total_sold_items"),
            total_not_sold_items=_as_int(row, "total_not_sold_items"),
        )

        logger.info(
            "products.stats_computed",
            month=month,
            year=year,
            total_sale_amount=stats.total_sale_amount,
            total_sold_items=stats.total_sold_items,
            total_not_sold_items=stats.total_not_sold_items,
        )

        return stats

    async def compute_price_ranges(
        self,
        db: AsyncSession,
        month: int,
        year: int,
    ) -> PriceRangeResponse:
        """Count a month's items per price band.

        Args:
            db: Database session.
            month: Month (1-12).
            year: Year.

        Returns:
            Counts for all bands in ``PRICE_BANDS``, zero-filled.
        """
        columns = [
            func.count().filter(band.condition(Product.price)).label(f"band_{index}")
            for index, band in enumerate(PRICE_BANDS)
        ]
        stmt = select(*columns).where(in_month(month, year))

        result = await self._execute(db, stmt, "Failed to fetch price range statistics.")
        row = result.one_or_none()

        price_ranges = {
            band.label: _as_int(row, f"band_{index}") for index, band in enumerate(PRICE_BANDS)
        }

        logger.info(
            "products.price_ranges_computed",
            month=month,
            year=year,
            total_items=sum(price_ranges.values()),
        )

        return PriceRangeResponse(month=month, year=year, price_ranges=price_ranges)

    async def compute_category_distribution(
        self,
        db: AsyncSession,
        month: int,
    ) -> list[CategoryCount]:
        """Count a month's items per category, across all years.

        Args:
            db: Database session.
            month: Month (1-12).

        Returns:
            One entry per configured category, in configured order.
        """
        categories = self.settings.product_categories
        stmt = (
            select(Product.category, func.count().label("item_count"))
            .where(in_month(month), Product.category.in_(categories))
            .group_by(Product.category)
        )

        result = await self._execute(db, stmt, "Failed to fetch category statistics.")
        found = {row.category: int(row.item_count) for row in result.all()}

        distribution = [
            CategoryCount(category=category, item_count=found.get(category, 0))
            for category in categories
        ]

        logger.info(
            "products.category_distribution_computed",
            month=month,
            categories_found=len(found),
        )

        return distribution
