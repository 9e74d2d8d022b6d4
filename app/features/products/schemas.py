"""Pydantic schemas for product search and sales reports.

Field names are snake_case in Python and camelCase on the wire, matching
the JSON the dashboard consumes (``dateOfSale``, ``totalSaleAmount``...).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serializing fields with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Search
# =============================================================================


class ProductResponse(CamelModel):
    """A single product sale record."""

    id: int = Field(..., description="Record identifier.")
    title: str = Field(..., description="Product title.")
    description: str = Field("", description="Product description.")
    price: float = Field(..., ge=0, description="Listed price.")
    category: str = Field(..., description="Category label.")
    sold: bool = Field(..., description="Whether the item was sold.")
    date_of_sale: str = Field(..., description="Sale timestamp (ISO-8601).")
    image: str | None = Field(None, description="Image URL, if any.")


# =============================================================================
# Reports
# =============================================================================


class SaleStatistics(CamelModel):
    """Sales totals for one calendar month.

    All values are zero when no record falls in the month.
    """

    month: int = Field(..., ge=1, le=12, description="Month the totals cover (1-12).")
    year: int = Field(..., description="Year the totals cover.")
    total_sale_amount: float = Field(
        0,
        ge=0,
        description="Sum of price over sold items.",
    )
    total_sold_items: int = Field(0, ge=0, description="Number of sold items.")
    total_not_sold_items: int = Field(0, ge=0, description="Number of unsold items.")


class PriceRangeResponse(CamelModel):
    """Price histogram for one calendar month.

    ``price_ranges`` always holds all ten bands in ascending order, keyed
    ``"0-100"`` ... ``"901-above"``.
    """

    month: int = Field(..., ge=1, le=12, description="Month the histogram covers (1-12).")
    year: int = Field(..., description="Year the histogram covers.")
    price_ranges: dict[str, int] = Field(
        ...,
        description="Item count per price band.",
    )


class CategoryCount(CamelModel):
    """Number of items in one category for a month."""

    category: str = Field(..., description="Category label.")
    item_count: int = Field(0, ge=0, description="Number of items in the category.")
