"""ORM model for product sale records.

One row per sold (or listed) product. Records are loaded in bulk by
``scripts/seed_products.py``; the HTTP API only reads them.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Product(Base):
    """Product sale record.

    Attributes:
        id: Primary key (record id from the upstream dataset).
        title: Product title.
        description: Free-text description.
        category: Category label (e.g. "electronics").
        price: Listed price.
        sold: Whether the item was sold.
        date_of_sale: ISO-8601 timestamp string; cast to a timestamp in queries.
        image: Image URL, if any.
        loaded_at: When the loader last wrote the row.
    """

    __tablename__ = "product"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String(500))
    description: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(100), index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    sold: Mapped[bool] = mapped_column(Boolean, default=False)
    date_of_sale: Mapped[str] = mapped_column(String(40))
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    loaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (CheckConstraint("price >= 0", name="ck_product_price_positive"),)
