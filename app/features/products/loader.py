"""Bulk loading of product sale records.

Records come from a JSON array (local file or HTTP URL) in the upstream
camelCase shape. Each one is validated, then valid rows are upserted on
``id`` in batches.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import httpx
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel
from sqlalchemy import delete, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.features.products.models import Product

logger = get_logger(__name__)

# Sale dates must start with a calendar date (no unix timestamps or ISO week dates)
_CALENDAR_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_SALE_DATE = TypeAdapter(datetime)


class ProductRecord(BaseModel):
    """One upstream sale record as found in the source JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: int = Field(..., ge=0)
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    price: Decimal = Field(..., ge=0)
    category: str = Field(..., min_length=1, max_length=100)
    sold: bool = False
    date_of_sale: str
    image: str | None = None

    @field_validator("date_of_sale", mode="before")
    @classmethod
    def validate_date_of_sale(cls, v: Any) -> str:
        """Normalize the sale date to an ISO-8601 timestamp with an offset.

        Accepts RFC 3339 timestamps and plain ``YYYY-MM-DD`` dates. Values
        without an offset are taken as UTC.

        Args:
            v: Raw ``dateOfSale`` value.

        Returns:
            ISO-8601 timestamp string carrying an explicit UTC offset.
        """
        if not isinstance(v, str) or not _CALENDAR_DATE.match(v):
            raise ValueError(f"dateOfSale is not a valid date: {v!r}")
        try:
            value = _SALE_DATE.validate_python(v)
        except ValidationError as e:
            raise ValueError(f"dateOfSale is not a valid date: {v!r}") from e

        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.isoformat()


@dataclass
class RecordError:
    """A source record that failed validation."""

    index: int
    record_id: Any
    message: str


@dataclass
class LoadResult:
    """Outcome of a load run."""

    loaded_count: int = 0
    rejected_count: int = 0
    errors: list[RecordError] = field(default_factory=list)


def parse_records(payload: list[Any]) -> tuple[list[ProductRecord], list[RecordError]]:
    """Validate raw source records.

    Args:
        payload: Decoded JSON array.

    Returns:
        Valid records and one error per rejected record.
    """
    records: list[ProductRecord] = []
    errors: list[RecordError] = []

    for index, raw in enumerate(payload):
        try:
            records.append(ProductRecord.model_validate(raw))
        except ValidationError as e:
            record_id = raw.get("id") if isinstance(raw, dict) else None
            messages = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
                for err in e.errors()
            )
            errors.append(RecordError(index=index, record_id=record_id, message=messages))

    return records, errors


async def read_source(source: str, timeout_seconds: float = 30) -> list[Any]:
    """Read a JSON array of records from a file path or http(s) URL.

    Raises:
        ValueError: If the document is not a JSON array.
        httpx.HTTPError: If the URL cannot be fetched.
    """
    if source.startswith(("http://", "https://")):
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            response = await client.get(source)
            response.raise_for_status()
            payload = response.json()
    else:
        payload = json.loads(Path(source).read_text(encoding="utf-8"))

    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of records in {source}")

    logger.info("loader.source_read", source=source, records=len(payload))
    return payload


async def load_products(
    db: AsyncSession,
    records: list[ProductRecord],
    replace: bool = False,
    batch_size: int = 1000,
) -> int:
    """Upsert records into the product table.

    Args:
        db: Database session (committed on success).
        records: Validated records.
        replace: Delete all existing rows first.
        batch_size: Rows per INSERT statement.

    Returns:
        Number of rows written.
    """
    if replace:
        await db.execute(delete(Product))
        logger.info("loader.table_cleared")

    written = 0
    for start in range(0, len(records), batch_size):
        batch = [
            record.model_dump(by_alias=False) for record in records[start : start + batch_size]
        ]
        insert_stmt = pg_insert(Product).values(batch)
        upsert_stmt = insert_stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                "title": insert_stmt.excluded.title,
                "description": insert_stmt.excluded.description,
                "price": insert_stmt.excluded.price,
                "category": insert_stmt.excluded.category,
                "sold": insert_stmt.excluded.sold,
                "date_of_sale": insert_stmt.excluded.date_of_sale,
                "image": insert_stmt.excluded.image,
                "loaded_at": func.now(),
            },
        )
        await db.execute(upsert_stmt)
        written += len(batch)

    await db.commit()
    logger.info("loader.products_written", count=written, replace=replace)
    return written


async def load_from_source(
    db: AsyncSession,
    source: str,
    replace: bool = False,
    timeout_seconds: float = 30,
) -> LoadResult:
    """Read, validate and upsert records from ``source``."""
    payload = await read_source(source, timeout_seconds=timeout_seconds)
    records, errors = parse_records(payload)

    for error in errors:
        logger.warning(
            "loader.record_rejected",
            index=error.index,
            record_id=error.record_id,
            error=error.message,
        )

    loaded = await load_products(db, records, replace=replace)
    return LoadResult(loaded_count=loaded, rejected_count=len(errors), errors=errors)
