#!/usr/bin/env python
"""Load product sale records into the database.

Usage:
    # Load the default dataset (SEED_SOURCE_URL)
    python scripts/seed_products.py

    # Load a local file, replacing existing rows
    python scripts/seed_products.py --source data/products.json --replace

    # Create the product table first (without migrations)
    python scripts/seed_products.py --create-tables
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.database import CONNECT_ARGS, Base
from app.core.logging import configure_logging
from app.features.products.loader import load_from_source


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Load product sale records.")
    parser.add_argument(
        "--source",
        default=settings.seed_source_url,
        help="JSON file path or http(s) URL (default: %(default)s)",
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Delete existing products before loading",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before loading",
    )
    return parser


async def run(source: str, replace: bool, create_tables: bool) -> int:
    """Load records and print a summary.

    Returns:
        Process exit code.
    """
    settings = get_settings()
    engine = create_async_engine(settings.database_url, connect_args=CONNECT_ARGS)

    try:
        if create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with session_maker() as session:
            result = await load_from_source(
                session,
                source,
                replace=replace,
                timeout_seconds=settings.seed_timeout_seconds,
            )
    finally:
        await engine.dispose()

    print(f"Loaded:   {result.loaded_count}")
    print(f"Rejected: {result.rejected_count}")
    for error in result.errors[:20]:
        print(f"  [{error.index}] id={error.record_id}: {error.message}")
    if result.rejected_count > 20:
        print(f"  ... {result.rejected_count - 20} more")

    return 0 if result.loaded_count or not result.rejected_count else 1


def main() -> None:
    args = build_parser().parse_args()
    configure_logging()
    sys.exit(asyncio.run(run(args.source, args.replace, args.create_tables)))


if __name__ == "__main__":
    main()
