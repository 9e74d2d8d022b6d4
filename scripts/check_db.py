#!/usr/bin/env python
"""Check database connectivity and the product table.

Usage:
    python scripts/check_db.py
"""

import asyncio
import sys

from sqlalchemy import func, inspect, select, text
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import get_settings
from app.core.database import CONNECT_ARGS
from app.features.products.models import Product


async def check_database() -> int:
    """Verify database connection and report product counts."""
    settings = get_settings()

    print(f"{settings.app_name} - Database Connectivity Check")
    print("=" * 45)
    print(f"Database URL: {settings.database_url.split('@')[-1]}")  # Hide credentials
    print()

    engine = create_async_engine(settings.database_url, connect_args=CONNECT_ARGS)

    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            assert result.scalar() == 1
            print("[OK] Basic connectivity")

            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
            if Product.__tablename__ not in tables:
                print(f"[WARN] Table '{Product.__tablename__}' does not exist")
                print("       Run: python scripts/seed_products.py --create-tables")
                return 1

            summary = await conn.execute(
                select(func.count(), func.max(Product.loaded_at)).select_from(Product)
            )
            total, last_loaded = summary.one()
            print(f"[OK] {total} product records (last loaded: {last_loaded or 'never'})")

            rows = await conn.execute(
                select(Product.category, func.count()).group_by(Product.category)
            )
            for category, count in rows:
                print(f"     {category}: {count}")

        print()
        print("Database check completed successfully!")
        return 0

    except Exception as e:
        print(f"[FAIL] Connection failed: {e}")
        print()
        print("Troubleshooting:")
        print("  1. Ensure PostgreSQL is running")
        print("  2. Check DATABASE_URL in .env file")
        return 1

    finally:
        await engine.dispose()


def main():
    sys.exit(asyncio.run(check_database()))


if __name__ == "__main__":
    main()
