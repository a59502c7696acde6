"""
Import products from a CSV file into the database.

Run locally:
  python -m inventory_backend.scripts.import_products products.csv

It uses the same DATABASE_* env vars as the API (dotenv supported by core.config).
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from inventory_backend.core.config import get_settings
from inventory_backend.core.log_config import setup_logging
from inventory_backend.db.database import create_db_and_tables, make_engine, make_session_maker
from inventory_backend.services.importer import import_stream


async def main(csv_path: Path) -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    engine = make_engine(settings)
    try:
        await create_db_and_tables(engine)
        async with make_session_maker(engine)() as db:
            with open(csv_path, "rb") as fh:
                report = await import_stream(db, fh)
    finally:
        await engine.dispose()

    print(
        f"Done. Added: {report.added}. Skipped: {report.skipped}. "
        f"Duplicates: {len(report.duplicates)}."
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import products from CSV")
    parser.add_argument("csv_path", type=Path)
    args = parser.parse_args()
    asyncio.run(main(args.csv_path))
