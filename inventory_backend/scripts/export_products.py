"""
Write all products to a CSV file (or stdout).

Run locally:
  python -m inventory_backend.scripts.export_products products.csv
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from inventory_backend.core.config import get_settings
from inventory_backend.db.database import create_db_and_tables, make_engine, make_session_maker
from inventory_backend.services.products import export_csv


async def main(out_path: Optional[Path]) -> None:
    engine = make_engine(get_settings())
    try:
        await create_db_and_tables(engine)
        async with make_session_maker(engine)() as db:
            body = await export_csv(db)
    finally:
        await engine.dispose()

    if out_path is None:
        sys.stdout.write(body)
        return
    out_path.write_text(body, encoding="utf-8", newline="")
    print(f"Exported to {out_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Export products to CSV")
    parser.add_argument("out_path", type=Path, nargs="?")
    args = parser.parse_args()
    asyncio.run(main(args.out_path))
