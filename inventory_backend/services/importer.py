"""
Bulk product import.

Rows are processed in order and each one is its own unit of work: a row that
fails is recorded and the batch moves on, rows already committed stay.
"""

import csv
import io
import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterable, Iterator, Mapping, Optional

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.core.errors import ValidationError
from inventory_backend.db.product import Product
from inventory_backend.schemas.product import (
    AddedEntry,
    DuplicateEntry,
    ImportReport,
    SkippedEntry,
)
from inventory_backend.services.duplicates import find_existing_id
from inventory_backend.services.normalizer import ProductCandidate, RowRejected, canonical_keys, normalize_row

logger = logging.getLogger(__name__)


@contextmanager
def csv_rows(stream: BinaryIO) -> Iterator[Iterator[dict]]:
    """Yield the data rows of a CSV byte stream and close the stream on exit."""
    text = io.TextIOWrapper(stream, encoding="utf-8-sig", newline="")
    try:
        reader = csv.DictReader(text)
        try:
            header = [h.strip().lower() for h in (reader.fieldnames or []) if h]
        except (UnicodeDecodeError, csv.Error) as e:
            raise ValidationError(f"Could not read CSV: {e}")
        if "name" not in header:
            raise ValidationError("CSV header must include a 'name' column")
        yield iter(reader)
    finally:
        text.close()


def _new_product(candidate: ProductCandidate) -> Product:
    return Product(
        name=candidate.name,
        name_key=Product.key_for(candidate.name),
        unit=candidate.unit,
        category=candidate.category,
        brand=candidate.brand,
        stock=candidate.stock,
        status=candidate.status,
        image=candidate.image,
    )


async def import_rows(db: AsyncSession, rows: Iterable[Mapping]) -> ImportReport:
    report = ImportReport()

    for row_no, raw in enumerate(rows, start=1):
        try:
            candidate = normalize_row(raw)
        except RowRejected as e:
            logger.warning("Row %s skipped: %s", row_no, e.reason)
            report.details.skipped.append(
                SkippedEntry(row=row_no, reason=e.reason, record=canonical_keys(raw))
            )
            continue

        try:
            existing_id = await find_existing_id(db, candidate.name)
            if existing_id is None:
                model = _new_product(candidate)
                try:
                    db.add(model)
                    await db.commit()
                except IntegrityError:
                    # Another writer took the name between the lookup and the insert
                    await db.rollback()
                    existing_id = await find_existing_id(db, candidate.name)
                    if existing_id is None:
                        raise
        except (SQLAlchemyError, OverflowError, ValueError) as e:
            await db.rollback()
            logger.exception("Row %s (%s) failed to store", row_no, candidate.name)
            report.details.skipped.append(
                SkippedEntry(row=row_no, reason=f"storage error: {e.__class__.__name__}", record=canonical_keys(raw))
            )
            continue

        if existing_id is not None:
            report.duplicates.append(DuplicateEntry(name=candidate.name, existing_id=existing_id))
            continue

        report.details.added.append(AddedEntry(id=model.id, name=model.name))

    report.added = len(report.details.added)
    report.skipped = len(report.details.skipped)
    logger.info(
        "Import finished: %s added, %s skipped, %s duplicates",
        report.added, report.skipped, len(report.duplicates),
    )
    return report


async def import_stream(db: AsyncSession, stream: BinaryIO) -> ImportReport:
    with csv_rows(stream) as rows:
        try:
            return await import_rows(db, rows)
        except (UnicodeDecodeError, csv.Error) as e:
            raise ValidationError(f"Could not read CSV: {e}")


async def import_csv(db: AsyncSession, upload: Optional[UploadFile]) -> ImportReport:
    """Import an uploaded CSV; the upload buffer is released on every path."""
    if upload is None:
        raise ValidationError("No file uploaded")
    try:
        # Read through the async API so a disk-spooled upload does not block the loop
        data = await upload.read()
        return await import_stream(db, io.BytesIO(data))
    finally:
        await upload.close()
