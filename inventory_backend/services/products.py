import csv
import io
import logging
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from inventory_backend.db.inventory_log import InventoryLog
from inventory_backend.db.product import Product
from inventory_backend.schemas.product import ProductCreate, ProductUpdate
from inventory_backend.services.audit import history_for, record_stock_change
from inventory_backend.services.duplicates import find_existing_id

logger = logging.getLogger(__name__)

EXPORT_FIELDS = ["name", "unit", "category", "brand", "stock", "status", "image"]

SORTABLE_COLUMNS = {
    "id": Product.id,
    "name": Product.name,
    "unit": Product.unit,
    "category": Product.category,
    "brand": Product.brand,
    "stock": Product.stock,
    "status": Product.status,
    "created_at": Product.created_at,
    "updated_at": Product.updated_at,
}

SEED_PRODUCTS = [
    ("Apple iPhone 14", "pcs", "Electronics", "Apple", 10, "In Stock", "https://example.com/iphone.jpg"),
    ("Banana", "kg", "Grocery", "FreshFarm", 0, "Out of Stock", None),
    ("Shampoo", "bottle", "Personal Care", "CleanCo", 25, "In Stock", None),
]


async def list_products(
    db: AsyncSession,
    *,
    category: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Product]:
    stmt = select(Product)
    if category:
        stmt = stmt.where(Product.category == category)

    if sort_by:
        col = SORTABLE_COLUMNS.get(sort_by)
        if col is None:
            raise ValidationError(f"Cannot sort by '{sort_by}'")
        desc = (order or "").upper() == "DESC"
        stmt = stmt.order_by(col.desc() if desc else col.asc())
    else:
        stmt = stmt.order_by(Product.id.desc())

    if page and limit:
        stmt = stmt.limit(limit).offset((page - 1) * limit)

    res = await db.execute(stmt)
    return list(res.scalars().all())


async def search_products(db: AsyncSession, name: Optional[str]) -> List[Product]:
    """Partial, case-insensitive name match."""
    qq = f"%{(name or '').strip().lower()}%"
    res = await db.execute(
        select(Product)
        .where(func.lower(Product.name).like(qq))
        .order_by(Product.id.desc())
    )
    return list(res.scalars().all())


async def get_product(db: AsyncSession, product_id: int) -> Product:
    res = await db.execute(select(Product).where(Product.id == product_id))
    model = res.scalar_one_or_none()
    if not model:
        raise NotFoundError(f"Product with id {product_id} not found")
    return model


def _apply_fields(model: Product, payload: ProductCreate) -> None:
    model.name = payload.name
    model.name_key = Product.key_for(payload.name)
    model.unit = payload.unit
    model.category = payload.category
    model.brand = payload.brand
    model.stock = payload.stock
    model.status = payload.status
    model.image = payload.image


async def create_product(db: AsyncSession, payload: ProductCreate) -> Product:
    if await find_existing_id(db, payload.name) is not None:
        raise ConflictError("Name already exists")

    model = Product()
    _apply_fields(model, payload)
    try:
        db.add(model)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Name already exists")
    except (SQLAlchemyError, OverflowError):
        await db.rollback()
        logger.exception("create_product failed for %r", payload.name)
        raise StorageError("Failed to create product")
    await db.refresh(model)
    return model


async def update_product(
    db: AsyncSession,
    product_id: int,
    payload: ProductUpdate,
    changed_by: str,
) -> Product:
    """
    Replace a product's fields and log a stock change when there is one.

    The product row is committed first. The audit entry is written after it;
    if that write fails the update stands and the failure is logged.
    """
    if await find_existing_id(db, payload.name, exclude_id=product_id) is not None:
        raise ConflictError("Name already exists")

    model = await get_product(db, product_id)
    old_stock = int(model.stock)

    try:
        _apply_fields(model, payload)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Name already exists")
    except (SQLAlchemyError, OverflowError):
        await db.rollback()
        logger.exception("update_product failed for id %s", product_id)
        raise StorageError("Failed to update product")
    await db.refresh(model)

    try:
        await record_stock_change(
            db,
            product_id=model.id,
            old_stock=old_stock,
            new_stock=model.stock,
            changed_by=changed_by,
        )
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(
            "Audit entry for product %s (%s -> %s) was not written; update kept",
            product_id, old_stock, model.stock,
        )
        await db.refresh(model)

    return model


async def delete_product(db: AsyncSession, product_id: int) -> None:
    """Delete a product. Its inventory log entries are kept."""
    model = await get_product(db, product_id)
    try:
        await db.delete(model)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("delete_product failed for id %s", product_id)
        raise StorageError("Failed to delete")


async def product_history(db: AsyncSession, product_id: int) -> List[InventoryLog]:
    return await history_for(db, product_id)


async def export_rows(db: AsyncSession) -> List[Dict[str, str]]:
    res = await db.execute(select(Product).order_by(Product.id.asc()))
    out: List[Dict[str, str]] = []
    for p in res.scalars().all():
        out.append({
            "name": p.name,
            "unit": p.unit,
            "category": p.category,
            "brand": p.brand or "",
            "stock": str(p.stock),
            "status": p.status,
            "image": p.image or "",
        })
    return out


async def export_csv(db: AsyncSession) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=EXPORT_FIELDS)
    writer.writeheader()
    writer.writerows(await export_rows(db))
    return buf.getvalue()


async def seed_products(db: AsyncSession) -> int:
    """Insert the sample products that are not there yet. Returns how many were added."""
    created = 0
    for name, unit, category, brand, stock, status, image in SEED_PRODUCTS:
        if await find_existing_id(db, name) is not None:
            continue
        db.add(Product(
            name=name,
            name_key=Product.key_for(name),
            unit=unit,
            category=category,
            brand=brand,
            stock=stock,
            status=status,
            image=image,
        ))
        created += 1
    await db.commit()
    return created
