import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.db.inventory_log import InventoryLog

logger = logging.getLogger(__name__)


async def record_stock_change(
    db: AsyncSession,
    *,
    product_id: int,
    old_stock: int,
    new_stock: int,
    changed_by: str,
) -> Optional[InventoryLog]:
    """Append one log entry when stock moved; returns None when it did not."""
    if int(old_stock) == int(new_stock):
        return None

    entry = InventoryLog(
        product_id=product_id,
        old_stock=int(old_stock),
        new_stock=int(new_stock),
        changed_by=changed_by,
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    logger.info(
        "Stock of product %s changed %s -> %s by %s",
        product_id, old_stock, new_stock, changed_by,
    )
    return entry


async def history_for(db: AsyncSession, product_id: int) -> List[InventoryLog]:
    res = await db.execute(
        select(InventoryLog)
        .where(InventoryLog.product_id == product_id)
        .order_by(InventoryLog.timestamp.desc(), InventoryLog.id.desc())
    )
    return list(res.scalars().all())
