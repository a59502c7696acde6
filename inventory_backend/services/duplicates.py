from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.db.product import Product


async def find_existing_id(
    db: AsyncSession,
    name: str,
    exclude_id: Optional[int] = None,
) -> Optional[int]:
    """Id of the stored product whose name equals `name` ignoring case, if any.

    Not atomic with a following insert; the unique name_key index catches the race.
    """
    stmt = select(Product.id).where(Product.name_key == Product.key_for(name))
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    res = await db.execute(stmt.limit(1))
    return res.scalar_one_or_none()
