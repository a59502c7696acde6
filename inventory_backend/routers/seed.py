from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.db.database import get_async_session
from inventory_backend.services.products import seed_products

router = APIRouter()


@router.post("/seed")
async def seed(db: AsyncSession = Depends(get_async_session)):
    """Insert a few sample products (names already present are left alone)."""
    created = await seed_products(db)
    return {"ok": True, "created": created}
