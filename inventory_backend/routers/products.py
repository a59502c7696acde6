from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.db.database import get_async_session
from inventory_backend.schemas.product import (
    ImportReport,
    InventoryLogRead,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from inventory_backend.services import importer, products

router = APIRouter()


@router.get("", response_model=List[ProductRead])
async def list_products(
    category: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_async_session),
):
    """List products, newest first unless sortBy is given."""
    return await products.list_products(
        db, category=category, sort_by=sort_by, order=order, page=page, limit=limit
    )


@router.get("/search", response_model=List[ProductRead])
async def search_products(name: str = "", db: AsyncSession = Depends(get_async_session)):
    return await products.search_products(db, name)


@router.get("/export")
async def export_products(db: AsyncSession = Depends(get_async_session)):
    body = await products.export_csv(db)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="products.csv"'},
    )


@router.post("/import", response_model=ImportReport)
async def import_products(
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Import products from a CSV upload.

    Header: name,unit,category,brand,stock,status,image (only name is required).
    Rows whose name already exists (ignoring case) are reported as duplicates.
    """
    return await importer.import_csv(db, file)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, db: AsyncSession = Depends(get_async_session)):
    return await products.create_product(db, payload)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(product_id: int, db: AsyncSession = Depends(get_async_session)):
    return await products.get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
):
    """Replace all fields of a product; a stock change is written to its history."""
    changed_by = payload.changed_by or request.app.state.settings.default_actor
    return await products.update_product(db, product_id, payload, changed_by=changed_by)


@router.delete("/{product_id}")
async def delete_product(product_id: int, db: AsyncSession = Depends(get_async_session)):
    await products.delete_product(db, product_id)
    return {"success": True}


@router.get("/{product_id}/history", response_model=List[InventoryLogRead])
async def product_history(product_id: int, db: AsyncSession = Depends(get_async_session)):
    return await products.product_history(db, product_id)
