from datetime import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from inventory_backend.db.product import MAX_STOCK


class ProductCreate(BaseModel):
    name: str
    unit: str
    category: str
    brand: str = ""
    stock: int = Field(ge=0, le=MAX_STOCK)
    status: str
    image: Optional[str] = None

    @field_validator("name", "unit", "category", "status")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("brand")
    @classmethod
    def _strip_brand(cls, v: Optional[str]) -> str:
        return (v or "").strip()

    @field_validator("image")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class ProductUpdate(ProductCreate):
    """Full replacement of a product's fields."""
    changed_by: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("changed_by", "changedBy"),
    )

    @field_validator("changed_by")
    @classmethod
    def _strip_actor(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class ProductRead(BaseModel):
    id: int
    name: str
    unit: str
    category: str
    brand: str
    stock: int
    status: str
    image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InventoryLogRead(BaseModel):
    id: int
    product_id: int
    old_stock: int
    new_stock: int
    changed_by: str
    timestamp: Optional[datetime] = None

    class Config:
        from_attributes = True


class AddedEntry(BaseModel):
    id: int
    name: str


class DuplicateEntry(BaseModel):
    name: str
    existing_id: int


class SkippedEntry(BaseModel):
    row: int
    reason: str
    record: Dict[str, Optional[str]] = {}


class ImportDetails(BaseModel):
    added: List[AddedEntry] = []
    skipped: List[SkippedEntry] = []


class ImportReport(BaseModel):
    added: int = 0
    skipped: int = 0
    duplicates: List[DuplicateEntry] = []
    details: ImportDetails = Field(default_factory=ImportDetails)
