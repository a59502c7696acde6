from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from .database import Base

# Largest value an SQLite INTEGER column holds
MAX_STOCK = 2**63 - 1


class Product(Base):
    """Catalog product. Names are unique ignoring case (enforced on name_key)."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    # lower-cased name; the unique index is the storage-level duplicate guard
    name_key = Column(String, nullable=False, unique=True, index=True)

    unit = Column(Text, nullable=False)
    category = Column(Text, nullable=False, index=True)
    brand = Column(Text, nullable=False, default="")
    stock = Column(Integer, nullable=False, default=0)
    status = Column(Text, nullable=False, default="In Stock")
    image = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    @staticmethod
    def key_for(name: str) -> str:
        return name.strip().lower()
