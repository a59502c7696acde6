from sqlalchemy import Column, DateTime, Integer, Text
from sqlalchemy.sql import func

from .database import Base


class InventoryLog(Base):
    """Append-only record of a stock change.

    product_id carries no foreign key: entries outlive the product they describe.
    """
    __tablename__ = "inventory_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, nullable=False, index=True)

    old_stock = Column(Integer, nullable=False)
    new_stock = Column(Integer, nullable=False)
    changed_by = Column(Text, nullable=False)

    timestamp = Column(DateTime, nullable=False, server_default=func.now(), index=True)
