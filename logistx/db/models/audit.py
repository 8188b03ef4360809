"""ORM model for the append-only inventory transaction log."""

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from logistx.db.base import Base, CreatedAtMixin, IdMixin


class InventoryTransaction(Base, IdMixin, CreatedAtMixin):
    """Audit row. item_id carries no constraint so rows outlive deleted items."""

    __tablename__ = "inventory_transactions"

    item_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    transaction_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    quantity_change: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    previous_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    new_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
