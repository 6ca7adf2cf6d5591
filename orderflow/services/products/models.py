"""Products database models.

This DB is the source of truth for the catalog that the orders service
resolves line items against.
"""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import Boolean, DateTime, Enum, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orderflow.common.db import Base, next_timestamp, utcnow


class Category(StrEnum):
    """Menu sections, in display order."""

    SANDWICH = "SANDWICH"
    SIDE = "SIDE"
    DRINK = "DRINK"
    DESSERT = "DESSERT"


class Product(Base):
    """Catalog entry; `active` gates whether it may be ordered."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    category: Mapped[Category] = mapped_column(
        Enum(Category, native_enum=False, length=32), index=True
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def touch(self) -> None:
        self.updated_at = next_timestamp(self.updated_at)
