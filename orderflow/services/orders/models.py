"""Orders database models.

This DB is the source of truth for orders, their line items and the order
number counter.
"""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from uuid import uuid4

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orderflow.common.db import Base, next_timestamp, utcnow


CENTS = Decimal("0.01")


class OrderStatus(StrEnum):
    RECEIVED = "RECEIVED"
    IN_PREPARATION = "IN_PREPARATION"
    READY = "READY"
    FINALIZED = "FINALIZED"


class PaymentStatus(StrEnum):
    PENDING = "PENDING"
    PAID = "PAID"
    REFUSED = "REFUSED"
    CANCELLED = "CANCELLED"


class Order(Base):
    """Order aggregate; owns its items and always carries their total."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    customer_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    number: Mapped[int] = mapped_column(Integer, unique=True, index=True)
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, native_enum=False, length=32), default=OrderStatus.RECEIVED, index=True
    )
    payment_id: Mapped[str | None] = mapped_column(String(120), nullable=True, index=True)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, native_enum=False, length=32), default=PaymentStatus.PENDING
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"))
    observation: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )

    def recalculate_total(self) -> Decimal:
        total = sum((item.subtotal for item in self.items), Decimal("0"))
        self.total_amount = total.quantize(CENTS)
        return self.total_amount

    def touch(self) -> None:
        self.updated_at = next_timestamp(self.updated_at)


class OrderItem(Base):
    """Line item with name and price snapshotted from the catalog."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), index=True)
    product_id: Mapped[int] = mapped_column(Integer)
    product_name: Mapped[str] = mapped_column(String(120))
    quantity: Mapped[int] = mapped_column(Integer)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    order: Mapped[Order] = relationship(back_populates="items")

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * Decimal(self.unit_price)


class OrderNumberCounter(Base):
    """Single-row counter backing sequential order numbers."""

    __tablename__ = "order_number_counter"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False)
