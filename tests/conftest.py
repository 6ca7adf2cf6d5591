"""Shared fixtures: in-memory SQLite sessions and canned domain objects."""

import os

# Settings are read at import time; keep tests off Postgres and OTLP.
os.environ.setdefault("POSTGRES_DSN", "sqlite+pysqlite://")
os.environ.setdefault("TRACING_ENABLED", "false")
os.environ.setdefault("SERVICE_NAME", "orderflow-tests")

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from orderflow.common.db import Base
from orderflow.services.orders.models import Order, OrderItem, OrderStatus, PaymentStatus
from orderflow.services.orders.schemas import ProductRecord
import orderflow.services.products.models  # noqa: F401  registers the products table


@pytest.fixture
def db_session():
    """Fresh in-memory database with every service table."""

    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    with factory() as session:
        yield session
    engine.dispose()


def make_order(
    number: int = 100,
    status: OrderStatus = OrderStatus.RECEIVED,
    payment_status: PaymentStatus = PaymentStatus.PENDING,
    payment_id: str | None = None,
    order_id: str | None = None,
) -> Order:
    """Detached order with one item (2 x 25.00) and a consistent total."""

    now = datetime.now(timezone.utc)
    order = Order(
        id=order_id or str(uuid4()),
        customer_id=1,
        number=number,
        status=status,
        payment_status=payment_status,
        payment_id=payment_id,
        observation="test order",
        created_at=now,
        updated_at=now,
    )
    order.items.append(
        OrderItem(id=1, product_id=1, product_name="X-Burger", quantity=2, unit_price=Decimal("25.00"))
    )
    order.recalculate_total()
    return order


def make_product(product_id: int = 1, price: str = "25.00", active: bool = True, name: str | None = None) -> ProductRecord:
    return ProductRecord(
        id=product_id,
        name=name or f"Product {product_id}",
        price=Decimal(price),
        category="SANDWICH",
        description=None,
        active=active,
        image_url=None,
    )
