"""Persistence adapter for orders and the order number counter."""

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from orderflow.services.orders.models import Order, OrderNumberCounter, OrderStatus


_COUNTER_ID = 1
_counter = OrderNumberCounter.__table__


class OrderRepository:
    """CRUD and status queries over one request-scoped session.

    Items are loaded eagerly with their order (`selectin`), so every returned
    `Order` is fully materialized.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_id(self, order_id: str) -> Order | None:
        return self.db.get(Order, order_id)

    def get_all(self) -> list[Order]:
        return list(self.db.execute(select(Order).order_by(Order.number)).scalars().all())

    def get_active(self) -> list[Order]:
        stmt = select(Order).where(Order.status != OrderStatus.FINALIZED).order_by(Order.number)
        return list(self.db.execute(stmt).scalars().all())

    def get_by_status(self, status: OrderStatus) -> list[Order]:
        stmt = select(Order).where(Order.status == status).order_by(Order.number)
        return list(self.db.execute(stmt).scalars().all())

    def add(self, order: Order) -> Order:
        """Insert the order; commits any pending counter increment with it."""

        self.db.add(order)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(order)
        return order

    def update(self, order: Order) -> Order:
        order.touch()
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def delete(self, order_id: str) -> bool:
        order = self.db.get(Order, order_id)
        if order is None:
            return False
        self.db.delete(order)
        self.db.commit()
        return True

    def next_order_number(self) -> int:
        """Atomically increment and return the order number counter.

        The increment is left uncommitted: it becomes durable together with the
        order inserted by `add()`, and is discarded if that insert never happens.
        Callers take the number last, right before `add()`, so the row lock is
        held only for the insert.
        """

        while True:
            value = self.db.execute(
                update(_counter)
                .where(_counter.c.id == _COUNTER_ID)
                .values(value=_counter.c.value + 1)
                .returning(_counter.c.value)
            ).scalar_one_or_none()
            if value is not None:
                return value
            try:
                self.db.execute(insert(_counter).values(id=_COUNTER_ID, value=1))
                return 1
            except IntegrityError:
                # Another request seeded the counter first; increment theirs.
                self.db.rollback()
