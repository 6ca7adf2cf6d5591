"""Order orchestration.

Creates orders by resolving each line against the products service, persists
them, then tries to start a payment without letting payment-service trouble
fail the order. Also owns status transitions and payment-id linkage.
"""

from orderflow.common.config import settings
from orderflow.common.errors import ConflictError, NotFoundError, ValidationError
from orderflow.common.logging import logger, order_id_ctx
from orderflow.common.metrics import (
    order_status_transitions_total,
    orders_created_total,
    payment_requests_total,
)
from orderflow.common.state_machine import validate_transition
from orderflow.services.orders.clients import PaymentClient, ProductsClient
from orderflow.services.orders.models import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from orderflow.services.orders.repository import OrderRepository
from orderflow.services.orders.schemas import OrderCreateRequest, OrderResponse


class OrderService:
    """Owns order creation, the status state machine and payment linkage."""

    def __init__(
        self,
        repository: OrderRepository,
        products: ProductsClient,
        payments: PaymentClient,
    ) -> None:
        self.repository = repository
        self.products = products
        self.payments = payments

    def _require(self, order_id: str) -> Order:
        order = self.repository.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found")
        return order

    def get_order(self, order_id: str) -> OrderResponse | None:
        order = self.repository.get_by_id(order_id)
        return OrderResponse.from_order(order) if order else None

    def list_orders(self) -> list[OrderResponse]:
        return [OrderResponse.from_order(o) for o in self.repository.get_all()]

    def list_active_orders(self) -> list[OrderResponse]:
        """Orders not yet FINALIZED, by order number."""

        return [OrderResponse.from_order(o) for o in self.repository.get_active()]

    def list_orders_by_status(self, status: OrderStatus) -> list[OrderResponse]:
        return [OrderResponse.from_order(o) for o in self.repository.get_by_status(status)]

    def create_order(self, req: OrderCreateRequest) -> OrderResponse:
        """Validate, resolve products, persist, then attempt payment.

        Nothing is persisted unless every item resolves to an active product.
        """

        if not req.items:
            raise ValidationError("Order must contain at least one item")
        if any(item.quantity <= 0 for item in req.items):
            raise ValidationError("Item quantity must be greater than zero")

        order = Order(
            customer_id=req.customer_id,
            status=OrderStatus.RECEIVED,
            payment_status=PaymentStatus.PENDING,
            observation=req.observation,
        )
        for requested in req.items:
            product = self.products.get_product_by_id(requested.product_id)
            if product is None:
                raise NotFoundError(f"Product with ID {requested.product_id} not found")
            if not product.active:
                raise ConflictError(f"Product {product.name} is not active")
            order.items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=requested.quantity,
                    unit_price=product.price,
                )
            )
        order.recalculate_total()

        # Taken last: the increment commits with the insert or not at all.
        order.number = self.repository.next_order_number()
        created = self.repository.add(order)

        token = order_id_ctx.set(created.id)
        try:
            orders_created_total.labels(service=settings.service_name).inc()
            logger.info("order created number=%s total=%s", created.number, created.total_amount)
            return OrderResponse.from_order(self._request_payment(created))
        finally:
            order_id_ctx.reset(token)

    def _request_payment(self, order: Order) -> Order:
        """Best effort: payment failures are logged, never raised."""

        try:
            payment = self.payments.create_payment(str(order.id), order.total_amount)
        except Exception as exc:
            payment_requests_total.labels(service=settings.service_name, outcome="error").inc()
            logger.warning("payment initiation failed for order %s: %s", order.id, exc)
            return order
        if payment is None or not payment.payment_id:
            payment_requests_total.labels(service=settings.service_name, outcome="rejected").inc()
            return order

        payment_requests_total.labels(service=settings.service_name, outcome="created").inc()
        order.payment_id = payment.payment_id
        return self.repository.update(order)

    def update_status(self, order_id: str, new_status: OrderStatus) -> OrderResponse:
        """Advance the order one step along RECEIVED -> ... -> FINALIZED."""

        order = self._require(order_id)
        current = order.status
        validate_transition(current, new_status)
        order.status = new_status
        order = self.repository.update(order)
        order_status_transitions_total.labels(
            service=settings.service_name,
            from_status=current,
            to_status=new_status,
        ).inc()
        logger.info("order %s status %s -> %s", order.id, current, new_status)
        return OrderResponse.from_order(order)

    def set_payment_id(self, order_id: str, payment_id: str | None) -> OrderResponse:
        order = self._require(order_id)
        if not payment_id or not payment_id.strip():
            raise ValidationError("PaymentId cannot be empty")
        order.payment_id = payment_id.strip()
        return OrderResponse.from_order(self.repository.update(order))

    def delete_order(self, order_id: str) -> bool:
        """Physically remove an order regardless of its status."""

        deleted = self.repository.delete(order_id)
        if deleted:
            logger.info("order deleted id=%s", order_id)
        return deleted
