"""API request/response schemas for orders and webhook endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from orderflow.common.schemas import CamelModel, Money
from orderflow.services.orders.models import Order, OrderStatus, PaymentStatus


class OrderItemRequest(CamelModel):
    product_id: int
    quantity: int = Field(gt=0)


class OrderCreateRequest(CamelModel):
    """Payload accepted by `POST /api/orders`.

    `items` is optional at the schema level so an empty or missing list reaches
    the service and fails with the domain message.
    """

    customer_id: int | None = None
    observation: str | None = None
    items: list[OrderItemRequest] | None = None


class OrderStatusUpdateRequest(CamelModel):
    status: OrderStatus


class PaymentIdUpdateRequest(CamelModel):
    payment_id: str | None = None


class OrderItemResponse(CamelModel):
    id: int | None = None
    product_id: int
    product_name: str
    quantity: int
    unit_price: Money
    subtotal: Money


class OrderResponse(CamelModel):
    """Materialized order view returned by every order operation."""

    id: str
    customer_id: int | None = None
    number: int
    status: OrderStatus
    payment_id: str | None = None
    payment_status: PaymentStatus
    observation: str | None = None
    items: list[OrderItemResponse]
    total: Money
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            number=order.number,
            status=order.status,
            payment_id=order.payment_id,
            payment_status=order.payment_status,
            observation=order.observation,
            items=[OrderItemResponse.model_validate(item) for item in order.items],
            total=order.total_amount,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class PaymentWebhookRequest(CamelModel):
    """Callback body sent by the payment service.

    Fields are optional here; presence is checked by the webhook service so
    each missing field gets its own message.
    """

    status: str | None = None
    order_id: str | None = None
    payment_id: str | None = None


class PaymentWebhookResponse(CamelModel):
    success: bool
    message: str
    order_number: int | None = None


class ProductRecord(CamelModel):
    """Product as returned by the products service."""

    id: int
    name: str
    price: Decimal
    category: str
    description: str | None = None
    active: bool
    image_url: str | None = None


class PaymentRequest(CamelModel):
    order_id: str
    total_amount: Money


class PaymentRecord(CamelModel):
    """Payment as returned by the payment service."""

    payment_id: str | None = None
    order_id: str | None = None
    total_amount: Decimal | None = None
    status: str | None = None
    qr_code: str | None = None
    created_at: datetime | None = None
