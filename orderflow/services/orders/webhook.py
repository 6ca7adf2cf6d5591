"""Payment-status callbacks from the payment service."""

from orderflow.common.config import settings
from orderflow.common.errors import ConflictError, NotFoundError, ValidationError
from orderflow.common.logging import logger
from orderflow.common.metrics import webhooks_processed_total
from orderflow.common.state_machine import validate_payment_transition
from orderflow.services.orders.models import PaymentStatus
from orderflow.services.orders.repository import OrderRepository
from orderflow.services.orders.schemas import PaymentWebhookRequest, PaymentWebhookResponse


# Provider status vocabulary -> internal payment status.
PAYMENT_STATUS_MAP: dict[str, PaymentStatus] = {
    "PENDING": PaymentStatus.PENDING,
    "PAID": PaymentStatus.PAID,
    "APPROVED": PaymentStatus.PAID,
    "REFUSED": PaymentStatus.REFUSED,
    "REJECTED": PaymentStatus.REFUSED,
    "DECLINED": PaymentStatus.REFUSED,
    "CANCELLED": PaymentStatus.CANCELLED,
    "CANCELED": PaymentStatus.CANCELLED,
}


def map_payment_status(raw: str) -> PaymentStatus:
    try:
        return PAYMENT_STATUS_MAP[raw.strip().upper()]
    except KeyError:
        raise ValidationError(f"Unknown payment status {raw}") from None


def validate_webhook(webhook: PaymentWebhookRequest) -> tuple[str, str, str]:
    """Reject missing or blank fields, one message per field."""

    if not webhook.status or not webhook.status.strip():
        raise ValidationError("Status is required")
    if not webhook.order_id or not webhook.order_id.strip():
        raise ValidationError("OrderId is required")
    if not webhook.payment_id or not webhook.payment_id.strip():
        raise ValidationError("PaymentId is required")
    return webhook.status.strip(), webhook.order_id.strip(), webhook.payment_id.strip()


class PaymentWebhookService:
    """Applies payment outcomes to orders; replays are acknowledged, not errors."""

    def __init__(self, repository: OrderRepository) -> None:
        self.repository = repository

    def process_webhook(self, webhook: PaymentWebhookRequest) -> PaymentWebhookResponse:
        raw_status, order_id, payment_id = validate_webhook(webhook)
        new_status = map_payment_status(raw_status)

        order = self.repository.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")

        if order.payment_id and order.payment_id != payment_id:
            raise ConflictError(f"Order {order_id} is linked to payment {order.payment_id}, not {payment_id}")

        if order.payment_id == payment_id and order.payment_status == new_status:
            webhooks_processed_total.labels(service=settings.service_name, outcome="duplicate").inc()
            logger.info("webhook replay ignored order=%s payment=%s status=%s", order_id, payment_id, new_status)
            return PaymentWebhookResponse(
                success=True,
                message="Payment already processed",
                order_number=order.number,
            )

        # Late or out-of-order callbacks (REFUSED after PAID, anything after
        # CANCELLED) are refused on purpose rather than rewinding the payment.
        if order.payment_status != new_status:
            validate_payment_transition(order.payment_status, new_status)
        previous = order.payment_status
        order.payment_id = payment_id
        order.payment_status = new_status
        order = self.repository.update(order)

        webhooks_processed_total.labels(service=settings.service_name, outcome="applied").inc()
        logger.info(
            "payment status applied order=%s payment=%s %s -> %s",
            order_id,
            payment_id,
            previous,
            new_status,
        )
        return PaymentWebhookResponse(
            success=True,
            message=f"Payment {new_status} processed successfully",
            order_number=order.number,
        )
