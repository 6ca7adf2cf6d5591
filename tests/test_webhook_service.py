"""Payment webhook: field validation, status mapping, linkage and idempotency."""

from unittest.mock import create_autospec

import pytest

from conftest import make_order
from orderflow.common.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from orderflow.services.orders.models import PaymentStatus
from orderflow.services.orders.repository import OrderRepository
from orderflow.services.orders.schemas import PaymentWebhookRequest
from orderflow.services.orders.webhook import PaymentWebhookService, map_payment_status


@pytest.fixture
def repo():
    repository = create_autospec(OrderRepository, instance=True)
    repository.update.side_effect = lambda order: order
    return repository


@pytest.fixture
def service(repo):
    return PaymentWebhookService(repo)


def _webhook(status="PAID", order_id="order-1", payment_id="pay_123"):
    return PaymentWebhookRequest(status=status, order_id=order_id, payment_id=payment_id)


@pytest.mark.parametrize(
    "fields,message",
    [
        ({"status": None}, "Status is required"),
        ({"status": ""}, "Status is required"),
        ({"order_id": None}, "OrderId is required"),
        ({"order_id": ""}, "OrderId is required"),
        ({"order_id": "   "}, "OrderId is required"),
        ({"payment_id": None}, "PaymentId is required"),
        ({"payment_id": ""}, "PaymentId is required"),
    ],
)
def test_missing_fields_rejected_before_lookup(service, repo, fields, message):
    with pytest.raises(ValidationError, match=message):
        service.process_webhook(_webhook(**fields))

    repo.get_by_id.assert_not_called()
    repo.update.assert_not_called()


def test_unknown_status_rejected_before_lookup(service, repo):
    with pytest.raises(ValidationError, match="Unknown payment status"):
        service.process_webhook(_webhook(status="EXPLODED"))

    repo.get_by_id.assert_not_called()


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("PAID", PaymentStatus.PAID),
        ("paid", PaymentStatus.PAID),
        ("APPROVED", PaymentStatus.PAID),
        ("REFUSED", PaymentStatus.REFUSED),
        ("rejected", PaymentStatus.REFUSED),
        ("CANCELED", PaymentStatus.CANCELLED),
        ("CANCELLED", PaymentStatus.CANCELLED),
        (" PENDING ", PaymentStatus.PENDING),
    ],
)
def test_status_mapping(raw, expected):
    assert map_payment_status(raw) == expected


def test_unknown_order(service, repo):
    repo.get_by_id.return_value = None

    with pytest.raises(NotFoundError, match="Order 999 not found"):
        service.process_webhook(_webhook(order_id="999"))

    repo.update.assert_not_called()


def test_paid_webhook_updates_payment_status(service, repo):
    order = make_order(number=100, payment_id="pay_123")
    repo.get_by_id.return_value = order

    result = service.process_webhook(_webhook(order_id=order.id))

    assert result.success is True
    assert "PAID" in result.message
    assert result.order_number == 100
    assert order.payment_status == PaymentStatus.PAID
    repo.update.assert_called_once_with(order)


def test_webhook_links_payment_id_when_missing(service, repo):
    """Orders created while payment was down get their payment id late."""

    order = make_order(payment_id=None)
    repo.get_by_id.return_value = order

    result = service.process_webhook(_webhook(order_id=order.id, payment_id="pay_late"))

    assert result.success is True
    assert order.payment_id == "pay_late"
    assert order.payment_status == PaymentStatus.PAID


def test_pending_webhook_only_links(service, repo):
    order = make_order(payment_id=None)
    repo.get_by_id.return_value = order

    result = service.process_webhook(_webhook(status="PENDING", order_id=order.id))

    assert result.success is True
    assert order.payment_id == "pay_123"
    assert order.payment_status == PaymentStatus.PENDING
    repo.update.assert_called_once()


def test_duplicate_webhook_is_acknowledged(service, repo):
    order = make_order(number=100, payment_id="pay_123", payment_status=PaymentStatus.PAID)
    repo.get_by_id.return_value = order

    result = service.process_webhook(_webhook(order_id=order.id))

    assert result.success is True
    assert "already processed" in result.message
    assert result.order_number == 100
    repo.update.assert_not_called()


def test_replaying_same_webhook_twice(service, repo):
    order = make_order(payment_id="pay_123")
    repo.get_by_id.return_value = order

    first = service.process_webhook(_webhook(order_id=order.id))
    second = service.process_webhook(_webhook(order_id=order.id))

    assert first.success and second.success
    assert "already processed" in second.message
    assert repo.update.call_count == 1


def test_different_payment_id_conflicts(service, repo):
    order = make_order(payment_id="pay_original")
    repo.get_by_id.return_value = order

    with pytest.raises(ConflictError):
        service.process_webhook(_webhook(order_id=order.id, payment_id="pay_other"))

    assert order.payment_id == "pay_original"
    repo.update.assert_not_called()


def test_illegal_payment_transition(service, repo):
    order = make_order(payment_id="pay_123", payment_status=PaymentStatus.CANCELLED)
    repo.get_by_id.return_value = order

    with pytest.raises(InvalidTransitionError):
        service.process_webhook(_webhook(status="PAID", order_id=order.id))

    assert order.payment_status == PaymentStatus.CANCELLED
    repo.update.assert_not_called()


def test_late_refusal_after_payment_is_rejected(service, repo):
    order = make_order(payment_id="pay_123", payment_status=PaymentStatus.PAID)
    repo.get_by_id.return_value = order

    with pytest.raises(InvalidTransitionError, match="Cannot change payment status from PAID to REFUSED"):
        service.process_webhook(_webhook(status="REFUSED", order_id=order.id))

    assert order.payment_status == PaymentStatus.PAID
    repo.update.assert_not_called()
