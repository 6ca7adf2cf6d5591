"""Products and payment HTTP clients against `httpx.MockTransport`."""

import json
import logging
from decimal import Decimal

import httpx
import pytest

from orderflow.common.errors import ExternalServiceError
from orderflow.services.orders.clients import PaymentClient, ProductsClient


PRODUCT_JSON = {
    "id": 1,
    "name": "X-Burger",
    "price": 12.5,
    "category": "SANDWICH",
    "description": "Desc",
    "active": True,
    "imageUrl": "img",
}

PAYMENT_JSON = {
    "paymentId": "pay_1",
    "orderId": "1",
    "totalAmount": 50.0,
    "status": "PENDING",
    "qrCode": "qr",
    "createdAt": "2026-10-19T10:00:00Z",
}


def _http(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler), base_url="http://localhost")


def _orderflow_records(caplog, level=None):
    return [
        r for r in caplog.records
        if r.name == "orderflow" and (level is None or r.levelno == level)
    ]


@pytest.fixture(autouse=True)
def _capture_info(caplog):
    caplog.set_level(logging.INFO, logger="orderflow")


def test_get_product_returns_record():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=PRODUCT_JSON)

    product = ProductsClient(_http(handler)).get_product_by_id(1)

    assert product.id == 1
    assert product.name == "X-Burger"
    assert product.price == Decimal("12.5")
    assert product.image_url == "img"
    assert len(seen) == 1
    assert seen[0].method == "GET"
    assert seen[0].url.path == "/api/products/1"


def test_get_product_404_returns_none_and_warns(caplog):
    client = ProductsClient(_http(lambda request: httpx.Response(404)))

    assert client.get_product_by_id(999) is None

    warnings = _orderflow_records(caplog, logging.WARNING)
    assert len(warnings) == 1
    assert "Product" in warnings[0].getMessage()


def test_get_product_json_null_returns_none_silently(caplog):
    client = ProductsClient(_http(lambda request: httpx.Response(200, content=b"null")))

    assert client.get_product_by_id(5) is None
    assert _orderflow_records(caplog) == []


def test_get_product_transport_error_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("Network error", request=request)

    with pytest.raises(ExternalServiceError, match="Error communicating with products service"):
        ProductsClient(_http(handler)).get_product_by_id(1)


def test_get_product_timeout_is_wrapped():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ExternalServiceError):
        ProductsClient(_http(handler)).get_product_by_id(1)


def test_get_product_server_error_is_wrapped():
    client = ProductsClient(_http(lambda request: httpx.Response(500, text="boom")))

    with pytest.raises(ExternalServiceError):
        client.get_product_by_id(1)


def test_get_product_invalid_json_logs_error(caplog):
    client = ProductsClient(_http(lambda request: httpx.Response(200, content=b"{ invalid-json ")))

    with pytest.raises(ExternalServiceError, match="Error communicating with products service"):
        client.get_product_by_id(7)

    errors = _orderflow_records(caplog, logging.ERROR)
    assert len(errors) == 1
    assert "Error fetching product" in errors[0].getMessage()


def test_create_payment_posts_camel_case_and_logs(caplog):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=PAYMENT_JSON)

    payment = PaymentClient(_http(handler)).create_payment("1", Decimal("50.00"))

    assert payment.payment_id == "pay_1"
    assert payment.order_id == "1"
    assert payment.total_amount == Decimal("50.0")
    assert payment.qr_code == "qr"
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/paymentservice/v1/payments"
    assert json.loads(seen[0].content) == {"orderId": "1", "totalAmount": 50.0}

    messages = [r.getMessage() for r in _orderflow_records(caplog, logging.INFO)]
    assert any("Creating payment" in m for m in messages)
    assert any("Payment created successfully" in m for m in messages)


def test_create_payment_non_success_returns_none_and_warns(caplog):
    client = PaymentClient(_http(lambda request: httpx.Response(400, text="bad")))

    assert client.create_payment("999", Decimal("1.00")) is None

    warnings = _orderflow_records(caplog, logging.WARNING)
    assert len(warnings) == 1
    assert "Failed to create payment" in warnings[0].getMessage()


def test_create_payment_transport_error_is_wrapped_and_logged(caplog):
    def handler(request):
        raise httpx.ConnectError("Network", request=request)

    with pytest.raises(ExternalServiceError, match="Error communicating with payment service"):
        PaymentClient(_http(handler)).create_payment("1", Decimal("10.00"))

    errors = _orderflow_records(caplog, logging.ERROR)
    assert len(errors) == 1
    assert "Error creating payment" in errors[0].getMessage()
