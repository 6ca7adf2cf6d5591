"""Typed HTTP callers for the products and payment services.

Both wrap an injected `httpx.Client` carrying the base URL and the fixed
request timeout, so tests can swap in `httpx.MockTransport`.
"""

import json
from decimal import Decimal

import httpx
from pydantic import ValidationError as SchemaError

from orderflow.common.config import settings
from orderflow.common.errors import ExternalServiceError
from orderflow.common.logging import logger
from orderflow.common.metrics import external_call_duration_seconds
from orderflow.services.orders.schemas import PaymentRecord, PaymentRequest, ProductRecord


def build_http_client(base_url: str) -> httpx.Client:
    """Process-wide client for one dependency."""

    return httpx.Client(base_url=base_url, timeout=settings.http_timeout_seconds)


class ProductsClient:
    """Resolves catalog entries by id."""

    def __init__(self, http: httpx.Client) -> None:
        self.http = http

    def get_product_by_id(self, product_id: int) -> ProductRecord | None:
        """Return the product, or None when the catalog does not know it.

        404 logs a warning; a JSON `null` body is a silent None. Anything else
        that is not a usable product raises `ExternalServiceError`.
        """

        try:
            with external_call_duration_seconds.labels(
                service=settings.service_name, dependency="products"
            ).time():
                resp = self.http.get(f"/api/products/{product_id}")
            if resp.status_code == 404:
                logger.warning("Product %s not found in catalog", product_id)
                return None
            resp.raise_for_status()
            payload = resp.json()
            if payload is None:
                return None
            return ProductRecord.model_validate(payload)
        except (httpx.HTTPError, json.JSONDecodeError, SchemaError) as exc:
            logger.error("Error fetching product %s: %s", product_id, exc, exc_info=exc)
            raise ExternalServiceError(
                f"Error communicating with products service: {exc}"
            ) from exc

    def close(self) -> None:
        self.http.close()


class PaymentClient:
    """Starts a payment for a freshly created order."""

    def __init__(self, http: httpx.Client) -> None:
        self.http = http

    def create_payment(self, order_id: str, amount: Decimal) -> PaymentRecord | None:
        """POST the payment request; None when the service refuses it."""

        logger.info("Creating payment for order %s amount=%s", order_id, amount)
        body = PaymentRequest(order_id=order_id, total_amount=amount).model_dump(mode="json", by_alias=True)
        try:
            with external_call_duration_seconds.labels(
                service=settings.service_name, dependency="payment"
            ).time():
                resp = self.http.post("/paymentservice/v1/payments", json=body)
            if not resp.is_success:
                logger.warning(
                    "Failed to create payment for order %s: status=%s body=%s",
                    order_id,
                    resp.status_code,
                    resp.text,
                )
                return None
            payload = resp.json()
            if payload is None:
                return None
            payment = PaymentRecord.model_validate(payload)
        except (httpx.HTTPError, json.JSONDecodeError, SchemaError) as exc:
            logger.error("Error creating payment for order %s: %s", order_id, exc, exc_info=exc)
            raise ExternalServiceError(
                f"Error communicating with payment service: {exc}"
            ) from exc
        logger.info("Payment created successfully order=%s payment_id=%s", order_id, payment.payment_id)
        return payment

    def close(self) -> None:
        self.http.close()
