"""HTTP surface for orders and the payment webhook."""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from orderflow.common.config import settings
from orderflow.common.db import Base, SessionLocal, engine, get_db, utcnow
from orderflow.common.errors import DomainError, NotFoundError
from orderflow.common.http import (
    database_health,
    install_request_middleware,
    register_exception_handlers,
)
from orderflow.common.logging import configure_logging, logger
from orderflow.common.metrics import metrics_response, webhooks_processed_total
from orderflow.common.startup import log_startup_config
from orderflow.common.tracing import instrument_app, setup_tracing, shutdown_tracing
from orderflow.services.orders.clients import PaymentClient, ProductsClient, build_http_client
from orderflow.services.orders.models import Order, OrderItem, OrderNumberCounter, OrderStatus
from orderflow.services.orders.repository import OrderRepository
from orderflow.services.orders.schemas import (
    OrderCreateRequest,
    OrderResponse,
    OrderStatusUpdateRequest,
    PaymentIdUpdateRequest,
    PaymentWebhookRequest,
    PaymentWebhookResponse,
)
from orderflow.services.orders.service import OrderService
from orderflow.services.orders.webhook import PaymentWebhookService

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(
    settings,
    ["postgres_dsn", "products_url", "payment_url", "http_timeout_seconds", "tracing_enabled"],
)
products_client = ProductsClient(build_http_client(settings.products_url))
payment_client = PaymentClient(build_http_client(settings.payment_url))


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Optionally create tables; close outbound HTTP clients on shutdown."""

    if settings.auto_create_schema:
        Base.metadata.create_all(
            engine,
            tables=[Order.__table__, OrderItem.__table__, OrderNumberCounter.__table__],
        )
    yield
    products_client.close()
    payment_client.close()
    shutdown_tracing()


app = FastAPI(title="Orderflow Orders", lifespan=lifespan)
instrument_app(app)
install_request_middleware(app)
register_exception_handlers(app)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(OrderRepository(db), products_client, payment_client)


def get_webhook_service(db: Session = Depends(get_db)) -> PaymentWebhookService:
    return PaymentWebhookService(OrderRepository(db))


@app.get("/api/orders", response_model=list[OrderResponse])
def list_orders(service: OrderService = Depends(get_order_service)):
    return service.list_orders()


@app.get("/api/orders/active", response_model=list[OrderResponse])
def list_active_orders(service: OrderService = Depends(get_order_service)):
    """Kitchen board: every order that is not FINALIZED."""

    return service.list_active_orders()


@app.get("/api/orders/status/{order_status}", response_model=list[OrderResponse])
def list_orders_by_status(order_status: OrderStatus, service: OrderService = Depends(get_order_service)):
    return service.list_orders_by_status(order_status)


@app.get("/api/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    order = service.get_order(order_id)
    if order is None:
        raise NotFoundError(f"Order with ID {order_id} not found")
    return order


@app.post("/api/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    req: OrderCreateRequest,
    response: Response,
    service: OrderService = Depends(get_order_service),
):
    """Create an order; payment is requested but never blocks creation."""

    order = service.create_order(req)
    response.headers["Location"] = f"/api/orders/{order.id}"
    return order


@app.patch("/api/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    req: OrderStatusUpdateRequest,
    service: OrderService = Depends(get_order_service),
):
    return service.update_status(order_id, req.status)


@app.patch("/api/orders/{order_id}/payment", response_model=OrderResponse)
def set_order_payment_id(
    order_id: str,
    req: PaymentIdUpdateRequest,
    service: OrderService = Depends(get_order_service),
):
    return service.set_payment_id(order_id, req.payment_id)


@app.delete("/api/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(order_id: str, service: OrderService = Depends(get_order_service)):
    if not service.delete_order(order_id):
        raise NotFoundError(f"Order with ID {order_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/api/webhook/payment", response_model=PaymentWebhookResponse)
def process_payment_webhook(
    webhook: PaymentWebhookRequest,
    service: PaymentWebhookService = Depends(get_webhook_service),
):
    """Apply a payment status callback; failures answer `{success: false}`."""

    logger.info(
        "Webhook received status=%s order_id=%s payment_id=%s",
        webhook.status,
        webhook.order_id,
        webhook.payment_id,
    )
    try:
        return service.process_webhook(webhook)
    except DomainError as exc:
        webhooks_processed_total.labels(service=settings.service_name, outcome="rejected").inc()
        logger.warning("webhook rejected: %s", exc.message)
        body = PaymentWebhookResponse(success=False, message=exc.message)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json", by_alias=True))


@app.get("/api/webhook/health")
def webhook_health():
    return {"status": "healthy", "timestamp": utcnow().isoformat()}


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return database_health(SessionLocal)
