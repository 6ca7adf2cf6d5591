"""HTTP surface for the product catalog."""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Response, status
from sqlalchemy.orm import Session

from orderflow.common.config import settings
from orderflow.common.db import Base, SessionLocal, engine, get_db
from orderflow.common.http import (
    database_health,
    install_request_middleware,
    register_exception_handlers,
)
from orderflow.common.logging import configure_logging
from orderflow.common.metrics import metrics_response
from orderflow.common.startup import log_startup_config
from orderflow.common.tracing import instrument_app, setup_tracing, shutdown_tracing
from orderflow.services.products.models import Category, Product
from orderflow.services.products.repository import ProductRepository
from orderflow.services.products.schemas import (
    ProductCreateRequest,
    ProductResponse,
    ProductUpdateRequest,
)
from orderflow.services.products.service import ProductService

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(
    settings,
    ["postgres_dsn", "auto_create_schema", "tracing_enabled"],
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Create the catalog table for local runs when migrations are not used."""

    if settings.auto_create_schema:
        Base.metadata.create_all(engine, tables=[Product.__table__])
    yield
    shutdown_tracing()


app = FastAPI(title="Orderflow Products", lifespan=lifespan)
instrument_app(app)
install_request_middleware(app)
register_exception_handlers(app)


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(ProductRepository(db))


@app.get("/api/products", response_model=list[ProductResponse])
def list_products(service: ProductService = Depends(get_product_service)):
    """All products, by category then name."""

    return service.list_products()


@app.get("/api/products/active", response_model=list[ProductResponse])
def list_active_products(service: ProductService = Depends(get_product_service)):
    return service.list_active_products()


@app.get("/api/products/category/{category}", response_model=list[ProductResponse])
def list_products_by_category(category: Category, service: ProductService = Depends(get_product_service)):
    return service.list_by_category(category)


@app.get("/api/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    return service.get_product(product_id)


@app.post("/api/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    req: ProductCreateRequest,
    response: Response,
    service: ProductService = Depends(get_product_service),
):
    product = service.create_product(req)
    response.headers["Location"] = f"/api/products/{product.id}"
    return product


@app.put("/api/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    req: ProductUpdateRequest,
    service: ProductService = Depends(get_product_service),
):
    return service.update_product(product_id, req)


@app.delete("/api/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return database_health(SessionLocal)
