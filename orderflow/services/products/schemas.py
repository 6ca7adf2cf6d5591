"""API request/response schemas for products endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from orderflow.common.schemas import CamelModel, Money
from orderflow.services.products.models import Category


class ProductCreateRequest(CamelModel):
    """Payload accepted by `POST /api/products`."""

    name: str = Field(min_length=1, max_length=120)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category: Category
    active: bool = True
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=500)


class ProductUpdateRequest(ProductCreateRequest):
    """Full replacement payload accepted by `PUT /api/products/{id}`."""


class ProductResponse(CamelModel):
    id: int
    name: str
    price: Money
    category: Category
    active: bool
    description: str | None = None
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime
