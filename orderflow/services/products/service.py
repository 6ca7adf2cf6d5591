"""Catalog CRUD with display-ready ordering."""

from orderflow.common.errors import NotFoundError
from orderflow.common.logging import logger
from orderflow.services.products.models import Category, Product
from orderflow.services.products.repository import ProductRepository
from orderflow.services.products.schemas import (
    ProductCreateRequest,
    ProductResponse,
    ProductUpdateRequest,
)


class ProductService:
    """Thin pass-through over `ProductRepository` returning response views."""

    def __init__(self, repository: ProductRepository) -> None:
        self.repository = repository

    def _require(self, product_id: int) -> Product:
        product = self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return product

    def get_product(self, product_id: int) -> ProductResponse:
        return ProductResponse.model_validate(self._require(product_id))

    def list_products(self) -> list[ProductResponse]:
        return [ProductResponse.model_validate(p) for p in self.repository.get_all()]

    def list_active_products(self) -> list[ProductResponse]:
        return [ProductResponse.model_validate(p) for p in self.repository.get_active()]

    def list_by_category(self, category: Category) -> list[ProductResponse]:
        return [ProductResponse.model_validate(p) for p in self.repository.get_by_category(category)]

    def create_product(self, req: ProductCreateRequest) -> ProductResponse:
        product = self.repository.add(Product(**req.model_dump()))
        logger.info("product created id=%s name=%s", product.id, product.name)
        return ProductResponse.model_validate(product)

    def update_product(self, product_id: int, req: ProductUpdateRequest) -> ProductResponse:
        """Replace every editable field; `updated_at` always advances."""

        product = self._require(product_id)
        for field, value in req.model_dump().items():
            setattr(product, field, value)
        product = self.repository.update(product)
        logger.info("product updated id=%s", product.id)
        return ProductResponse.model_validate(product)

    def delete_product(self, product_id: int) -> None:
        if not self.repository.delete(product_id):
            raise NotFoundError(f"Product with ID {product_id} not found")
        logger.info("product deleted id=%s", product_id)
