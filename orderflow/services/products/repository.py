"""Persistence adapter for the product catalog."""

from sqlalchemy import case, select
from sqlalchemy.orm import Session

from orderflow.services.products.models import Category, Product


# Sort categories by enum declaration order instead of alphabetically.
_CATEGORY_ORDER = case(
    {category: position for position, category in enumerate(Category)},
    value=Product.category,
)


class ProductRepository:
    """CRUD plus category/active queries over one request-scoped session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_id(self, product_id: int) -> Product | None:
        return self.db.get(Product, product_id)

    def get_all(self) -> list[Product]:
        stmt = select(Product).order_by(_CATEGORY_ORDER, Product.name)
        return list(self.db.execute(stmt).scalars().all())

    def get_active(self) -> list[Product]:
        stmt = select(Product).where(Product.active.is_(True)).order_by(_CATEGORY_ORDER, Product.name)
        return list(self.db.execute(stmt).scalars().all())

    def get_by_category(self, category: Category) -> list[Product]:
        stmt = select(Product).where(Product.category == category).order_by(Product.name)
        return list(self.db.execute(stmt).scalars().all())

    def add(self, product: Product) -> Product:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update(self, product: Product) -> Product:
        product.touch()
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product_id: int) -> bool:
        product = self.db.get(Product, product_id)
        if product is None:
            return False
        self.db.delete(product)
        self.db.commit()
        return True
