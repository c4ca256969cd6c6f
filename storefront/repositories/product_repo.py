# storefront/repositories/product_repo.py
import uuid
from collections.abc import Iterable

from sqlmodel import Session, col, select

from storefront.database import store_errors
from storefront.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        with store_errors(session, "get product"):
            return session.get(Product, product_id)

    def get_many(self, session: Session, product_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, Product]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        stmt = select(Product).where(col(Product.id).in_(ids))
        with store_errors(session, "get products"):
            return {p.id: p for p in session.exec(stmt).all()}

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        with store_errors(session, "get product by slug"):
            return session.exec(stmt).first()

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        category: str | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712
        if category:
            stmt = stmt.where(Product.category == category)
        stmt = stmt.order_by(col(Product.created_at).desc()).offset(skip).limit(limit)
        with store_errors(session, "list products"):
            return list(session.exec(stmt).all())

    def list_related(
        self,
        session: Session,
        product: Product,
        limit: int = 4,
    ) -> list[Product]:
        """Active products from the same category, excluding `product`."""
        if not product.category:
            return []
        stmt = (
            select(Product)
            .where(
                Product.category == product.category,
                Product.id != product.id,
                Product.is_active == True,  # noqa: E712
            )
            .order_by(col(Product.created_at).desc())
            .limit(limit)
        )
        with store_errors(session, "list related products"):
            return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        with store_errors(session, "create product"):
            session.add(product)
            session.commit()
            session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        with store_errors(session, "update product"):
            session.add(product)
            session.commit()
            session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        with store_errors(session, "delete product"):
            session.delete(product)
            session.commit()
