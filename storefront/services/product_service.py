# storefront/services/product_service.py
import logging
import re
import uuid

from sqlmodel import Session

from storefront.core.exceptions import InvalidProduct, ProductNotFound
from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import (
    ProductAvailability,
    ProductCreate,
    ProductUpdate,
    check_stock_by_size,
)
from storefront.services.inventory import resolve_ceiling

logger = logging.getLogger(__name__)

# Columns that cannot be cleared; a null for one of these is ignored.
REQUIRED_FIELDS = {"name", "slug", "price", "stock", "is_active"}


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - slug generation & uniqueness
      - keeping stock_by_size consistent with sizes on partial updates
      - stock availability lookups
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _slugify(raw: str) -> str:
        """
        Basic slugification:
          - lowercase
          - non-alphanumeric -> '-'
          - collapse multiple '-'
          - strip leading/trailing '-'
        """
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "product"

    def _ensure_unique_slug(self, session: Session, base_slug: str) -> str:
        """
        Ensure slug is unique by appending -2, -3, ... if needed.
        """
        slug = base_slug
        i = 2
        while self.repo.get_by_slug(session, slug) is not None:
            slug = f"{base_slug}-{i}"
            i += 1
        return slug

    # ----- Products -----

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        category: str | None = None,
    ) -> list[Product]:
        return self.repo.list_products(
            session,
            skip=skip,
            limit=limit,
            only_active=only_active,
            category=category,
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise ProductNotFound()
        return product

    def list_related(
        self,
        session: Session,
        product_id: uuid.UUID,
        limit: int = 4,
    ) -> list[Product]:
        product = self.get_product(session, product_id)
        return self.repo.list_related(session, product, limit=limit)

    def get_availability(
        self,
        session: Session,
        product_id: uuid.UUID,
        size: str | None = None,
    ) -> ProductAvailability:
        product = self.get_product(session, product_id)
        available = resolve_ceiling(product, size)
        return ProductAvailability(
            product_id=product.id,
            size=size,
            available=available,
            in_stock=available > 0,
        )

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        """
        Create a new product with a unique slug.

        - If slug is provided => slugify & ensure unique.
        - Else => slugify from name & ensure unique.
        """
        base_slug = self._slugify(payload.slug or payload.name)
        slug = self._ensure_unique_slug(session, base_slug)

        data = payload.model_dump(exclude={"slug"})
        product = Product(slug=slug, **data)
        created = self.repo.create(session, product)
        logger.info("Product created id=%s slug=%s", created.id, created.slug)
        return created

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product.

        - If slug is changed, enforce uniqueness.
        - null clears optional fields and is skipped for required ones.
        - stock_by_size must still match sizes after the update.
        """
        product = self.get_product(session, product_id)
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field not in REQUIRED_FIELDS
        }

        if "slug" in changes:
            new_base_slug = self._slugify(changes.pop("slug"))
            if new_base_slug != product.slug:
                product.slug = self._ensure_unique_slug(session, new_base_slug)

        sizes = changes.get("sizes", product.sizes)
        stock_by_size = changes.get("stock_by_size", product.stock_by_size)
        try:
            check_stock_by_size(sizes, stock_by_size)
        except ValueError as exc:
            raise InvalidProduct(str(exc)) from exc

        for field, value in changes.items():
            setattr(product, field, value)

        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Delete a product. Cart and wishlist rows go with it (ON DELETE CASCADE).
        """
        product = self.get_product(session, product_id)
        self.repo.delete(session, product)
        logger.info("Product deleted id=%s", product_id)
