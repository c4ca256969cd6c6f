# storefront/services/wishlist_service.py
import logging
import uuid

from sqlmodel import Session

from storefront.core.exceptions import ProductNotFound, WishlistItemNotFound
from storefront.models.wishlist import WishlistItem
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.wishlist import (
    WishlistItemRead,
    WishlistRead,
    WishlistToggleResult,
)

logger = logging.getLogger(__name__)


class WishlistService:
    """
    Saved products per user. One row per (user, product).
    """

    def __init__(self, wishlist_repo: WishlistRepository, product_repo: ProductRepository):
        self.wishlist_repo = wishlist_repo
        self.product_repo = product_repo

    def get_wishlist(self, session: Session, user_id: uuid.UUID) -> WishlistRead:
        items = self.wishlist_repo.list_for_user(session, user_id)
        products = self.product_repo.get_many(session, (it.product_id for it in items))

        reads: list[WishlistItemRead] = []
        for it in items:
            product = products.get(it.product_id)
            if product is None:
                continue
            reads.append(
                WishlistItemRead(
                    id=it.id,
                    product_id=product.id,
                    product_name=product.name,
                    product_slug=product.slug,
                    product_price=product.price,
                    product_image_url=product.image_url,
                    in_stock=product.stock > 0,
                    created_at=it.created_at,
                )
            )

        return WishlistRead(items=reads, total=len(reads))

    def toggle(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistToggleResult:
        """Add the product if absent, remove it if present."""
        existing = self.wishlist_repo.get_item(session, user_id, product_id)
        if existing:
            self.wishlist_repo.delete(session, existing)
            logger.info("Wishlist remove user=%s product=%s", user_id, product_id)
            return WishlistToggleResult(product_id=product_id, in_wishlist=False)

        if not self.product_repo.get_by_id(session, product_id):
            raise ProductNotFound()

        self.wishlist_repo.create(
            session, WishlistItem(user_id=user_id, product_id=product_id)
        )
        logger.info("Wishlist add user=%s product=%s", user_id, product_id)
        return WishlistToggleResult(product_id=product_id, in_wishlist=True)

    def remove(self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID) -> None:
        existing = self.wishlist_repo.get_item(session, user_id, product_id)
        if not existing:
            raise WishlistItemNotFound()
        self.wishlist_repo.delete(session, existing)
