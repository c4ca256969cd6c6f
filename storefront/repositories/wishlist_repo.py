# storefront/repositories/wishlist_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.database import store_errors
from storefront.models.wishlist import WishlistItem


class WishlistRepository:

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[WishlistItem]:
        stmt = (
            select(WishlistItem)
            .where(WishlistItem.user_id == user_id)
            .order_by(col(WishlistItem.created_at).desc())
        )
        with store_errors(session, "list wishlist"):
            return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
        )
        with store_errors(session, "get wishlist item"):
            return session.exec(stmt).first()

    def create(self, session: Session, item: WishlistItem) -> WishlistItem:
        with store_errors(session, "add wishlist item"):
            session.add(item)
            session.commit()
            session.refresh(item)
        return item

    def delete(self, session: Session, item: WishlistItem) -> None:
        with store_errors(session, "delete wishlist item"):
            session.delete(item)
            session.commit()
