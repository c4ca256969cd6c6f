# storefront/repositories/cart_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import func
from sqlmodel import Session, col, select

from storefront.core.exceptions import CartConflict
from storefront.database import store_errors
from storefront.models.cart import CartItem


class CartRepository:
    """
    Data access layer for cart lines.

    - Pure DB operations (CRUD + queries).
    - Failures surface as StoreUnavailable / CartConflict.
    - "Not found" is always a None result, never an exception.
    """

    # ----- Queries -----

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        """Lines for a user, newest first."""
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(col(CartItem.created_at).desc())
        )
        with store_errors(session, "list cart"):
            return list(session.exec(stmt).all())

    def find_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        color: str,
        size: str,
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id,
            CartItem.selected_color == color,
            CartItem.selected_size == size,
        )
        with store_errors(session, "find cart line"):
            return session.exec(stmt).first()

    def get_by_id(self, session: Session, item_id: uuid.UUID) -> CartItem | None:
        with store_errors(session, "get cart line"):
            return session.get(CartItem, item_id)

    def count_for_user(self, session: Session, user_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(CartItem).where(CartItem.user_id == user_id)
        with store_errors(session, "count cart"):
            return session.exec(stmt).one()

    # ----- Writes -----

    def insert(
        self,
        session: Session,
        *,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        color: str,
        size: str,
        quantity: int,
    ) -> CartItem:
        item = CartItem(
            user_id=user_id,
            product_id=product_id,
            selected_color=color,
            selected_size=size,
            quantity=quantity,
        )
        with store_errors(session, "insert cart line", conflict=CartConflict):
            session.add(item)
            session.commit()
            session.refresh(item)
        return item

    def update_quantity(self, session: Session, item: CartItem, quantity: int) -> CartItem:
        item.quantity = quantity
        item.updated_at = datetime.now(timezone.utc)
        with store_errors(session, "update cart line", conflict=CartConflict):
            session.add(item)
            session.commit()
            session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        with store_errors(session, "delete cart line"):
            session.delete(item)
            session.commit()

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        stmt = select(CartItem).where(CartItem.user_id == user_id)
        with store_errors(session, "clear cart"):
            for row in session.exec(stmt).all():
                session.delete(row)
            session.commit()
