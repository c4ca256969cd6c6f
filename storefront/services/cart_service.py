# storefront/services/cart_service.py
import logging
import uuid

from sqlmodel import Session

from storefront.core.exceptions import (
    CartItemNotFound,
    ProductInactive,
    ProductNotFound,
    StockRejection,
)
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartCount,
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartSummary,
)
from storefront.services.cart_reconciler import (
    check_quantity_set,
    normalize_variant,
    reconcile_add,
    validate_selection,
)
from storefront.services.inventory import resolve_ceiling

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and active flag
      - validate variant selection before touching the cart
      - merge-or-insert via the reconciler, one write per add
      - treat quantity <= 0 on update as removal
      - compute line totals and cart totals
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise ProductNotFound()
        if not product.is_active:
            raise ProductInactive()
        return product

    def _get_own_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> CartItem:
        item = self.cart_repo.get_by_id(session, item_id)
        if not item or item.user_id != user_id:
            raise CartItemNotFound()
        return item

    # ---- public operations ----

    def get_cart_summary(self, session: Session, user_id: uuid.UUID) -> CartSummary:
        """
        Return full cart summary:
          - list of CartItemRead (newest first, with line_total)
          - total_quantity
          - total_price
        """
        items = self.cart_repo.list_for_user(session, user_id)
        products = self.product_repo.get_many(session, (it.product_id for it in items))

        item_reads: list[CartItemRead] = []
        total_qty = 0
        total_price = 0.0

        for it in items:
            product = products.get(it.product_id)
            if product is None:
                # product row vanished between queries; cascade will drop the line
                continue

            line_total = it.quantity * product.price
            total_qty += it.quantity
            total_price += line_total

            item_reads.append(
                CartItemRead(
                    id=it.id,
                    user_id=it.user_id,
                    product_id=it.product_id,
                    selected_color=it.selected_color,
                    selected_size=it.selected_size,
                    quantity=it.quantity,
                    product_name=product.name,
                    product_image_url=product.image_url,
                    unit_price=product.price,
                    line_total=line_total,
                    available=resolve_ceiling(product, it.selected_size),
                    created_at=it.created_at,
                )
            )

        return CartSummary(
            items=item_reads,
            total_quantity=total_qty,
            total_price=total_price,
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add a product variant to the user's cart.

        Rules:
          - product must exist and be active
          - selection is validated before the cart is read
          - only the line for the same variant is read; it is merged into
          - the resulting quantity may not exceed the variant's ceiling
        """
        product = self._get_valid_product(session, payload.product_id)

        try:
            validate_selection(product, payload.color, payload.size, payload.quantity)
            variant = normalize_variant(payload.color, payload.size)
            existing = self.cart_repo.find_item(
                session, user_id, product.id, variant.color, variant.size
            )
            decision = reconcile_add(
                product,
                payload.color,
                payload.size,
                payload.quantity,
                [existing] if existing else [],
            )
        except StockRejection as exc:
            logger.info(
                "Cart add rejected user=%s product=%s reason=%s",
                user_id,
                product.id,
                exc.code,
            )
            raise

        if decision.action == "update":
            self.cart_repo.update_quantity(session, decision.line, decision.quantity)
        else:
            self.cart_repo.insert(
                session,
                user_id=user_id,
                product_id=product.id,
                color=decision.variant.color,
                size=decision.variant.size,
                quantity=decision.quantity,
            )

        logger.info(
            "Cart %s user=%s product=%s color=%s size=%s qty=%d ceiling=%d",
            decision.action,
            user_id,
            product.id,
            decision.variant.color,
            decision.variant.size,
            decision.quantity,
            decision.ceiling,
        )
        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Set the quantity of a cart line.

        quantity <= 0 removes the line; above the ceiling => StockLimitExceeded.
        """
        item = self._get_own_item(session, user_id, item_id)

        if payload.quantity <= 0:
            return self.remove_item(session, user_id, item_id)

        product = self._get_valid_product(session, item.product_id)
        check_quantity_set(product, item, payload.quantity)

        self.cart_repo.update_quantity(session, item, payload.quantity)
        logger.info("Cart set user=%s item=%s qty=%d", user_id, item_id, payload.quantity)
        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> CartSummary:
        """
        Remove a line from the cart and return the updated summary.
        """
        item = self._get_own_item(session, user_id, item_id)
        self.cart_repo.delete(session, item)
        logger.info("Cart remove user=%s item=%s", user_id, item_id)
        return self.get_cart_summary(session, user_id)

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        self.cart_repo.clear_user_cart(session, user_id)
        logger.info("Cart cleared user=%s", user_id)
        return CartSummary(items=[], total_quantity=0, total_price=0.0)

    def count_items(self, session: Session, user_id: uuid.UUID) -> CartCount:
        return CartCount(count=self.cart_repo.count_for_user(session, user_id))
