# storefront/services/cart_reconciler.py
"""
Merge-or-insert decision for adding a product variant to a cart.

Everything here is pure: the caller loads the product and the user's
current lines, asks for a decision, then performs the single write it
describes.
"""
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from storefront.core.config import get_settings
from storefront.core.exceptions import (
    AlreadyAtMax,
    ColorRequired,
    InsufficientStock,
    InvalidQuantity,
    OutOfStock,
    SizeRequired,
    StockLimitExceeded,
    UnknownVariant,
)
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.services.inventory import (
    color_names,
    has_colors,
    has_sizes,
    resolve_ceiling,
)

settings = get_settings()


@dataclass(frozen=True)
class Variant:
    color: str
    size: str


@dataclass(frozen=True)
class CartDecision:
    """
    What the caller must write.

    - action="insert": create a line for `variant` with `quantity`
    - action="update": set `line` to `quantity`
    """

    action: Literal["insert", "update"]
    product_id: uuid.UUID
    variant: Variant
    quantity: int
    ceiling: int
    line: CartItem | None = None


def validate_selection(
    product: Product,
    color: str | None,
    size: str | None,
    requested_qty: int,
) -> None:
    """
    Fail-fast checks, in order:
      1. quantity >= 1
      2. product not out of stock overall
      3. size chosen when the product has sizes
      4. color chosen when the product has colors

    A selection for a dimension the product does not offer, or a value not
    among its options, is rejected as UnknownVariant.
    """
    if requested_qty < 1:
        raise InvalidQuantity()

    if product.stock == 0:
        raise OutOfStock()

    if has_sizes(product):
        if not size:
            raise SizeRequired()
        if size not in product.sizes:
            raise UnknownVariant(f"Size '{size}' is not available for this product")
    elif size and size != settings.DEFAULT_VARIANT:
        raise UnknownVariant("This product has no size options")

    if has_colors(product):
        if not color:
            raise ColorRequired()
        if color not in color_names(product):
            raise UnknownVariant(f"Color '{color}' is not available for this product")
    elif color and color != settings.DEFAULT_VARIANT:
        raise UnknownVariant("This product has no color options")


def normalize_variant(color: str | None, size: str | None) -> Variant:
    """Empty selections are stored as the sentinel value."""
    return Variant(
        color=color or settings.DEFAULT_VARIANT,
        size=size or settings.DEFAULT_VARIANT,
    )


def find_line(
    lines: Iterable[CartItem],
    product_id: uuid.UUID,
    variant: Variant,
) -> CartItem | None:
    for line in lines:
        if (
            line.product_id == product_id
            and line.selected_color == variant.color
            and line.selected_size == variant.size
        ):
            return line
    return None


def reconcile_add(
    product: Product,
    color: str | None,
    size: str | None,
    requested_qty: int,
    existing_lines: Iterable[CartItem],
) -> CartDecision:
    """
    Decide how to add `requested_qty` of a variant to a cart.

    Runs `validate_selection` itself so it is safe to call on its own.
    CartService also calls it first, before reading the cart line;
    the second pass is a no-op for a request that already passed.

    Raises:
        CartValidationError: see `validate_selection`.
        AlreadyAtMax: the cart already holds the whole ceiling.
        InsufficientStock: some, but not all, of the request fits.
    """
    validate_selection(product, color, size, requested_qty)

    variant = normalize_variant(color, size)
    existing = find_line(existing_lines, product.id, variant)
    in_cart = existing.quantity if existing else 0

    ceiling = resolve_ceiling(product, variant.size)
    projected = in_cart + requested_qty

    if projected > ceiling:
        remaining = ceiling - in_cart
        if remaining <= 0:
            raise AlreadyAtMax()
        raise InsufficientStock(remaining)

    if existing is not None:
        return CartDecision(
            action="update",
            product_id=product.id,
            variant=variant,
            quantity=projected,
            ceiling=ceiling,
            line=existing,
        )

    return CartDecision(
        action="insert",
        product_id=product.id,
        variant=variant,
        quantity=requested_qty,
        ceiling=ceiling,
    )


def check_quantity_set(product: Product, line: CartItem, quantity: int) -> None:
    """
    Explicit quantity edit of an existing line (quantity > 0).

    Raises:
        StockLimitExceeded: quantity is above the current ceiling.
    """
    ceiling = resolve_ceiling(product, line.selected_size)
    if quantity > ceiling:
        if ceiling <= 0:
            raise OutOfStock()
        raise StockLimitExceeded(ceiling)
