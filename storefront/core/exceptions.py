# storefront/core/exceptions.py
from typing import Any

from fastapi import status


class StorefrontError(Exception):
    """
    Base class for domain errors raised by services.

    Each subclass carries the HTTP status it maps to and a short machine
    readable `code`. The FastAPI handler in `main.py` renders them as
    {"detail": ..., "code": ...} plus any `extra()` fields.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "storefront_error"
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def extra(self) -> dict[str, Any]:
        return {}


# ---- Not found ----


class ProductNotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "product_not_found"
    default_detail = "Product not found"


class CartItemNotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "cart_item_not_found"
    default_detail = "Item not found in cart"


class WishlistItemNotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "wishlist_item_not_found"
    default_detail = "Product not found in your wishlist"


class UserNotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "user_not_found"
    default_detail = "User not found"


# ---- Permissions ----


class RoleChangeForbidden(StorefrontError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "role_change_forbidden"
    default_detail = "Admins cannot change their own role"


# ---- Validation ----


class CartValidationError(StorefrontError):
    """Bad add/update request. Never retried."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_cart_request"


class InvalidQuantity(CartValidationError):
    code = "invalid_quantity"
    default_detail = "Quantity must be at least 1"


class SizeRequired(CartValidationError):
    code = "size_required"
    default_detail = "Please select a size"


class ColorRequired(CartValidationError):
    code = "color_required"
    default_detail = "Please select a color"


class UnknownVariant(CartValidationError):
    code = "unknown_variant"
    default_detail = "Selected option is not offered for this product"


class InvalidProduct(StorefrontError):
    status_code = 422
    code = "invalid_product"
    default_detail = "Product data is invalid"


class EmptyProfileUpdate(StorefrontError):
    status_code = 422
    code = "empty_profile_update"
    default_detail = "Nothing to update"


class ProductInactive(CartValidationError):
    code = "product_inactive"
    default_detail = "Product is inactive"


# ---- Stock rejections ----


class StockRejection(StorefrontError):
    """Business-rule rejection, shown to the customer as-is."""

    status_code = status.HTTP_409_CONFLICT
    code = "stock_rejected"


class OutOfStock(StockRejection):
    code = "out_of_stock"
    default_detail = "Product is out of stock"


class AlreadyAtMax(StockRejection):
    code = "already_at_max"
    default_detail = "This item is already in your cart at maximum available quantity"


class InsufficientStock(StockRejection):
    code = "insufficient_stock"

    def __init__(self, remaining: int):
        self.remaining = remaining
        super().__init__(f"Only {remaining} more available in stock")

    def extra(self) -> dict[str, Any]:
        return {"remaining": self.remaining}


class StockLimitExceeded(StockRejection):
    """Explicit quantity set above the ceiling."""

    code = "stock_limit_exceeded"

    def __init__(self, available: int):
        self.available = available
        super().__init__(f"Only {available} available in stock")

    def extra(self) -> dict[str, Any]:
        return {"available": self.available}


# ---- Store ----


class StoreUnavailable(StorefrontError):
    """
    Persistence call failed. The caller may retry the whole operation
    after re-reading the cart.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store_unavailable"
    default_detail = "Storage is temporarily unavailable, please retry"


class StoreConflict(StoreUnavailable):
    """A unique key was taken by a concurrent or earlier write."""

    status_code = status.HTTP_409_CONFLICT
    code = "store_conflict"
    default_detail = "Resource was changed by another request, please retry"


class CartConflict(StoreConflict):
    """A concurrent request wrote the same cart line first."""

    code = "cart_conflict"
    default_detail = "Cart was changed by another request, please retry"


# ---- Auth provider ----


class AuthProviderError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "auth_error"
    default_detail = "Authentication request failed"


class InvalidCredentials(AuthProviderError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"
    default_detail = "Incorrect email or password"
