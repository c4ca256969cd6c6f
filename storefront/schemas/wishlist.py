# storefront/schemas/wishlist.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel


class WishlistItemRead(SQLModel):
    """
    Saved product with the fields a wishlist card needs.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    product_slug: str
    product_price: float
    product_image_url: str | None = None
    in_stock: bool
    created_at: datetime


class WishlistRead(SQLModel):
    items: list[WishlistItemRead]
    total: int


class WishlistToggleResult(SQLModel):
    product_id: uuid.UUID
    in_wishlist: bool
