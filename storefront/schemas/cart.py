# storefront/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    `color` / `size` may be omitted for products without that option.
    Quantity is checked by the reconciler so out-of-range values produce
    the same error body as the other cart rejections.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    color: str | None = Field(default=None, max_length=50)
    size: str | None = Field(default=None, max_length=20)
    quantity: int = 1

    @field_validator("color", "size")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line.

    A quantity of 0 or below removes the line.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, including product snapshot and
    line_total.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    selected_color: str
    selected_size: str
    quantity: int
    product_name: str | None = None
    product_image_url: str | None = None
    unit_price: float
    line_total: float
    available: int
    created_at: datetime


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_quantity: int
    total_price: float


class CartCount(SQLModel):
    count: int
