# storefront/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    Shopping cart line for a user.

    One user cannot have 2 rows for the same
    (product, selected_color, selected_size); the unique constraint backs
    the merge-on-add rule against concurrent first inserts.
    """

    __tablename__ = "cart"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "product_id",
            "selected_color",
            "selected_size",
            name="uq_cart_user_product_variant",
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        ondelete="CASCADE",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        ondelete="CASCADE",
        index=True,
    )

    selected_color: str = Field(
        default="default",
        max_length=50,
    )

    selected_size: str = Field(
        default="default",
        max_length=20,
    )

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
