# storefront/models/product.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Variant dimensions:
      - sizes: ordered size labels, e.g. ["S", "M", "L"]
      - colors: legacy plain names ("Black") or {"name", "hex"} records;
        both shapes are stored as-is and normalized on read
      - stock_by_size: per-size stock; sizes missing from it fall back
        to the overall `stock`
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    category: str | None = Field(
        default=None,
        max_length=50,
        index=True,
        description="Category used for related products",
    )

    price: float = Field(
        gt=0,
        description="Unit price",
    )

    compare_at_price: float | None = Field(
        default=None,
        description="Original price shown struck through when on sale",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="Overall units in stock",
    )

    stock_by_size: dict[str, int] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    sizes: list[str] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    colors: list[Any] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    image_url: str | None = Field(
        default=None,
        description="Main image URL",
    )

    images: list[str] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
