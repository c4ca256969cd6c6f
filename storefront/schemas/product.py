# storefront/schemas/product.py
import uuid
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

from storefront.core.config import get_settings

settings = get_settings()


class ProductColor(SQLModel):
    """
    Canonical color record. Legacy rows may store plain names; those are
    converted with the default hex.
    """

    name: str = Field(min_length=1, max_length=50)
    hex: str = Field(default=settings.DEFAULT_COLOR_HEX, max_length=9)


def normalize_color(color: Any) -> ProductColor:
    """Turn a plain color name or a {name, hex} dict into a ProductColor."""
    if isinstance(color, ProductColor):
        return color
    if isinstance(color, str):
        return ProductColor(name=color, hex=settings.DEFAULT_COLOR_HEX)
    return ProductColor.model_validate(color)


def normalize_colors(colors: list[Any] | None) -> list[ProductColor]:
    return [normalize_color(c) for c in colors or []]


def check_stock_by_size(
    sizes: list[str] | None,
    stock_by_size: dict[str, int] | None,
) -> None:
    """
    stock_by_size keys must be declared sizes, values non-negative.

    Raises:
        ValueError: on the first offending entry.
    """
    if not stock_by_size:
        return
    declared = set(sizes or [])
    for size, qty in stock_by_size.items():
        if size not in declared:
            raise ValueError(f"stock_by_size has undeclared size '{size}'")
        if qty < 0:
            raise ValueError(f"stock_by_size['{size}'] cannot be negative")


def _strip_labels(values: list[str] | None) -> list[str] | None:
    if values is None:
        return None
    cleaned = [v.strip() for v in values]
    if any(not v for v in cleaned):
        raise ValueError("labels cannot be empty")
    if len(set(cleaned)) != len(cleaned):
        raise ValueError("labels must be unique")
    return cleaned


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - slug is optional: if omitted, generated from `name`.
    - colors accept plain names or {name, hex} records.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    slug: str | None = None
    description: str | None = None
    category: str | None = Field(default=None, max_length=50)
    price: float = Field(gt=0)
    compare_at_price: float | None = Field(default=None, gt=0)
    stock: int = Field(default=0, ge=0)
    sizes: list[str] | None = None
    colors: list[ProductColor] | None = None
    stock_by_size: dict[str, int] | None = None
    image_url: str | None = None
    images: list[str] | None = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v

    @field_validator("colors", mode="before")
    @classmethod
    def coerce_colors(cls, v: Any) -> Any:
        if v is None:
            return v
        return normalize_colors(v)

    @field_validator("sizes")
    @classmethod
    def clean_sizes(cls, v: list[str] | None) -> list[str] | None:
        return _strip_labels(v)

    @model_validator(mode="after")
    def sizes_cover_stock(self) -> "ProductCreate":
        check_stock_by_size(self.sizes, self.stock_by_size)
        return self


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional; stock_by_size is checked against the
    resulting sizes in the service.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    slug: str | None = None
    description: str | None = None
    category: str | None = Field(default=None, max_length=50)
    price: float | None = Field(default=None, gt=0)
    compare_at_price: float | None = Field(default=None, gt=0)
    stock: int | None = Field(default=None, ge=0)
    sizes: list[str] | None = None
    colors: list[ProductColor] | None = None
    stock_by_size: dict[str, int] | None = None
    image_url: str | None = None
    images: list[str] | None = None
    is_active: bool | None = None

    @field_validator("name", "slug")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("colors", mode="before")
    @classmethod
    def coerce_colors(cls, v: Any) -> Any:
        if v is None:
            return v
        return normalize_colors(v)

    @field_validator("sizes")
    @classmethod
    def clean_sizes(cls, v: list[str] | None) -> list[str] | None:
        return _strip_labels(v)


class ProductRead(SQLModel):
    """
    Product representation for clients.

    `colors` is always the normalized {name, hex} form.
    """

    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    category: str | None = None
    price: float
    compare_at_price: float | None = None
    stock: int
    stock_by_size: dict[str, int] | None = None
    sizes: list[str] = []
    colors: list[ProductColor] = []
    image_url: str | None = None
    images: list[str] = []
    is_active: bool
    in_stock: bool
    discount_percent: int | None = None
    created_at: datetime

    @classmethod
    def from_product(cls, product: Any) -> "ProductRead":
        discount = None
        if product.compare_at_price and product.compare_at_price > product.price:
            discount = round(
                (product.compare_at_price - product.price)
                / product.compare_at_price
                * 100
            )

        return cls(
            id=product.id,
            name=product.name,
            slug=product.slug,
            description=product.description,
            category=product.category,
            price=product.price,
            compare_at_price=product.compare_at_price,
            stock=product.stock,
            stock_by_size=product.stock_by_size,
            sizes=product.sizes or [],
            colors=normalize_colors(product.colors),
            image_url=product.image_url,
            images=product.images or [],
            is_active=product.is_active,
            in_stock=product.stock > 0,
            discount_percent=discount,
            created_at=product.created_at,
        )


class ProductAvailability(SQLModel):
    """Ceiling for a product, optionally for one size."""

    product_id: uuid.UUID
    size: str | None = None
    available: int
    in_stock: bool
