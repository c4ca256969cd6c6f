# storefront/services/inventory.py
from storefront.models.product import Product
from storefront.schemas.product import normalize_colors


def resolve_ceiling(product: Product, selected_size: str | None) -> int:
    """
    Return how many units of `product` can be held in a cart for the
    selected size.

    A size present in `stock_by_size` is authoritative, including 0 (sold
    out in that size). Otherwise the overall `stock` applies.
    """
    stock_by_size = product.stock_by_size or {}
    if selected_size and selected_size in stock_by_size:
        return max(int(stock_by_size[selected_size]), 0)
    return max(product.stock, 0)


def color_names(product: Product) -> list[str]:
    return [c.name for c in normalize_colors(product.colors)]


def has_sizes(product: Product) -> bool:
    return bool(product.sizes)


def has_colors(product: Product) -> bool:
    return bool(product.colors)
