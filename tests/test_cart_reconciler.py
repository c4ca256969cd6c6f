import uuid

import pytest

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
from storefront.services.cart_reconciler import (
    check_quantity_set,
    reconcile_add,
    validate_selection,
)

USER_ID = uuid.uuid4()


def _product(**kw) -> Product:
    fields = {"name": "Hoodie", "slug": "hoodie", "price": 60.0, "stock": 10}
    fields.update(kw)
    return Product(**fields)


def _apply(decision, lines: list[CartItem]) -> list[CartItem]:
    """Play a decision against an in-memory cart."""
    if decision.action == "update":
        decision.line.quantity = decision.quantity
        return lines
    line = CartItem(
        user_id=USER_ID,
        product_id=decision.product_id,
        selected_color=decision.variant.color,
        selected_size=decision.variant.size,
        quantity=decision.quantity,
    )
    return [line, *lines]


# ---- validation ----


@pytest.mark.parametrize("qty", [0, -1])
def test_quantity_below_one_rejected(qty):
    with pytest.raises(InvalidQuantity):
        validate_selection(_product(), None, None, qty)


@pytest.mark.parametrize("qty", [1, 5])
def test_no_stock_always_out_of_stock(qty):
    product = _product(stock=0)
    existing = [
        CartItem(user_id=USER_ID, product_id=product.id, quantity=1),
    ]
    with pytest.raises(OutOfStock):
        reconcile_add(product, None, None, qty, existing)


def test_quantity_checked_before_stock():
    with pytest.raises(InvalidQuantity):
        validate_selection(_product(stock=0), None, None, 0)


def test_size_required_when_product_has_sizes():
    product = _product(sizes=["S", "M"], colors=["Black"])
    with pytest.raises(SizeRequired):
        validate_selection(product, None, None, 1)


def test_color_required_when_product_has_colors():
    product = _product(colors=["Black", {"name": "Navy", "hex": "#000080"}])
    with pytest.raises(ColorRequired):
        validate_selection(product, None, None, 1)


def test_unknown_size_rejected():
    product = _product(sizes=["S", "M"])
    with pytest.raises(UnknownVariant):
        validate_selection(product, None, "XL", 1)


def test_size_for_sizeless_product_rejected():
    with pytest.raises(UnknownVariant):
        validate_selection(_product(), None, "M", 1)


def test_structured_color_name_accepted():
    product = _product(colors=[{"name": "Navy", "hex": "#000080"}])
    validate_selection(product, "Navy", None, 1)


# ---- reconciliation ----


def test_plain_product_uses_sentinel_variant():
    decision = reconcile_add(_product(), None, None, 2, [])
    assert decision.action == "insert"
    assert decision.variant.color == "default"
    assert decision.variant.size == "default"
    assert decision.quantity == 2


def test_merge_law():
    product = _product(stock=10)
    lines = _apply(reconcile_add(product, None, None, 3, []), [])
    decision = reconcile_add(product, None, None, 4, lines)
    lines = _apply(decision, lines)

    assert decision.action == "update"
    assert len(lines) == 1
    assert lines[0].quantity == 7


def test_merge_past_ceiling_reports_remaining():
    product = _product(stock=10)
    lines = _apply(reconcile_add(product, None, None, 6, []), [])

    with pytest.raises(InsufficientStock) as exc_info:
        reconcile_add(product, None, None, 5, lines)
    assert exc_info.value.remaining == 4


def test_merge_at_ceiling_is_already_at_max():
    product = _product(stock=4)
    lines = _apply(reconcile_add(product, None, None, 4, []), [])

    with pytest.raises(AlreadyAtMax):
        reconcile_add(product, None, None, 1, lines)


def test_first_add_above_ceiling():
    with pytest.raises(InsufficientStock) as exc_info:
        reconcile_add(_product(stock=3), None, None, 5, [])
    assert exc_info.value.remaining == 3


def test_sold_out_size_is_already_at_max():
    product = _product(stock=10, sizes=["M", "L"], stock_by_size={"M": 0, "L": 5})
    with pytest.raises(AlreadyAtMax):
        reconcile_add(product, None, "M", 1, [])


def test_per_size_scenario():
    product = _product(stock=10, sizes=["S", "M"], stock_by_size={"S": 2, "M": 8})
    lines: list[CartItem] = []

    decision = reconcile_add(product, None, "S", 2, lines)
    assert decision.action == "insert"
    lines = _apply(decision, lines)

    with pytest.raises(AlreadyAtMax):
        reconcile_add(product, None, "S", 1, lines)

    decision = reconcile_add(product, None, "M", 5, lines)
    assert decision.action == "insert"
    assert decision.quantity == 5
    lines = _apply(decision, lines)

    with pytest.raises(InsufficientStock) as exc_info:
        reconcile_add(product, None, "M", 4, lines)
    assert exc_info.value.remaining == 3

    assert sorted((l.selected_size, l.quantity) for l in lines) == [("M", 5), ("S", 2)]


def test_colors_are_separate_lines():
    product = _product(stock=5, colors=["Black", "White"])
    lines = _apply(reconcile_add(product, "Black", None, 5, []), [])

    decision = reconcile_add(product, "White", None, 5, lines)
    assert decision.action == "insert"
    assert decision.variant.color == "White"


def test_other_products_lines_ignored():
    product = _product(stock=2)
    other = CartItem(user_id=USER_ID, product_id=uuid.uuid4(), quantity=2)
    decision = reconcile_add(product, None, None, 2, [other])
    assert decision.action == "insert"


# ---- explicit quantity set ----


def test_quantity_set_within_ceiling():
    product = _product(stock=10, sizes=["S"], stock_by_size={"S": 3})
    line = CartItem(user_id=USER_ID, product_id=product.id, selected_size="S", quantity=1)
    check_quantity_set(product, line, 3)


def test_quantity_set_above_ceiling():
    product = _product(stock=10, sizes=["S"], stock_by_size={"S": 3})
    line = CartItem(user_id=USER_ID, product_id=product.id, selected_size="S", quantity=1)
    with pytest.raises(StockLimitExceeded) as exc_info:
        check_quantity_set(product, line, 4)
    assert exc_info.value.available == 3


def test_quantity_set_on_sold_out_size():
    product = _product(stock=10, sizes=["S"], stock_by_size={"S": 0})
    line = CartItem(user_id=USER_ID, product_id=product.id, selected_size="S", quantity=1)
    with pytest.raises(OutOfStock):
        check_quantity_set(product, line, 1)
