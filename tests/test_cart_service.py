import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from storefront.core.exceptions import (
    AlreadyAtMax,
    CartConflict,
    CartItemNotFound,
    ColorRequired,
    InsufficientStock,
    ProductInactive,
    ProductNotFound,
    StockLimitExceeded,
    StoreUnavailable,
)
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemCreate, CartItemUpdate
from storefront.services.cart_service import CartService


@pytest.fixture
def service():
    return CartService(CartRepository(), ProductRepository())


def _add(service, session, user_id, product, qty=1, color=None, size=None):
    payload = CartItemCreate(product_id=product.id, color=color, size=size, quantity=qty)
    return service.add_to_cart(session, user_id, payload)


def test_add_inserts_line(service, session, customer, make_product):
    product = make_product(price=25.0, stock=5)
    summary = _add(service, session, customer.id, product, qty=2)

    assert len(summary.items) == 1
    line = summary.items[0]
    assert line.quantity == 2
    assert line.selected_color == "default"
    assert line.selected_size == "default"
    assert line.line_total == 50.0
    assert line.available == 5
    assert summary.total_quantity == 2
    assert summary.total_price == 50.0


def test_repeated_add_merges(service, session, customer, make_product):
    product = make_product(stock=10)
    _add(service, session, customer.id, product, qty=3)
    summary = _add(service, session, customer.id, product, qty=4)

    assert len(summary.items) == 1
    assert summary.items[0].quantity == 7


def test_per_size_scenario(service, session, customer, make_product):
    product = make_product(stock=10, sizes=["S", "M"], stock_by_size={"S": 2, "M": 8})

    _add(service, session, customer.id, product, qty=2, size="S")
    with pytest.raises(AlreadyAtMax):
        _add(service, session, customer.id, product, qty=1, size="S")

    _add(service, session, customer.id, product, qty=5, size="M")
    with pytest.raises(InsufficientStock) as exc_info:
        _add(service, session, customer.id, product, qty=4, size="M")
    assert exc_info.value.remaining == 3

    summary = service.get_cart_summary(session, customer.id)
    assert sorted((i.selected_size, i.quantity) for i in summary.items) == [("M", 5), ("S", 2)]


def test_color_required_before_cart_is_read(session, customer, make_product):
    product = make_product(colors=["Black", "White"])
    cart_repo = MagicMock(spec=CartRepository)
    service = CartService(cart_repo, ProductRepository())

    with pytest.raises(ColorRequired):
        _add(service, session, customer.id, product)

    cart_repo.find_item.assert_not_called()
    cart_repo.insert.assert_not_called()


def test_unknown_product(service, session, customer):
    payload = CartItemCreate(product_id=uuid.uuid4(), quantity=1)
    with pytest.raises(ProductNotFound):
        service.add_to_cart(session, customer.id, payload)


def test_inactive_product(service, session, customer, make_product):
    product = make_product(is_active=False)
    with pytest.raises(ProductInactive):
        _add(service, session, customer.id, product)


def test_summary_newest_first(service, session, customer, make_product):
    first = make_product()
    second = make_product()
    _add(service, session, customer.id, first)
    _add(service, session, customer.id, second)

    summary = service.get_cart_summary(session, customer.id)
    assert [i.product_id for i in summary.items] == [second.id, first.id]


def test_update_sets_quantity(service, session, customer, make_product):
    product = make_product(stock=10)
    item_id = _add(service, session, customer.id, product).items[0].id

    summary = service.update_quantity(session, customer.id, item_id, CartItemUpdate(quantity=6))
    assert summary.items[0].quantity == 6


@pytest.mark.parametrize("qty", [0, -3])
def test_update_to_zero_removes(service, session, customer, make_product, qty):
    product = make_product()
    item_id = _add(service, session, customer.id, product).items[0].id

    summary = service.update_quantity(session, customer.id, item_id, CartItemUpdate(quantity=qty))
    assert summary.items == []
    assert service.count_items(session, customer.id).count == 0


def test_update_above_ceiling(service, session, customer, make_product):
    product = make_product(stock=10, sizes=["S"], stock_by_size={"S": 3})
    item_id = _add(service, session, customer.id, product, size="S").items[0].id

    with pytest.raises(StockLimitExceeded) as exc_info:
        service.update_quantity(session, customer.id, item_id, CartItemUpdate(quantity=5))
    assert exc_info.value.available == 3


def test_other_users_line_is_not_found(service, session, customer, make_product):
    product = make_product()
    item_id = _add(service, session, customer.id, product).items[0].id

    with pytest.raises(CartItemNotFound):
        service.remove_item(session, uuid.uuid4(), item_id)
    with pytest.raises(CartItemNotFound):
        service.update_quantity(session, uuid.uuid4(), item_id, CartItemUpdate(quantity=2))


def test_remove_and_clear(service, session, customer, make_product):
    a, b = make_product(), make_product()
    _add(service, session, customer.id, a)
    summary = _add(service, session, customer.id, b)
    assert service.count_items(session, customer.id).count == 2

    summary = service.remove_item(session, customer.id, summary.items[0].id)
    assert len(summary.items) == 1

    summary = service.clear_cart(session, customer.id)
    assert summary.items == []
    assert service.count_items(session, customer.id).count == 0


def test_duplicate_insert_is_conflict(session, customer, make_product):
    product = make_product()
    repo = CartRepository()
    fields = dict(user_id=customer.id, product_id=product.id, color="default", size="default")
    repo.insert(session, quantity=1, **fields)

    with pytest.raises(CartConflict):
        repo.insert(session, quantity=1, **fields)

    assert repo.count_for_user(session, customer.id) == 1


def test_store_failure_is_store_unavailable(service, customer):
    session = MagicMock()
    session.exec.side_effect = OperationalError("SELECT", {}, Exception("connection reset"))

    with pytest.raises(StoreUnavailable):
        service.get_cart_summary(session, customer.id)
    session.rollback.assert_called_once()


def test_find_item_absent_is_none(session, customer, make_product):
    product = make_product(sizes=["S", "M"])
    repo = CartRepository()
    repo.insert(session, user_id=customer.id, product_id=product.id, color="default", size="S", quantity=1)

    assert repo.find_item(session, customer.id, product.id, "default", "M") is None
    found = repo.find_item(session, customer.id, product.id, "default", "S")
    assert found is not None and found.quantity == 1


def test_add_reads_only_the_matching_line(session, customer, make_product):
    product = make_product(stock=10, sizes=["S", "M"])
    cart_repo = MagicMock(wraps=CartRepository())
    service = CartService(cart_repo, ProductRepository())

    _add(service, session, customer.id, product, qty=2, size="S")
    summary = _add(service, session, customer.id, product, qty=1, size="S")

    assert summary.items[0].quantity == 3
    cart_repo.find_item.assert_called_with(session, customer.id, product.id, "default", "S")
    cart_repo.insert.assert_called_once()
    cart_repo.update_quantity.assert_called_once()
