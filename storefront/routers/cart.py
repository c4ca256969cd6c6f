# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.user import Profile
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartCount, CartItemCreate, CartItemUpdate, CartSummary
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=CartSummary)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Get current user's cart summary, newest lines first.
    """
    return service.get_cart_summary(session, current_user.id)


@router.get("/count", response_model=CartCount)
def get_cart_count(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Number of lines in the current user's cart.
    """
    return service.count_items(session, current_user.id)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Add a product variant to the current user's cart.

    Adding a variant already in the cart merges the quantities.
    Stock rejections come back as 409 with a `code` of
    out_of_stock | already_at_max | insufficient_stock (+ `remaining`).
    """
    return service.add_to_cart(session, current_user.id, payload)


@router.patch("/{item_id}", response_model=CartSummary)
def update_cart_item(
    item_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Set the quantity of a cart line. Quantity <= 0 removes it.
    """
    return service.update_quantity(
        session=session,
        user_id=current_user.id,
        item_id=item_id,
        payload=payload,
    )


@router.delete("/{item_id}", response_model=CartSummary)
def remove_cart_item(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Remove a line from the cart.
    """
    return service.remove_item(session, current_user.id, item_id)


@router.delete("", response_model=CartSummary)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Clear the entire cart.
    """
    return service.clear_cart(session, current_user.id)
