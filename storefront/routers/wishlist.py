# storefront/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.user import Profile
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.wishlist import WishlistRead, WishlistToggleResult
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

service = WishlistService(WishlistRepository(), ProductRepository())


@router.get("", response_model=WishlistRead)
def get_my_wishlist(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """Saved products, newest first."""
    return service.get_wishlist(session, current_user.id)


@router.post("/{product_id}/toggle", response_model=WishlistToggleResult)
def toggle_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """Save the product, or un-save it if it is already saved."""
    return service.toggle(session, current_user.id, product_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    service.remove(session, current_user.id, product_id)
    return None
