# storefront/routers/users.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.core.auth import require_admin, require_auth
from storefront.database import get_session
from storefront.models.user import Profile
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import UserPage, UserRead, UserRoleUpdate, UserUpdate
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

service = UserService(UserRepository())


@router.get("/me", response_model=UserRead)
def read_my_profile(current_user: Profile = Depends(require_auth)):
    """Profile of the signed-in customer (created on first request)."""
    return current_user


@router.patch("/me", response_model=UserRead)
def edit_my_profile(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Edit full_name, phone or avatar_url.

    An empty body is rejected with 422 `empty_profile_update`.
    """
    return service.update_me(session, current_user, payload)


@router.get("", response_model=UserPage)
def list_profiles(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
    session: Session = Depends(get_session),
    _: Profile = Depends(require_admin),
):
    """Admin: profiles, newest first, with a `has_more` flag for paging."""
    return service.list_users(session, skip, limit)


@router.get("/{user_id}", response_model=UserRead)
def read_profile(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    _: Profile = Depends(require_admin),
):
    return service.get_user(session, user_id)


@router.patch("/{user_id}/role", response_model=UserRead)
def set_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
    admin: Profile = Depends(require_admin),
):
    """
    Admin: promote a customer or demote an admin.

    Admins cannot change their own role (403 `role_change_forbidden`).
    """
    return service.update_role(session, admin, user_id, payload)
