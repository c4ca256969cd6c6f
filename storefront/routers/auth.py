# storefront/routers/auth.py
from fastapi import APIRouter, status

from storefront.core.supabase_client import supabase_public
from storefront.schemas.auth import (
    PasswordResetRequest,
    SessionRead,
    SignInRequest,
    SignUpRequest,
    SignUpResult,
)
from storefront.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

service = AuthService(supabase_public)


@router.post("/signup", response_model=SignUpResult, status_code=status.HTTP_201_CREATED)
def sign_up(payload: SignUpRequest):
    """
    Register with email + password via Supabase Auth.

    If email confirmation is enabled, `confirmation_required` is true and
    no session is issued until the user verifies their email.
    """
    return service.sign_up(payload)


@router.post("/signin", response_model=SessionRead)
def sign_in(payload: SignInRequest):
    """
    Exchange email + password for Supabase access/refresh tokens.
    """
    return service.sign_in(payload)


@router.post("/password-reset", status_code=status.HTTP_202_ACCEPTED)
def request_password_reset(payload: PasswordResetRequest) -> dict[str, str]:
    """
    Send a password reset email.
    """
    service.request_password_reset(payload)
    return {"message": "If the account exists, a reset link has been sent"}
