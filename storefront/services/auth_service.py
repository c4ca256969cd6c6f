# storefront/services/auth_service.py
import logging
import uuid
from collections.abc import Callable

from supabase import AuthError, Client

from storefront.core.config import get_settings
from storefront.core.exceptions import AuthProviderError, InvalidCredentials
from storefront.schemas.auth import (
    PasswordResetRequest,
    SessionRead,
    SignInRequest,
    SignUpRequest,
    SignUpResult,
)

settings = get_settings()
logger = logging.getLogger(__name__)


class AuthService:
    """
    Thin wrapper over Supabase Auth (email + password).

    The backend never sees password hashes; it forwards credentials to
    Supabase and hands tokens back to the client. Profiles are created
    lazily by `get_current_user` on the first authenticated request.
    """

    def __init__(self, client_factory: Callable[[], Client]):
        self.client_factory = client_factory

    def sign_up(self, payload: SignUpRequest) -> SignUpResult:
        try:
            res = self.client_factory().auth.sign_up(
                {
                    "email": payload.email,
                    "password": payload.password,
                    "options": {"data": {"full_name": payload.full_name}},
                }
            )
        except AuthError as exc:
            logger.info("Sign-up rejected for %s: %s", payload.email, exc.message)
            raise AuthProviderError(exc.message) from exc

        if res.user is None:
            raise AuthProviderError("Sign-up did not return a user")

        logger.info("Signed up %s", res.user.id)
        return SignUpResult(
            user_id=uuid.UUID(str(res.user.id)),
            email=res.user.email or payload.email,
            confirmation_required=res.session is None,
        )

    def sign_in(self, payload: SignInRequest) -> SessionRead:
        try:
            res = self.client_factory().auth.sign_in_with_password(
                {"email": payload.email, "password": payload.password}
            )
        except AuthError as exc:
            logger.info("Sign-in rejected for %s: %s", payload.email, exc.message)
            raise InvalidCredentials() from exc

        if res.session is None or res.user is None:
            raise InvalidCredentials()

        return SessionRead(
            access_token=res.session.access_token,
            refresh_token=res.session.refresh_token,
            expires_in=res.session.expires_in,
            user_id=uuid.UUID(str(res.user.id)),
            email=res.user.email or payload.email,
        )

    def request_password_reset(self, payload: PasswordResetRequest) -> None:
        """
        Ask Supabase to email a reset link.
        """
        try:
            self.client_factory().auth.reset_password_for_email(
                payload.email,
                {"redirect_to": settings.PASSWORD_RESET_REDIRECT_URL},
            )
        except AuthError as exc:
            logger.warning("Password reset failed for %s: %s", payload.email, exc.message)
            raise AuthProviderError(exc.message) from exc
