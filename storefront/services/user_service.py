# storefront/services/user_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from storefront.core.exceptions import EmptyProfileUpdate, RoleChangeForbidden, UserNotFound
from storefront.models.user import Profile
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import UserPage, UserRead, UserRoleUpdate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for customer profiles.

    Responsibilities:
      - self-edits touch contact fields only (email and role are not editable)
      - admins manage other people's roles, never their own
      - orchestrate repository operations
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Self profile -----

    def update_me(
        self,
        session: Session,
        current_user: Profile,
        payload: UserUpdate,
    ) -> Profile:
        """
        Partial update: only fields present in the payload are written;
        null clears a field.

        Raises:
            EmptyProfileUpdate: if the payload sets nothing.
        """
        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise EmptyProfileUpdate()

        for field, value in changes.items():
            setattr(current_user, field, value)
        current_user.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, current_user)

    # ----- Admin operations -----

    def list_users(self, session: Session, skip: int, limit: int) -> UserPage:
        # one extra row tells whether another page exists
        rows = self.repo.list(session, skip=skip, limit=limit + 1)
        return UserPage(
            items=[UserRead.model_validate(p) for p in rows[:limit]],
            skip=skip,
            limit=limit,
            has_more=len(rows) > limit,
        )

    def get_user(self, session: Session, user_id: uuid.UUID) -> Profile:
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise UserNotFound()
        return user

    def update_role(
        self,
        session: Session,
        acting_admin: Profile,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> Profile:
        """
        Change another user's role.

        Raises:
            RoleChangeForbidden: the admin targets their own profile.
            UserNotFound: no profile with that id.
        """
        if user_id == acting_admin.id:
            raise RoleChangeForbidden()

        user = self.get_user(session, user_id)
        if user.role == payload.role:
            return user

        user.role = payload.role
        user.updated_at = datetime.now(timezone.utc)
        logger.info("Role of %s set to %s by %s", user_id, payload.role, acting_admin.id)
        return self.repo.update(session, user)
