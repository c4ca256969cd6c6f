# storefront/repositories/user_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.database import store_errors
from storefront.models.user import Profile


class UserRepository:
    """
    Data access layer for Profile.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> Profile | None:
        """Return a Profile by primary key, or None if not found."""
        with store_errors(session, "get profile"):
            return session.get(Profile, user_id)

    def list(self, session: Session, skip: int = 0, limit: int = 50) -> list[Profile]:
        """
        Paginated profile listing, newest first.

        Args:
            skip: offset rows (for paging)
            limit: max number of rows returned
        """
        stmt = (
            select(Profile)
            .order_by(col(Profile.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        with store_errors(session, "list profiles"):
            return list(session.exec(stmt).all())

    def create(self, session: Session, profile: Profile) -> Profile:
        """Insert a new Profile and return the persisted row."""
        with store_errors(session, "create profile"):
            session.add(profile)
            session.commit()
            session.refresh(profile)
        return profile

    def update(self, session: Session, profile: Profile) -> Profile:
        """Persist changes to an existing Profile."""
        with store_errors(session, "update profile"):
            session.add(profile)
            session.commit()
            session.refresh(profile)
        return profile
