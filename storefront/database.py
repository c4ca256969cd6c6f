# storefront/database.py
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, create_engine, Session

from storefront.core.config import get_settings
from storefront.core.exceptions import StoreConflict, StoreUnavailable

settings = get_settings()
logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# Supabase Postgres connection (via pooler)
#
# - sslmode=require   : enforce SSL when running in the cloud
# - pool_size=1       : keep only 1 connection to the Supabase pooler
# - max_overflow=0    : do not open extra connections beyond the pool
# - pool_pre_ping=True: validate connections before using them
#
# Supabase Session mode limits the number of clients. If each backend
# process opens many connections (SQLAlchemy default pool_size 5+),
# you can easily hit:
#   "MaxClientsInSessionMode: max clients reached"
#
# Non-Postgres URLs (local SQLite) are used as given.
# ---------------------------------------------------------


def build_engine(db_url: str):
    if not db_url.startswith("postgres"):
        return create_engine(db_url, echo=False)

    # Append sslmode=require if it is not already present
    if "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + "&sslmode=require"
        else:
            db_url = db_url + "?sslmode=require"

    return create_engine(
        db_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session


@contextmanager
def store_errors(
    session: Session,
    action: str,
    conflict: type[StoreConflict] = StoreConflict,
) -> Iterator[None]:
    """
    Translate database failures into domain errors.

    Any SQLAlchemy error rolls the session back and is re-raised as
    StoreUnavailable; a unique-key violation becomes `conflict` so the
    caller can re-read and retry.
    """
    try:
        yield
    except IntegrityError as exc:
        session.rollback()
        logger.warning("Store conflict during %s: %s", action, exc.orig)
        raise conflict() from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Store failure during %s: %s", action, exc)
        raise StoreUnavailable() from exc
