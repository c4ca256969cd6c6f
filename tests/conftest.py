import os
import uuid
from datetime import datetime, timedelta, timezone

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.database import get_session
from storefront.main import app
from storefront.models.product import Product
from storefront.models.user import Profile

JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(user_id: uuid.UUID, email: str, full_name: str | None = None) -> str:
    claims = {
        "sub": str(user_id),
        "email": email,
        "aud": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        "user_metadata": {"full_name": full_name} if full_name else {},
    }
    return jwt.encode(claims, JWT_SECRET, algorithm="HS256")


@pytest.fixture
def customer(session):
    profile = Profile(id=uuid.uuid4(), email="jane@example.com", full_name="Jane")
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


@pytest.fixture
def customer_headers(customer):
    return {"Authorization": f"Bearer {make_token(customer.id, customer.email)}"}


@pytest.fixture
def admin(session):
    profile = Profile(id=uuid.uuid4(), email="admin@example.com", role="admin")
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {make_token(admin.id, admin.email)}"}


@pytest.fixture
def make_product(session):
    counter = iter(range(1, 1000))

    def _make(**overrides) -> Product:
        n = next(counter)
        fields = {
            "name": f"Linen Shirt {n}",
            "slug": f"linen-shirt-{n}",
            "price": 49.0,
            "stock": 10,
        }
        fields.update(overrides)
        product = Product(**fields)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make
