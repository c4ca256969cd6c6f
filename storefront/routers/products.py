# storefront/routers/products.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import (
    ProductAvailability,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = Query(default=50, le=100),
    only_active: bool = True,
    category: str | None = None,
):
    """
    List products, newest first.

    - Public endpoint.
    - `only_active=True` hides inactive products by default.
    """
    products = service.list_products(
        session,
        skip=skip,
        limit=limit,
        only_active=only_active,
        category=category,
    )
    return [ProductRead.from_product(p) for p in products]


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id, colors normalized to {name, hex}.
    """
    return ProductRead.from_product(service.get_product(session, product_id))


@router.get("/{product_id}/related", response_model=list[ProductRead])
def list_related_products(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    limit: int = Query(default=4, ge=1, le=20),
):
    """
    Other active products from the same category.
    """
    related = service.list_related(session, product_id, limit=limit)
    return [ProductRead.from_product(p) for p in related]


@router.get("/{product_id}/availability", response_model=ProductAvailability)
def get_availability(
    product_id: uuid.UUID,
    size: str | None = None,
    session: Session = Depends(get_session),
):
    """
    How many units can be put in a cart, for a size if given.
    """
    return service.get_availability(session, product_id, size)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    return ProductRead.from_product(service.create_product(session, payload))


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    return ProductRead.from_product(service.update_product(session, product_id, payload))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product (admin only).
    """
    service.delete_product(session, product_id)
    return None
