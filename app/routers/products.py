# app/routers/products.py
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.product import ProductRead
from app.services.product_service import LATEST_PRODUCTS_LIMIT, ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


@router.get("", response_model=list[ProductRead])
def list_latest_products(
    session: Session = Depends(get_session),
    limit: int = Query(default=LATEST_PRODUCTS_LIMIT, ge=1, le=100),
):
    """
    Newest products first (public).
    """
    return service.list_latest_products(session, limit=limit)


@router.get("/{slug}", response_model=ProductRead)
def get_product(
    slug: str,
    session: Session = Depends(get_session),
):
    """
    Get a single product by slug (public).
    """
    return service.get_product_by_slug(session, slug)
