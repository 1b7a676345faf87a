# app/services/product_service.py
from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.product import Product
from app.repositories.product_repo import ProductRepository

# How many products the storefront home page shows
LATEST_PRODUCTS_LIMIT = 4


class ProductService:
    """
    Read-only product browsing for the storefront.
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def list_latest_products(
        self,
        session: Session,
        limit: int = LATEST_PRODUCTS_LIMIT,
    ) -> list[Product]:
        return self.repo.list_latest(session, limit=limit)

    def get_product_by_slug(self, session: Session, slug: str) -> Product:
        product = self.repo.get_by_slug(session, slug)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product
