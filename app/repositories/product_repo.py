# app/repositories/product_repo.py
import uuid

from sqlmodel import Session, col, select

from app.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    def list_latest(self, session: Session, limit: int = 4) -> list[Product]:
        stmt = select(Product).order_by(col(Product.created_at).desc()).limit(limit)
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product
