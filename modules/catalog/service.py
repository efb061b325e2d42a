"""
Catalog Module - Service Layer
================================
Product lookups used by the cart and checkout, in the caller's session.
"""

from typing import Optional

from sqlalchemy.orm import Session

from modules.catalog.models import Product


class CatalogService:

    def get_active_product(self, db: Session, product_id: int) -> Optional[Product]:
        return db.query(Product).filter(
            Product.id == product_id,
            Product.is_active == True,  # noqa: E712
        ).first()


# Singleton
catalog_service = CatalogService()
