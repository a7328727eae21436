"""
Product Repository - Data access for the menu catalog.
"""

from typing import Iterable, Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from rest_api.models import Product
from .base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """Repository for Product entities, ordered by category then name."""

    @property
    def model(self) -> type[Product]:
        return Product

    def _base_query(self) -> Select:
        return select(Product).order_by(Product.category, Product.name, Product.id)

    def find_available(self) -> Sequence[Product]:
        """Products customers can currently order."""
        query = self._base_query().where(Product.is_available.is_(True))
        return self._db.execute(query).scalars().all()

    def find_existing_ids(self, product_ids: Iterable[int]) -> set[int]:
        """Subset of product_ids that exist in the catalog."""
        ids = set(product_ids)
        if not ids:
            return set()
        rows = self._db.execute(select(Product.id).where(Product.id.in_(ids))).scalars()
        return set(rows)


def get_product_repository(db: Session) -> ProductRepository:
    """Factory function for ProductRepository."""
    return ProductRepository(db)
