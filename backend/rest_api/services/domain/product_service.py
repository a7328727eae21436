"""
Product Service - menu catalog management.

Usage:
    from rest_api.services.domain import ProductService

    service = ProductService(db)
    products = service.list_products(available_only=True)
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rest_api.models import Product
from rest_api.repositories import ProductRepository
from shared.config.logging import catalog_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import DatabaseError, ProductNotFoundError
from shared.utils.schemas import ProductCreate, ProductOutput, ProductUpdate


class ProductService:
    """
    Service for product management.

    Business rules:
    - Prices are integer cents
    - Unavailable products stay listed for staff but hidden from customers
    - Price changes never affect existing orders (items keep their own price)
    """

    def __init__(self, db: Session):
        self._db = db
        self._repo = ProductRepository(db)

    def list_products(self, available_only: bool = False) -> list[ProductOutput]:
        products = self._repo.find_available() if available_only else self._repo.find_all()
        return [ProductOutput.model_validate(p) for p in products]

    def get_product(self, product_id: int) -> ProductOutput:
        return ProductOutput.model_validate(self._get_or_404(product_id))

    def create(self, data: ProductCreate) -> ProductOutput:
        product = Product(**data.model_dump())
        try:
            self._repo.add(product)
            safe_commit(self._db)
        except SQLAlchemyError as e:
            raise DatabaseError("product creation", error=str(e)) from e

        logger.info("Product created", product_id=product.id, name=product.name)
        return ProductOutput.model_validate(product)

    def update(self, product_id: int, data: ProductUpdate) -> ProductOutput:
        """Apply only the fields present in the request."""
        product = self._get_or_404(product_id)
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(product, field, value)
        product.touch()
        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            raise DatabaseError("product update", product_id=product_id, error=str(e)) from e

        logger.info("Product updated", product_id=product.id, fields=sorted(changes))
        return ProductOutput.model_validate(product)

    def _get_or_404(self, product_id: int) -> Product:
        product = self._repo.find_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product
