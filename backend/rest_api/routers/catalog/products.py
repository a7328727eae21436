"""
Products router - /api/products
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import ProductCreate, ProductOutput, ProductUpdate
from rest_api.services.domain import ProductService


router = APIRouter(prefix="/api/products", tags=["catalog"])


@router.get("", response_model=list[ProductOutput])
def list_products(
    available_only: bool = False,
    db: Session = Depends(get_db),
) -> list[ProductOutput]:
    """
    Menu products ordered by category and name.

    Customer menus pass available_only=true.
    """
    return ProductService(db).list_products(available_only=available_only)


@router.get("/{product_id}", response_model=ProductOutput)
def get_product(product_id: int, db: Session = Depends(get_db)) -> ProductOutput:
    return ProductService(db).get_product(product_id)


@router.post("", response_model=ProductOutput, status_code=status.HTTP_201_CREATED)
def create_product(body: ProductCreate, db: Session = Depends(get_db)) -> ProductOutput:
    return ProductService(db).create(body)


@router.put("/{product_id}", response_model=ProductOutput)
def update_product(
    product_id: int,
    body: ProductUpdate,
    db: Session = Depends(get_db),
) -> ProductOutput:
    return ProductService(db).update(product_id, body)
