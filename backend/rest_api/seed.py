"""
Seed data for development and demos.
Creates a small menu and the store configuration row.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from rest_api.models import Product, StoreConfig, STORE_CONFIG_KEY
from shared.config.logging import get_logger
from shared.config.settings import settings

logger = get_logger(__name__)


DEMO_PRODUCTS = [
    {
        "name": "Truffle Burger",
        "price_cents": 1800,
        "category": "Main",
        "image_url": "https://images.unsplash.com/photo-1568901346375-23c9450c58cd?auto=format&fit=crop&w=500&q=60",
        "description": "Juicy beef patty with truffle aioli",
    },
    {
        "name": "Lobster Pasta",
        "price_cents": 2800,
        "category": "Main",
        "image_url": "https://images.unsplash.com/photo-1563379926898-05f4575a45d8?auto=format&fit=crop&w=500&q=60",
        "description": "Fresh lobster with creamy linguine",
    },
    {
        "name": "Caesar Salad",
        "price_cents": 1200,
        "category": "Starter",
        "image_url": "https://images.unsplash.com/photo-1546793665-c74683f339c1?auto=format&fit=crop&w=500&q=60",
        "description": "Crisp romaine with parmesan crisp",
    },
    {
        "name": "Tiramisu",
        "price_cents": 1000,
        "category": "Dessert",
        "image_url": "https://images.unsplash.com/photo-1571877227200-a0d98ea607e9?auto=format&fit=crop&w=500&q=60",
        "description": "Classic Italian coffee dessert",
    },
    {
        "name": "Mojito",
        "price_cents": 800,
        "category": "Drinks",
        "image_url": "https://images.unsplash.com/photo-1551538827-9c037cb4f32a?auto=format&fit=crop&w=500&q=60",
        "description": "Refreshing mint and lime cocktail",
    },
]


def seed(db: Session) -> dict[str, int]:
    """
    Seed the demo menu and store config.
    Idempotent: only inserts into empty tables.

    Returns:
        Number of rows inserted per table.
    """
    inserted = {"product": 0, "store_config": 0}

    if db.scalar(select(Product.id).limit(1)) is None:
        db.add_all(Product(**data) for data in DEMO_PRODUCTS)
        inserted["product"] = len(DEMO_PRODUCTS)
        logger.info("Seeded demo products", count=len(DEMO_PRODUCTS))
    else:
        logger.info("Products already seeded, skipping")

    if db.scalar(select(StoreConfig.id).where(StoreConfig.key == STORE_CONFIG_KEY)) is None:
        db.add(StoreConfig(key=STORE_CONFIG_KEY, total_tables=settings.default_total_tables))
        inserted["store_config"] = 1
        logger.info("Seeded store config", total_tables=settings.default_total_tables)

    db.commit()
    return inserted
