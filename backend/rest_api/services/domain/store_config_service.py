"""
Store Config Service - the singleton row behind /api/config.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rest_api.models import StoreConfig, STORE_CONFIG_KEY
from shared.config.logging import rest_api_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import DatabaseError
from shared.utils.schemas import StoreConfigInput, StoreConfigOutput


class StoreConfigService:
    """Reads and replaces the store configuration, creating it on first use."""

    def __init__(self, db: Session):
        self._db = db

    def _find(self) -> StoreConfig | None:
        return self._db.scalar(
            select(StoreConfig).where(StoreConfig.key == STORE_CONFIG_KEY)
        )

    def get_or_create(self) -> StoreConfig:
        """
        The singleton row, inserted with defaults on first use.

        When two first reads race, the loser of the unique key insert reads
        the winner's row.
        """
        config = self._find()
        if config is not None:
            return config

        config = StoreConfig(key=STORE_CONFIG_KEY, total_tables=settings.default_total_tables)
        self._db.add(config)
        try:
            safe_commit(self._db)
        except IntegrityError:
            existing = self._find()
            if existing is None:
                raise DatabaseError("store config creation", error="row vanished after conflict")
            logger.debug("Store config created concurrently, using existing row")
            return existing
        except SQLAlchemyError as e:
            raise DatabaseError("store config creation", error=str(e)) from e
        logger.info("Store config created", total_tables=config.total_tables)
        return config

    def get_config(self) -> StoreConfigOutput:
        return StoreConfigOutput.model_validate(self.get_or_create())

    def total_tables(self) -> int:
        return self.get_or_create().total_tables

    def update_config(self, data: StoreConfigInput) -> StoreConfigOutput:
        config = self.get_or_create()
        for field, value in data.model_dump().items():
            setattr(config, field, value)
        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            raise DatabaseError("store config update", error=str(e)) from e

        logger.info(
            "Store config updated",
            total_tables=config.total_tables,
            banner_active=config.is_banner_active,
        )
        return StoreConfigOutput.model_validate(config)
