"""
Store Configuration Model: singleton row keyed by "store_config".
"""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

STORE_CONFIG_KEY = "store_config"


class StoreConfig(Base):
    """Banner, discount and table count shown by the dashboards."""

    __tablename__ = "store_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(50), default=STORE_CONFIG_KEY, unique=True, nullable=False)
    banner_text: Mapped[str] = mapped_column(Text, default="", nullable=False)
    discount_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_banner_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    total_tables: Mapped[int] = mapped_column(Integer, default=10, nullable=False)

    def __repr__(self) -> str:
        return f"<StoreConfig(total_tables={self.total_tables}, banner_active={self.is_banner_active})>"
