"""
Declarative base, timestamp columns and ULID primary keys shared by all models.
"""
from datetime import datetime
from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from ulid import ULID


def generate_ulid() -> str:
    """26-character, lexicographically sortable id."""
    return str(ULID())


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """
    Database-maintained created_at / updated_at.

    Usage:
        class Store(Base, TimestampMixin):
            __tablename__ = "stores"
    """
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
