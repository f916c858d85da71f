"""
Store model.

Each store carries a nested-set interval: B is a descendant-or-self of A
exactly when A.left <= B.left and B.right <= A.right. Intervals are assigned
once by the tree encoder and never rebalanced.
"""
from sqlalchemy import String, ForeignKey, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column

from grocery.core.database.base import Base, TimestampMixin, generate_ulid


class Store(Base, TimestampMixin):
    """A store, region or any other node of the organization tree."""
    __tablename__ = "stores"
    __table_args__ = (
        Index("ix_stores_interval", "lft", "rgt"),
    )
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    
    # Tree shape only; the nested-set interval is what access checks use
    parent_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("stores.id", ondelete="RESTRICT"),
        nullable=True,
        index=True
    )
    
    # "left" and "right" are reserved words in SQL
    left: Mapped[int] = mapped_column("lft", Integer, nullable=False)
    right: Mapped[int] = mapped_column("rgt", Integer, nullable=False)
    
    def __repr__(self) -> str:
        return f"<Store(id={self.id}, name={self.name!r}, left={self.left}, right={self.right})>"
