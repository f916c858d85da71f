"""
User model.

Every user belongs to exactly one home store, which bounds the part of the
tree they may act on.
"""
from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from grocery.core.database.base import Base, TimestampMixin, generate_ulid


class User(Base, TimestampMixin):
    """A staff member: manager or employee."""
    __tablename__ = "users"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    
    # bcrypt hash
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    
    role_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    store_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("stores.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    
    role: Mapped["Role"] = relationship("Role", lazy="selectin")  # type: ignore
    store: Mapped["Store"] = relationship("Store", lazy="selectin")  # type: ignore
    
    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"
