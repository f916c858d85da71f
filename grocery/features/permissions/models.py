"""
Role model.

A role is a named, flat access-control list of permission tokens. There is no
role hierarchy and no wildcard token.
"""
from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column

from grocery.core.database.base import Base, TimestampMixin, generate_ulid


class Role(Base, TimestampMixin):
    """
    Role with its ACL.

    Examples: Manager (MANAGER), Employee (EMPLOYEE)
    """
    __tablename__ = "roles"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    
    # Stable machine-readable identifier
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    
    # Permission tokens, e.g. ["read-employee", "employees-list"]
    acl: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    
    def __repr__(self) -> str:
        return f"<Role(id={self.id}, code={self.code!r})>"
