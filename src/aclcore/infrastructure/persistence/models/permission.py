"""SQLAlchemy models for the API and entity permission tables."""

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from aclcore.infrastructure.persistence.database import Base


class ApiPermissionModel(Base):
    """SQLAlchemy model for the acl_api_permission table.

    Attributes:
        id: Auto-incrementing primary key.
        role_id: Foreign key to acl_role.
        api_name: Name of the granted platform API.
    """

    __tablename__ = "acl_api_permission"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("acl_role.id"),
        nullable=False,
        index=True,
    )
    api_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Platform API name, e.g. 'listVirtualMachines'",
    )

    __table_args__ = (
        UniqueConstraint("role_id", "api_name", name="uq_acl_api_permission_role_api"),
    )

    def __repr__(self) -> str:
        return f"<ApiPermission(role_id={self.role_id}, api_name={self.api_name})>"


class EntityPermissionModel(Base):
    """SQLAlchemy model for the acl_entity_permission table.

    Rows are owned by the resource-level permission store and are deleted
    together with their role.

    Attributes:
        id: Auto-incrementing primary key.
        role_id: Foreign key to acl_role.
        entity_type: Resource type.
        entity_id: Resource identifier.
        access_type: Kind of access.
        permission: 'allow' or 'deny'.
    """

    __tablename__ = "acl_entity_permission"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("acl_role.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    entity_type: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    access_type: Mapped[str] = mapped_column(String(100), nullable=False)
    permission: Mapped[str] = mapped_column(String(10), nullable=False, default="allow")

    __table_args__ = (
        Index("ix_acl_entity_permission_entity", "entity_type", "entity_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<EntityPermission(role_id={self.role_id}, entity={self.entity_type}:"
            f"{self.entity_id}, access={self.access_type})>"
        )
