"""SQLAlchemy model for the acl_role table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from aclcore.infrastructure.persistence.database import Base


class RoleModel(Base):
    """SQLAlchemy model for the acl_role table.

    The (domain_id, name) constraint does not cover global roles, since
    NULL never compares equal; the repository lookup enforces that namespace.

    Attributes:
        id: Auto-incrementing primary key.
        name: Role name.
        description: Optional description of the role's purpose.
        domain_id: Owning domain, NULL for global roles.
        parent_role_id: Role whose permissions are inherited.
        created_at: Timestamp when the role was created.
    """

    __tablename__ = "acl_role"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        comment="Description of the role's purpose",
    )
    domain_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("domain.id"),
        nullable=True,
        index=True,
        comment="Owning domain (NULL = global)",
    )
    parent_role_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("acl_role.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Parent role for permission inheritance",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("domain_id", "name", name="uq_acl_role_domain_name"),
        Index("ix_acl_role_domain_name", "domain_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name}, domain_id={self.domain_id})>"
