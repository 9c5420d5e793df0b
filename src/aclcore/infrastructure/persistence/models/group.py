"""SQLAlchemy model for the acl_group table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from aclcore.infrastructure.persistence.database import Base


class GroupModel(Base):
    """SQLAlchemy model for the acl_group table.

    Attributes:
        id: Auto-incrementing primary key.
        name: Group name (unique within domain).
        description: Optional description.
        domain_id: Owning domain, NULL for global groups.
        created_at: Timestamp when the group was created.
    """

    __tablename__ = "acl_group"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        comment="Description of the group's purpose",
    )
    domain_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("domain.id"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("domain_id", "name", name="uq_acl_group_domain_name"),
        Index("ix_acl_group_domain_name", "domain_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name={self.name}, domain_id={self.domain_id})>"
