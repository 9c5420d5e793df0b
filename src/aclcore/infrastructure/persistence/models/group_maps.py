"""SQLAlchemy models for the group membership junction tables."""

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from aclcore.infrastructure.persistence.database import Base


class GroupRoleMapModel(Base):
    """Junction table attaching roles to groups.

    Attributes:
        id: Auto-incrementing primary key.
        group_id: Foreign key to acl_group.
        role_id: Foreign key to acl_role.
    """

    __tablename__ = "acl_group_role_map"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("acl_group.id"),
        nullable=False,
        index=True,
    )
    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("acl_role.id"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("group_id", "role_id", name="uq_acl_group_role"),
    )

    def __repr__(self) -> str:
        return f"<GroupRoleMap(group_id={self.group_id}, role_id={self.role_id})>"


class GroupAccountMapModel(Base):
    """Junction table attaching accounts to groups.

    Attributes:
        id: Auto-incrementing primary key.
        group_id: Foreign key to acl_group.
        account_id: Foreign key to account.
    """

    __tablename__ = "acl_group_account_map"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("acl_group.id"),
        nullable=False,
        index=True,
    )
    account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("account.id"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("group_id", "account_id", name="uq_acl_group_account"),
    )

    def __repr__(self) -> str:
        return f"<GroupAccountMap(group_id={self.group_id}, account_id={self.account_id})>"
