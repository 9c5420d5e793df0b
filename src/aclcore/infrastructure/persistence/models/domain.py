"""SQLAlchemy models for the domain and account tables.

Domains form the administrative tenancy tree; accounts belong to one
domain and carry the account type used by the access evaluator.
"""

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from aclcore.infrastructure.persistence.database import Base


class DomainModel(Base):
    """SQLAlchemy model for the domain table.

    Attributes:
        id: Auto-incrementing primary key.
        name: Domain name (unique among siblings).
        parent_id: Parent domain, NULL for ROOT.
        path: Slash-delimited ancestry used for subtree checks.
    """

    __tablename__ = "domain"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("domain.id"),
        nullable=True,
        index=True,
        comment="Parent domain (NULL for ROOT)",
    )
    path: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        index=True,
        comment="Ancestry path, e.g. '/' or '/eng/qa/'",
    )

    __table_args__ = (
        UniqueConstraint("parent_id", "name", name="uq_domain_parent_name"),
    )

    def __repr__(self) -> str:
        return f"<Domain(id={self.id}, path={self.path})>"


class AccountModel(Base):
    """SQLAlchemy model for the account table.

    Attributes:
        id: Auto-incrementing primary key.
        name: Account name (unique within domain).
        domain_id: Owning domain.
        account_type: 'admin', 'domain_admin' or 'user'.
    """

    __tablename__ = "account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    domain_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("domain.id"),
        nullable=False,
        index=True,
    )
    account_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="user",
        comment="admin, domain_admin or user",
    )

    __table_args__ = (
        UniqueConstraint("domain_id", "name", name="uq_account_domain_name"),
        Index("ix_account_domain_type", "domain_id", "account_type"),
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, name={self.name}, type={self.account_type})>"
