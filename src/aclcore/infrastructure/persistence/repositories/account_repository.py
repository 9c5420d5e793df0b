"""Repositories for accounts and domains."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aclcore.domain.entities.account import Account, AccountType, Domain
from aclcore.infrastructure.persistence.models import AccountModel, DomainModel


class DomainRepository:
    """Repository for domain operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_entity(self, model: DomainModel) -> Domain:
        return Domain(id=model.id, name=model.name, path=model.path, parent_id=model.parent_id)

    async def get_by_id(self, domain_id: int) -> Domain | None:
        """Get a domain by ID."""
        result = await self.session.execute(
            select(DomainModel).where(DomainModel.id == domain_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_root(self) -> Domain | None:
        """Get the ROOT domain."""
        result = await self.session.execute(
            select(DomainModel).where(DomainModel.parent_id.is_(None))
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create_child(self, parent: Domain, name: str) -> Domain:
        """Create a sub-domain of ``parent``.

        Args:
            parent: Parent domain.
            name: Name of the new domain (must not contain '/').

        Returns:
            The created domain.
        """
        if not name or "/" in name:
            raise ValueError("Domain name must be non-empty and must not contain '/'")
        model = DomainModel(name=name, parent_id=parent.id, path=f"{parent.path}{name}/")
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)


class AccountRepository:
    """Repository for account operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_entity(self, model: AccountModel) -> Account:
        return Account(
            id=model.id,
            name=model.name,
            domain_id=model.domain_id,
            account_type=AccountType(model.account_type),
        )

    async def get_by_id(self, account_id: int) -> Account | None:
        """Get an account by ID."""
        result = await self.session.execute(
            select(AccountModel).where(AccountModel.id == account_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_name(self, domain_id: int, name: str) -> Account | None:
        """Get an account by name within a domain."""
        result = await self.session.execute(
            select(AccountModel).where(
                AccountModel.domain_id == domain_id,
                AccountModel.name == name,
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(
        self,
        name: str,
        domain_id: int,
        account_type: AccountType = AccountType.USER,
    ) -> Account:
        """Create an account."""
        model = AccountModel(name=name, domain_id=domain_id, account_type=account_type.value)
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)
