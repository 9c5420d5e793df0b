"""Role repository for database operations."""

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from aclcore.domain.entities.role import Role
from aclcore.infrastructure.persistence.models import DomainModel, RoleModel


class RoleRepository:
    """Repository for acl_role database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    def _to_entity(self, model: RoleModel) -> Role:
        """Convert infrastructure model to domain entity."""
        return Role(
            id=model.id,
            name=model.name,
            description=model.description,
            domain_id=model.domain_id,
            parent_role_id=model.parent_role_id,
            created_at=model.created_at,
        )

    async def get_by_id(self, role_id: int) -> Role | None:
        """Get a role by ID.

        Args:
            role_id: Role ID.

        Returns:
            Role if found, None otherwise.
        """
        result = await self.session.execute(
            select(RoleModel).where(RoleModel.id == role_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_name(self, domain_id: int | None, name: str) -> Role | None:
        """Get a role by name within a domain.

        Args:
            domain_id: Domain ID, or None to look among global roles.
            name: Role name.

        Returns:
            Role if found, None otherwise.
        """
        domain_clause = (
            RoleModel.domain_id.is_(None)
            if domain_id is None
            else RoleModel.domain_id == domain_id
        )
        result = await self.session.execute(
            select(RoleModel).where(domain_clause, RoleModel.name == name)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_children(self, role_id: int) -> list[Role]:
        """List roles whose parent is the given role."""
        result = await self.session.execute(
            select(RoleModel).where(RoleModel.parent_role_id == role_id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list(
        self,
        role_id: int | None = None,
        name: str | None = None,
        domain_id: int | None = None,
        domain_path: str | None = None,
        include_global: bool = True,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[Role], int]:
        """List roles with optional filters.

        Args:
            role_id: Only this role.
            name: Only roles with this name.
            domain_id: Only roles of this domain.
            domain_path: Only roles whose domain lies in this subtree.
            include_global: Whether global roles pass the domain_path filter.
            skip: Number of records to skip.
            limit: Maximum number of records to return.

        Returns:
            Tuple of (roles, total count before paging).
        """
        query = select(RoleModel).outerjoin(DomainModel, RoleModel.domain_id == DomainModel.id)
        if role_id is not None:
            query = query.where(RoleModel.id == role_id)
        if name is not None:
            query = query.where(RoleModel.name == name)
        if domain_id is not None:
            query = query.where(RoleModel.domain_id == domain_id)
        if domain_path is not None:
            subtree = DomainModel.path.startswith(domain_path, autoescape=True)
            query = query.where(
                or_(subtree, RoleModel.domain_id.is_(None)) if include_global else subtree
            )

        total = (
            await self.session.execute(select(func.count()).select_from(query.subquery()))
        ).scalar_one()
        result = await self.session.execute(
            query.order_by(RoleModel.id).offset(skip).limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()], total

    async def persist(self, role: Role) -> Role:
        """Insert a new role.

        Args:
            role: Role entity without an ID.

        Returns:
            The stored role with its assigned ID.
        """
        model = RoleModel(
            name=role.name,
            description=role.description,
            domain_id=role.domain_id,
            parent_role_id=role.parent_role_id,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def update(self, role: Role) -> Role:
        """Write the mutable fields of an existing role."""
        await self.session.execute(
            update(RoleModel)
            .where(RoleModel.id == role.id)
            .values(
                name=role.name,
                description=role.description,
                parent_role_id=role.parent_role_id,
            )
        )
        return role

    async def reparent_children(self, role_id: int, new_parent_id: int | None) -> int:
        """Point every child of a role at a new parent.

        Returns:
            Number of roles re-parented.
        """
        result = await self.session.execute(
            update(RoleModel)
            .where(RoleModel.parent_role_id == role_id)
            .values(parent_role_id=new_parent_id)
        )
        return result.rowcount

    async def remove(self, role_id: int) -> bool:
        """Delete a role by ID.

        Returns:
            True if deleted, False if not found.
        """
        result = await self.session.execute(
            delete(RoleModel).where(RoleModel.id == role_id)
        )
        return bool(result.rowcount)
