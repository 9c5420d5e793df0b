"""Repository for acl_group database operations."""

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from aclcore.domain.entities.group import Group
from aclcore.infrastructure.persistence.models import DomainModel, GroupModel


class GroupRepository:
    """Repository for acl_group database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    def _to_entity(self, model: GroupModel) -> Group:
        """Convert infrastructure model to domain entity."""
        return Group(
            id=model.id,
            name=model.name,
            description=model.description,
            domain_id=model.domain_id,
            created_at=model.created_at,
        )

    async def get_by_id(self, group_id: int) -> Group | None:
        """Get a group by ID.

        Args:
            group_id: Group ID.

        Returns:
            Group if found, None otherwise.
        """
        result = await self.session.execute(
            select(GroupModel).where(GroupModel.id == group_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_name(self, domain_id: int | None, name: str) -> Group | None:
        """Get a group by name within a domain (None = global groups)."""
        domain_clause = (
            GroupModel.domain_id.is_(None)
            if domain_id is None
            else GroupModel.domain_id == domain_id
        )
        result = await self.session.execute(
            select(GroupModel).where(domain_clause, GroupModel.name == name)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list(
        self,
        group_id: int | None = None,
        name: str | None = None,
        domain_id: int | None = None,
        domain_path: str | None = None,
        include_global: bool = True,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[Group], int]:
        """List groups with optional filters.

        Returns:
            Tuple of (groups, total count before paging).
        """
        query = select(GroupModel).outerjoin(
            DomainModel, GroupModel.domain_id == DomainModel.id
        )
        if group_id is not None:
            query = query.where(GroupModel.id == group_id)
        if name is not None:
            query = query.where(GroupModel.name == name)
        if domain_id is not None:
            query = query.where(GroupModel.domain_id == domain_id)
        if domain_path is not None:
            subtree = DomainModel.path.startswith(domain_path, autoescape=True)
            query = query.where(
                or_(subtree, GroupModel.domain_id.is_(None)) if include_global else subtree
            )

        total = (
            await self.session.execute(select(func.count()).select_from(query.subquery()))
        ).scalar_one()
        result = await self.session.execute(
            query.order_by(GroupModel.id).offset(skip).limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()], total

    async def persist(self, group: Group) -> Group:
        """Insert a new group and return it with its assigned ID."""
        model = GroupModel(
            name=group.name,
            description=group.description,
            domain_id=group.domain_id,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def remove(self, group_id: int) -> bool:
        """Delete a group by ID.

        Returns:
            True if deleted, False if not found.
        """
        result = await self.session.execute(
            delete(GroupModel).where(GroupModel.id == group_id)
        )
        return bool(result.rowcount)
