"""Repositories for group membership junction tables."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from aclcore.domain.entities.membership import (
    GroupAccountMembership,
    GroupRoleMembership,
)
from aclcore.infrastructure.persistence.models import (
    GroupAccountMapModel,
    GroupRoleMapModel,
)
from aclcore.infrastructure.persistence.statements import insert_ignoring_conflict


class GroupRoleMapRepository:
    """Repository for acl_group_role_map operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_entity(self, model: GroupRoleMapModel) -> GroupRoleMembership:
        return GroupRoleMembership(id=model.id, group_id=model.group_id, role_id=model.role_id)

    async def find_by_group_and_role(
        self, group_id: int, role_id: int
    ) -> GroupRoleMembership | None:
        """Get the (group, role) edge if present."""
        result = await self.session.execute(
            select(GroupRoleMapModel).where(
                GroupRoleMapModel.group_id == group_id,
                GroupRoleMapModel.role_id == role_id,
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_role_id(self, role_id: int) -> list[GroupRoleMembership]:
        """List every group edge referencing a role."""
        result = await self.session.execute(
            select(GroupRoleMapModel).where(GroupRoleMapModel.role_id == role_id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_by_group_id(self, group_id: int) -> list[GroupRoleMembership]:
        """List every role edge of a group."""
        result = await self.session.execute(
            select(GroupRoleMapModel)
            .where(GroupRoleMapModel.group_id == group_id)
            .order_by(GroupRoleMapModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_role_ids_by_group_ids(self, group_ids: list[int]) -> list[int]:
        """List distinct role IDs attached to any of the given groups."""
        if not group_ids:
            return []
        result = await self.session.execute(
            select(GroupRoleMapModel.role_id)
            .where(GroupRoleMapModel.group_id.in_(group_ids))
            .distinct()
        )
        return list(result.scalars().all())

    async def persist(self, membership: GroupRoleMembership) -> bool:
        """Insert the edge unless it already exists.

        Returns:
            True if inserted, False if it was already there.
        """
        return await insert_ignoring_conflict(
            self.session,
            GroupRoleMapModel,
            {"group_id": membership.group_id, "role_id": membership.role_id},
            ["group_id", "role_id"],
        )

    async def remove(self, map_id: int) -> None:
        """Delete an edge by ID."""
        await self.session.execute(
            delete(GroupRoleMapModel).where(GroupRoleMapModel.id == map_id)
        )


class GroupAccountMapRepository:
    """Repository for acl_group_account_map operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_entity(self, model: GroupAccountMapModel) -> GroupAccountMembership:
        return GroupAccountMembership(
            id=model.id, group_id=model.group_id, account_id=model.account_id
        )

    async def find_by_group_and_account(
        self, group_id: int, account_id: int
    ) -> GroupAccountMembership | None:
        """Get the (group, account) edge if present."""
        result = await self.session.execute(
            select(GroupAccountMapModel).where(
                GroupAccountMapModel.group_id == group_id,
                GroupAccountMapModel.account_id == account_id,
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_group_id(self, group_id: int) -> list[GroupAccountMembership]:
        """List every account edge of a group."""
        result = await self.session.execute(
            select(GroupAccountMapModel)
            .where(GroupAccountMapModel.group_id == group_id)
            .order_by(GroupAccountMapModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_group_ids_by_account_id(self, account_id: int) -> list[int]:
        """List IDs of every group an account belongs to."""
        result = await self.session.execute(
            select(GroupAccountMapModel.group_id).where(
                GroupAccountMapModel.account_id == account_id
            )
        )
        return list(result.scalars().all())

    async def persist(self, membership: GroupAccountMembership) -> bool:
        """Insert the edge unless it already exists."""
        return await insert_ignoring_conflict(
            self.session,
            GroupAccountMapModel,
            {"group_id": membership.group_id, "account_id": membership.account_id},
            ["group_id", "account_id"],
        )

    async def remove(self, map_id: int) -> None:
        """Delete an edge by ID."""
        await self.session.execute(
            delete(GroupAccountMapModel).where(GroupAccountMapModel.id == map_id)
        )
