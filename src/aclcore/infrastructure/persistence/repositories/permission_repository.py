"""Repositories for API and entity permission grants."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from aclcore.domain.entities.permission import (
    ApiPermission,
    EntityPermission,
    PermissionEffect,
)
from aclcore.infrastructure.persistence.models import (
    ApiPermissionModel,
    EntityPermissionModel,
)
from aclcore.infrastructure.persistence.statements import insert_ignoring_conflict


class ApiPermissionRepository:
    """Repository for acl_api_permission operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    def _to_entity(self, model: ApiPermissionModel) -> ApiPermission:
        return ApiPermission(id=model.id, role_id=model.role_id, api_name=model.api_name)

    async def find_by_role_and_api(self, role_id: int, api_name: str) -> ApiPermission | None:
        """Get the grant of an API to a role, if present.

        Args:
            role_id: Role ID.
            api_name: API name.

        Returns:
            The grant if found, None otherwise.
        """
        result = await self.session.execute(
            select(ApiPermissionModel).where(
                ApiPermissionModel.role_id == role_id,
                ApiPermissionModel.api_name == api_name,
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_role_id(self, role_id: int) -> list[ApiPermission]:
        """Get all API grants of a role.

        Args:
            role_id: Role ID.

        Returns:
            List of grants for the role.
        """
        result = await self.session.execute(
            select(ApiPermissionModel)
            .where(ApiPermissionModel.role_id == role_id)
            .order_by(ApiPermissionModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_api_names_by_role_ids(self, role_ids: list[int]) -> set[str]:
        """Get the union of API names granted to any of the given roles."""
        if not role_ids:
            return set()
        result = await self.session.execute(
            select(ApiPermissionModel.api_name)
            .where(ApiPermissionModel.role_id.in_(role_ids))
            .distinct()
        )
        return set(result.scalars().all())

    async def persist(self, permission: ApiPermission) -> bool:
        """Insert the grant unless it already exists.

        Returns:
            True if inserted, False if it was already there.
        """
        return await insert_ignoring_conflict(
            self.session,
            ApiPermissionModel,
            {"role_id": permission.role_id, "api_name": permission.api_name},
            ["role_id", "api_name"],
        )

    async def remove(self, permission_id: int) -> None:
        """Delete a grant by ID."""
        await self.session.execute(
            delete(ApiPermissionModel).where(ApiPermissionModel.id == permission_id)
        )


class EntityPermissionRepository:
    """Repository for acl_entity_permission operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_entity(self, model: EntityPermissionModel) -> EntityPermission:
        return EntityPermission(
            id=model.id,
            role_id=model.role_id,
            entity_type=model.entity_type,
            entity_id=model.entity_id,
            access_type=model.access_type,
            effect=PermissionEffect(model.permission),
        )

    async def list_by_role_id(self, role_id: int) -> list[EntityPermission]:
        """Get all entity grants of a role."""
        result = await self.session.execute(
            select(EntityPermissionModel).where(EntityPermissionModel.role_id == role_id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def persist(self, permission: EntityPermission) -> EntityPermission:
        """Insert an entity grant."""
        model = EntityPermissionModel(
            role_id=permission.role_id,
            entity_type=permission.entity_type,
            entity_id=permission.entity_id,
            access_type=permission.access_type,
            permission=permission.effect.value,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    async def remove(self, permission_id: int) -> None:
        """Delete an entity grant by ID."""
        await self.session.execute(
            delete(EntityPermissionModel).where(EntityPermissionModel.id == permission_id)
        )
