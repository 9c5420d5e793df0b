"""Tests for permission and membership repositories."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from aclcore.domain.entities import (
    ApiPermission,
    EntityPermission,
    Group,
    GroupAccountMembership,
    GroupRoleMembership,
    PermissionEffect,
    Role,
)
from aclcore.infrastructure.persistence.repositories import (
    ApiPermissionRepository,
    EntityPermissionRepository,
    GroupAccountMapRepository,
    GroupRepository,
    GroupRoleMapRepository,
    RoleRepository,
)


@pytest.mark.asyncio
async def test_api_permission_persist_ignores_duplicates(db_session):
    role = await RoleRepository(db_session).persist(Role(name="viewer"))
    repo = ApiPermissionRepository(db_session)

    assert await repo.persist(ApiPermission(role_id=role.id, api_name="listVMs")) is True
    assert await repo.persist(ApiPermission(role_id=role.id, api_name="listVMs")) is False

    grants = await repo.list_by_role_id(role.id)
    assert [g.api_name for g in grants] == ["listVMs"]
    assert (await repo.find_by_role_and_api(role.id, "listVMs")).id == grants[0].id

    await repo.remove(grants[0].id)
    assert await repo.find_by_role_and_api(role.id, "listVMs") is None


@pytest.mark.asyncio
async def test_api_names_by_role_ids(db_session):
    roles = RoleRepository(db_session)
    a = await roles.persist(Role(name="a"))
    b = await roles.persist(Role(name="b"))
    repo = ApiPermissionRepository(db_session)
    await repo.persist(ApiPermission(role_id=a.id, api_name="listVMs"))
    await repo.persist(ApiPermission(role_id=b.id, api_name="listVMs"))
    await repo.persist(ApiPermission(role_id=b.id, api_name="startVM"))

    assert await repo.list_api_names_by_role_ids([a.id, b.id]) == {"listVMs", "startVM"}
    assert await repo.list_api_names_by_role_ids([]) == set()


@pytest.mark.asyncio
async def test_group_maps(db_session):
    role = await RoleRepository(db_session).persist(Role(name="viewer"))
    group = await GroupRepository(db_session).persist(Group(name="ops"))
    role_maps = GroupRoleMapRepository(db_session)
    account_maps = GroupAccountMapRepository(db_session)

    assert await role_maps.persist(GroupRoleMembership(group_id=group.id, role_id=role.id))
    assert not await role_maps.persist(GroupRoleMembership(group_id=group.id, role_id=role.id))
    assert await account_maps.persist(GroupAccountMembership(group_id=group.id, account_id=11))
    assert not await account_maps.persist(
        GroupAccountMembership(group_id=group.id, account_id=11)
    )

    assert await role_maps.list_role_ids_by_group_ids([group.id]) == [role.id]
    assert await role_maps.list_role_ids_by_group_ids([]) == []
    assert await account_maps.list_group_ids_by_account_id(11) == [group.id]
    assert [m.role_id for m in await role_maps.list_by_role_id(role.id)] == [role.id]

    edge = await account_maps.find_by_group_and_account(group.id, 11)
    await account_maps.remove(edge.id)
    assert await account_maps.list_by_group_id(group.id) == []

    edge = await role_maps.find_by_group_and_role(group.id, role.id)
    await role_maps.remove(edge.id)
    assert await role_maps.list_by_group_id(group.id) == []


@pytest.mark.asyncio
async def test_entity_permissions(db_session):
    role = await RoleRepository(db_session).persist(Role(name="viewer"))
    repo = EntityPermissionRepository(db_session)

    stored = await repo.persist(
        EntityPermission(
            role_id=role.id,
            entity_type="VirtualMachine",
            entity_id=42,
            access_type="OperateEntry",
            effect=PermissionEffect.DENY,
        )
    )

    [loaded] = await repo.list_by_role_id(role.id)
    assert loaded == stored
    assert loaded.effect is PermissionEffect.DENY

    await repo.remove(stored.id)
    assert await repo.list_by_role_id(role.id) == []


@pytest.mark.asyncio
async def test_persist_uses_on_conflict_for_postgres():
    """The insert is rendered for the session's dialect."""
    mock_session = AsyncMock(spec=AsyncSession)
    mock_session.bind = MagicMock()
    mock_session.bind.dialect.name = "postgresql"
    mock_result = MagicMock()
    mock_result.rowcount = 0
    mock_session.execute.return_value = mock_result

    inserted = await ApiPermissionRepository(mock_session).persist(
        ApiPermission(role_id=1, api_name="listVMs")
    )

    assert inserted is False
    statement = mock_session.execute.call_args[0][0]
    compiled = str(statement.compile(dialect=postgresql.dialect()))
    assert "ON CONFLICT (role_id, api_name) DO NOTHING" in compiled
