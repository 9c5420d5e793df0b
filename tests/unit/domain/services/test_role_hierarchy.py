"""Unit tests for RoleHierarchy."""

from unittest.mock import AsyncMock

import pytest

from aclcore.domain.entities import Role
from aclcore.domain.services import RoleHierarchy


def _repo_with(*roles: Role) -> AsyncMock:
    by_id = {r.id: r for r in roles}
    repo = AsyncMock()
    repo.get_by_id.side_effect = lambda role_id: by_id.get(role_id)
    return repo


@pytest.fixture
def chain():
    """base <- middle <- leaf"""
    base = Role(id=1, name="base")
    middle = Role(id=2, name="middle", parent_role_id=1)
    leaf = Role(id=3, name="leaf", parent_role_id=2)
    return base, middle, leaf


@pytest.mark.asyncio
async def test_ancestors_nearest_first(chain):
    base, middle, leaf = chain
    hierarchy = RoleHierarchy(_repo_with(*chain), AsyncMock())

    assert [r.id for r in await hierarchy.ancestors(leaf)] == [2, 1]
    assert await hierarchy.ancestors(base) == []


@pytest.mark.asyncio
async def test_ancestors_stop_at_missing_parent():
    orphan = Role(id=5, name="orphan", parent_role_id=99)
    hierarchy = RoleHierarchy(_repo_with(orphan), AsyncMock())

    assert await hierarchy.ancestors(orphan) == []


@pytest.mark.asyncio
async def test_ancestors_stop_on_stored_cycle():
    a = Role(id=1, name="a", parent_role_id=2)
    b = Role(id=2, name="b", parent_role_id=1)
    hierarchy = RoleHierarchy(_repo_with(a, b), AsyncMock())

    assert [r.id for r in await hierarchy.ancestors(a)] == [2]


@pytest.mark.asyncio
async def test_ancestors_respect_depth_limit():
    roles = [Role(id=i, name=f"r{i}", parent_role_id=i - 1 if i > 1 else None) for i in range(1, 11)]
    hierarchy = RoleHierarchy(_repo_with(*roles), AsyncMock(), max_depth=3)

    assert [r.id for r in await hierarchy.ancestors(roles[-1])] == [9, 8, 7]


@pytest.mark.asyncio
async def test_would_create_cycle(chain):
    hierarchy = RoleHierarchy(_repo_with(*chain), AsyncMock())

    assert await hierarchy.would_create_cycle(1, 3) is True
    assert await hierarchy.would_create_cycle(1, 1) is True
    assert await hierarchy.would_create_cycle(3, 1) is False
    assert await hierarchy.would_create_cycle(3, None) is False
    assert await hierarchy.would_create_cycle(3, 42) is False


@pytest.mark.asyncio
async def test_effective_api_names(chain):
    base, middle, leaf = chain
    api_repo = AsyncMock()
    api_repo.list_api_names_by_role_ids.return_value = {"listVMs"}
    hierarchy = RoleHierarchy(_repo_with(*chain), api_repo)

    assert await hierarchy.effective_api_names([leaf]) == {"listVMs"}
    api_repo.list_api_names_by_role_ids.assert_awaited_with([1, 2, 3])

    await hierarchy.effective_api_names([leaf], inherited=False)
    api_repo.list_api_names_by_role_ids.assert_awaited_with([3])
