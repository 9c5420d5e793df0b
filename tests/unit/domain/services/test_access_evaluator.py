"""Tests for DomainAccessEvaluator against the seeded domain tree."""

import pytest

from aclcore.core.exceptions import PermissionDeniedError
from aclcore.domain.entities import Group, Role
from aclcore.domain.services import DomainAccessEvaluator
from aclcore.infrastructure.persistence.database import unit_of_work


async def _check(session_factory, caller, target, **kwargs):
    async with unit_of_work(session_factory) as session:
        await DomainAccessEvaluator(session).check_access(caller, target, **kwargs)


@pytest.mark.asyncio
async def test_root_admin_may_administer_everything(session_factory, domain_tree):
    admin = domain_tree.root_admin

    await _check(session_factory, admin, Role(id=1, name="global"))
    await _check(session_factory, admin, Role(id=2, name="sales", domain_id=domain_tree.sales.id))
    await _check(session_factory, admin, domain_tree.qa_user)

    async with unit_of_work(session_factory) as session:
        assert await DomainAccessEvaluator(session).is_root_admin(admin.id) is True
        assert await DomainAccessEvaluator(session).is_root_admin(domain_tree.eng_admin.id) is False
        assert await DomainAccessEvaluator(session).is_root_admin(9999) is False


@pytest.mark.asyncio
async def test_domain_admin_reaches_own_subtree(session_factory, domain_tree):
    eng_admin = domain_tree.eng_admin

    await _check(session_factory, eng_admin, Role(id=1, name="r", domain_id=domain_tree.eng.id))
    await _check(session_factory, eng_admin, Group(id=1, name="g", domain_id=domain_tree.qa.id))
    await _check(session_factory, eng_admin, domain_tree.qa_user)


@pytest.mark.asyncio
async def test_domain_admin_denied_outside_subtree(session_factory, domain_tree):
    with pytest.raises(PermissionDeniedError, match="does not have permission"):
        await _check(
            session_factory,
            domain_tree.eng_admin,
            Role(id=1, name="r", domain_id=domain_tree.sales.id),
        )
    # A child domain admin cannot reach its parent
    with pytest.raises(PermissionDeniedError):
        await _check(
            session_factory,
            domain_tree.qa_admin,
            Role(id=1, name="r", domain_id=domain_tree.eng.id),
        )


@pytest.mark.asyncio
async def test_global_objects_are_root_only(session_factory, domain_tree):
    with pytest.raises(PermissionDeniedError):
        await _check(session_factory, domain_tree.eng_admin, Role(id=1, name="global"))


@pytest.mark.asyncio
async def test_plain_users_are_denied(session_factory, domain_tree):
    with pytest.raises(PermissionDeniedError, match="role 1"):
        await _check(
            session_factory,
            domain_tree.eng_user,
            Role(id=1, name="r", domain_id=domain_tree.eng.id),
        )


@pytest.mark.asyncio
async def test_explicit_domain_overrides_target_domain(session_factory, domain_tree):
    role = Role(id=1, name="global")

    await _check(session_factory, domain_tree.eng_admin, role, domain=domain_tree.eng)
    with pytest.raises(PermissionDeniedError):
        await _check(session_factory, domain_tree.eng_admin, role, domain=domain_tree.sales)


@pytest.mark.asyncio
async def test_optional_check_always_passes(session_factory, domain_tree):
    await _check(
        session_factory,
        domain_tree.eng_user,
        Role(id=1, name="r", domain_id=domain_tree.sales.id),
        required=False,
    )
