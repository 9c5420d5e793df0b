"""Unit tests for ACL domain entities."""

import pytest

from aclcore.domain.entities import (
    Account,
    AccountType,
    ApiPermission,
    CallContext,
    Domain,
    Group,
    PermissionEffect,
    Role,
)


class TestRole:
    def test_defaults(self):
        role = Role(name="viewer")

        assert role.is_global is True
        assert role.parent_role_id is None
        assert role.id is None

    @pytest.mark.parametrize("name", ["", "   "])
    def test_name_required(self, name):
        with pytest.raises(ValueError, match="Role name is required"):
            Role(name=name)

    def test_name_length_limit(self):
        with pytest.raises(ValueError, match="at most 255"):
            Role(name="r" * 256)

    def test_cannot_be_own_parent(self):
        with pytest.raises(ValueError, match="own parent"):
            Role(id=4, name="viewer", parent_role_id=4)


class TestGroup:
    def test_name_required(self):
        with pytest.raises(ValueError):
            Group(name="")


class TestApiPermission:
    def test_valid(self):
        permission = ApiPermission(role_id=1, api_name="listVirtualMachines")
        assert permission.api_name == "listVirtualMachines"

    def test_api_name_required(self):
        with pytest.raises(ValueError, match="API name is required"):
            ApiPermission(role_id=1, api_name=" ")

    def test_role_id_must_be_positive(self):
        with pytest.raises(ValueError):
            ApiPermission(role_id=0, api_name="listVMs")


class TestDomain:
    def test_contains_descendants(self):
        root = Domain(id=1, name="ROOT", path="/")
        eng = Domain(id=2, name="eng", path="/eng/", parent_id=1)
        qa = Domain(id=3, name="qa", path="/eng/qa/", parent_id=2)
        engineering = Domain(id=4, name="engineering", path="/engineering/", parent_id=1)

        assert root.contains(qa)
        assert eng.contains(eng)
        assert eng.contains(qa)
        assert not qa.contains(eng)
        assert not eng.contains(engineering)

    def test_path_must_be_slash_delimited(self):
        with pytest.raises(ValueError):
            Domain(id=2, name="eng", path="/eng")


class TestAccountAndContext:
    def test_account_types(self):
        assert Account(id=1, name="admin", domain_id=1, account_type=AccountType.ADMIN).is_root_admin
        assert not Account(id=2, name="bob", domain_id=1).is_root_admin
        assert PermissionEffect("deny") is PermissionEffect.DENY

    def test_request_id_generated(self):
        caller = Account(id=2, name="bob", domain_id=1)

        first = CallContext(caller=caller)
        second = CallContext(caller=caller)

        assert first.request_id.startswith("acl_")
        assert first.request_id != second.request_id
        assert CallContext(caller=caller, request_id="req-1").request_id == "req-1"
