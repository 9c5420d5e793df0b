"""Domain entities for aclcore.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from aclcore.domain.entities.account import Account, AccountType, Domain
from aclcore.domain.entities.acl_event import AclEvent
from aclcore.domain.entities.call_context import CallContext
from aclcore.domain.entities.group import Group
from aclcore.domain.entities.membership import (
    GroupAccountMembership,
    GroupRoleMembership,
)
from aclcore.domain.entities.permission import (
    ApiPermission,
    EntityPermission,
    PermissionEffect,
)
from aclcore.domain.entities.role import Role

__all__ = [
    "Account",
    "AccountType",
    "AclEvent",
    "ApiPermission",
    "CallContext",
    "Domain",
    "EntityPermission",
    "Group",
    "GroupAccountMembership",
    "GroupRoleMembership",
    "PermissionEffect",
    "Role",
]
