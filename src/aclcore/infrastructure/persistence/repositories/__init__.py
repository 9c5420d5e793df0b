"""Persistence repositories for database operations."""

from aclcore.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
    DomainRepository,
)
from aclcore.infrastructure.persistence.repositories.group_map_repository import (
    GroupAccountMapRepository,
    GroupRoleMapRepository,
)
from aclcore.infrastructure.persistence.repositories.group_repository import (
    GroupRepository,
)
from aclcore.infrastructure.persistence.repositories.permission_repository import (
    ApiPermissionRepository,
    EntityPermissionRepository,
)
from aclcore.infrastructure.persistence.repositories.role_repository import (
    RoleRepository,
)

__all__ = [
    "AccountRepository",
    "ApiPermissionRepository",
    "DomainRepository",
    "EntityPermissionRepository",
    "GroupAccountMapRepository",
    "GroupRepository",
    "GroupRoleMapRepository",
    "RoleRepository",
]
