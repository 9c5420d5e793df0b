"""SQLAlchemy models for the ACL schema.

All models inherit from the Base class defined in database.py and are
created on startup in development mode.
"""

from aclcore.infrastructure.persistence.models.domain import AccountModel, DomainModel
from aclcore.infrastructure.persistence.models.group import GroupModel
from aclcore.infrastructure.persistence.models.group_maps import (
    GroupAccountMapModel,
    GroupRoleMapModel,
)
from aclcore.infrastructure.persistence.models.permission import (
    ApiPermissionModel,
    EntityPermissionModel,
)
from aclcore.infrastructure.persistence.models.role import RoleModel

__all__ = [
    "AccountModel",
    "ApiPermissionModel",
    "DomainModel",
    "EntityPermissionModel",
    "GroupAccountMapModel",
    "GroupModel",
    "GroupRoleMapModel",
    "RoleModel",
]
