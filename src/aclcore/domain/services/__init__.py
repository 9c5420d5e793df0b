"""Domain services for ACL administration."""

from aclcore.domain.services.access_evaluator import (
    AccessEvaluator,
    AccessTarget,
    DomainAccessEvaluator,
)
from aclcore.domain.services.acl_service import AclService
from aclcore.domain.services.permission_cache import PermissionCache
from aclcore.domain.services.role_hierarchy import RoleHierarchy

__all__ = [
    "AccessEvaluator",
    "AccessTarget",
    "AclService",
    "DomainAccessEvaluator",
    "PermissionCache",
    "RoleHierarchy",
]
