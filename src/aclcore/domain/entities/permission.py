"""Permission entities granted to roles.

An ApiPermission authorizes members of a role to invoke one platform API.
An EntityPermission is a resource-scoped grant kept for the resource-level
permission store; ACL operations only ever remove these rows.
"""

from dataclasses import dataclass
from enum import Enum


class PermissionEffect(str, Enum):
    """Effect of an entity permission."""

    ALLOW = "allow"
    DENY = "deny"


@dataclass
class ApiPermission:
    """Grant of a single API name to a role.

    Attributes:
        role_id: Role the API is granted to.
        api_name: Name of the platform API (e.g. "listVirtualMachines").
        id: Unique identifier (assigned on persist).
    """

    role_id: int
    api_name: str
    id: int | None = None

    def __post_init__(self) -> None:
        """Validate permission after initialization."""
        if not self.api_name or not self.api_name.strip():
            raise ValueError("API name is required")
        if self.role_id <= 0:
            raise ValueError("Role ID must be a positive integer")


@dataclass
class EntityPermission:
    """Resource-scoped grant to a role.

    Attributes:
        role_id: Role holding the grant.
        entity_type: Type of the resource (e.g. "VirtualMachine").
        entity_id: Resource identifier.
        access_type: Kind of access granted (e.g. "UseEntry").
        effect: Whether the grant allows or denies.
        id: Unique identifier (assigned on persist).
    """

    role_id: int
    entity_type: str
    entity_id: int
    access_type: str
    effect: PermissionEffect = PermissionEffect.ALLOW
    id: int | None = None
