"""Role entity for API-permission bundles.

Roles are optionally domain-scoped (domain_id None means global) and may
inherit the API permissions of a parent role.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Role:
    """Named bundle of API-invocation permissions.

    Attributes:
        name: Role name, unique within its domain.
        description: Optional description of the role's purpose.
        domain_id: Owning domain, or None for a global role.
        parent_role_id: Role whose permissions this role inherits, if any.
        id: Unique identifier (assigned on persist).
        created_at: Timestamp when the role was created.
    """

    name: str
    description: str | None = None
    domain_id: int | None = None
    parent_role_id: int | None = None
    id: int | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate role data after initialization."""
        if not self.name or not self.name.strip():
            raise ValueError("Role name is required")
        if len(self.name) > 255:
            raise ValueError("Role name must be at most 255 characters")
        if self.id is not None and self.parent_role_id == self.id:
            raise ValueError("Role cannot be its own parent")

    @property
    def is_global(self) -> bool:
        return self.domain_id is None
