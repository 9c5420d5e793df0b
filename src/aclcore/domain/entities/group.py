"""Group entity aggregating roles and accounts.

Every account in a group inherits the union of the API permissions of
every role attached to the group.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Group:
    """Named aggregate of roles and accounts.

    Attributes:
        name: Group name, unique within its domain.
        description: Optional description of the group's purpose.
        domain_id: Owning domain, or None for a global group.
        id: Unique identifier (assigned on persist).
        created_at: Timestamp when the group was created.
    """

    name: str
    description: str | None = None
    domain_id: int | None = None
    id: int | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate group data after initialization."""
        if not self.name or not self.name.strip():
            raise ValueError("Group name is required")
        if len(self.name) > 255:
            raise ValueError("Group name must be at most 255 characters")
