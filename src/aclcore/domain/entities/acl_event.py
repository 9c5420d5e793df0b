"""Audit event emitted after a committed ACL mutation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class AclEvent:
    """Record of a committed ACL mutation.

    Attributes:
        event_type: One of the AclEventType names (e.g. "ACL.ROLE.GRANT").
        description: Human-readable summary of the action.
        actor_id: ID of the calling account.
        target_type: "role" or "group".
        target_id: ID of the mutated role or group.
        request_id: Request ID of the operation that produced the event.
        details: Operation-specific payload (api names, role ids, ...).
        occurred_at: Commit time of the mutation.
    """

    event_type: str
    description: str
    actor_id: int
    target_type: str
    target_id: int
    request_id: str = ""
    details: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
