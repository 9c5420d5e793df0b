"""ACL audit events.

Example usage:
    from aclcore.core.events import AclEventType, EventBus

    bus = EventBus()
    bus.subscribe(AclEventType.ROLE_DELETE, on_role_deleted)
"""

from aclcore.core.events.event_bus import (
    ALL_EVENTS,
    EventBus,
    Subscription,
    log_acl_event,
    register_builtin_subscribers,
)
from aclcore.core.events.event_types import (
    EVENT_CATEGORIES,
    AclEventCategory,
    AclEventType,
    get_all_event_types,
)

__all__ = [
    "ALL_EVENTS",
    "AclEventCategory",
    "AclEventType",
    "EVENT_CATEGORIES",
    "EventBus",
    "Subscription",
    "get_all_event_types",
    "log_acl_event",
    "register_builtin_subscribers",
]
