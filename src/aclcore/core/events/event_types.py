"""ACL audit event definitions.

Event type names are part of the audit contract consumed by downstream
event-logging systems. Adding new types is non-breaking; renaming or
removing them is a breaking change.
"""


class AclEventCategory:
    """Categories for grouping ACL event types."""

    ROLE = "role"
    GROUP = "group"


class AclEventType:
    """ACL event type names, in the form ACL.<ENTITY>.<ACTION>."""

    ROLE_CREATE = "ACL.ROLE.CREATE"
    ROLE_UPDATE = "ACL.ROLE.UPDATE"
    ROLE_DELETE = "ACL.ROLE.DELETE"
    ROLE_GRANT = "ACL.ROLE.GRANT"
    ROLE_REVOKE = "ACL.ROLE.REVOKE"

    GROUP_CREATE = "ACL.GROUP.CREATE"
    GROUP_UPDATE = "ACL.GROUP.UPDATE"
    GROUP_DELETE = "ACL.GROUP.DELETE"


EVENT_CATEGORIES: dict[str, list[str]] = {
    AclEventCategory.ROLE: [
        AclEventType.ROLE_CREATE,
        AclEventType.ROLE_UPDATE,
        AclEventType.ROLE_DELETE,
        AclEventType.ROLE_GRANT,
        AclEventType.ROLE_REVOKE,
    ],
    AclEventCategory.GROUP: [
        AclEventType.GROUP_CREATE,
        AclEventType.GROUP_UPDATE,
        AclEventType.GROUP_DELETE,
    ],
}


def get_all_event_types() -> list[str]:
    """Get a flat list of every ACL event type."""
    return [event for events in EVENT_CATEGORIES.values() for event in events]
