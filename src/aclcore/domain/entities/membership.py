"""Membership edges between groups, roles and accounts."""

from dataclasses import dataclass


@dataclass
class GroupRoleMembership:
    """Attachment of a role to a group, unique per (group_id, role_id)."""

    group_id: int
    role_id: int
    id: int | None = None


@dataclass
class GroupAccountMembership:
    """Attachment of an account to a group, unique per (group_id, account_id)."""

    group_id: int
    account_id: int
    id: int | None = None
