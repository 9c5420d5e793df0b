"""aclcore - role-based access-control management engine.

Manages roles, groups, group memberships and API permission grants for a
multi-tenant cloud-management platform, under domain-scoped administrative
boundaries.
"""

__version__ = "0.1.0"
