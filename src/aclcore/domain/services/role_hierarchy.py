"""Role inheritance resolution.

Roles form a forest through parent_role_id. A role's effective API
permissions are its own grants plus every ancestor's. Walks are bounded
and guard against cycles left behind by direct database edits.
"""

from aclcore.core.logging import get_logger
from aclcore.domain.entities.role import Role
from aclcore.infrastructure.persistence.repositories import (
    ApiPermissionRepository,
    RoleRepository,
)

logger = get_logger(__name__)

MAX_HIERARCHY_DEPTH = 64


class RoleHierarchy:
    """Walks parent-role chains."""

    def __init__(
        self,
        role_repo: RoleRepository,
        api_permission_repo: ApiPermissionRepository,
        max_depth: int = MAX_HIERARCHY_DEPTH,
    ) -> None:
        self.role_repo = role_repo
        self.api_permission_repo = api_permission_repo
        self.max_depth = max_depth

    async def ancestors(self, role: Role) -> list[Role]:
        """Get the parent chain of a role, nearest first.

        Stops at a missing parent, a repeated role or the depth limit.
        """
        chain: list[Role] = []
        visited = {role.id}
        parent_id = role.parent_role_id
        while parent_id is not None and len(chain) < self.max_depth:
            if parent_id in visited:
                logger.warning(
                    "Cycle detected in role hierarchy",
                    role_id=role.id,
                    repeated_role_id=parent_id,
                )
                break
            parent = await self.role_repo.get_by_id(parent_id)
            if parent is None:
                break
            visited.add(parent_id)
            chain.append(parent)
            parent_id = parent.parent_role_id
        return chain

    async def would_create_cycle(self, role_id: int, new_parent_id: int | None) -> bool:
        """Check whether making ``new_parent_id`` the parent of ``role_id``
        would close a loop."""
        if new_parent_id is None:
            return False
        if new_parent_id == role_id:
            return True

        visited: set[int] = set()
        current_id: int | None = new_parent_id
        depth = 0
        while current_id is not None:
            if current_id == role_id:
                return True
            if current_id in visited or depth >= self.max_depth:
                # An existing loop or an over-deep chain is rejected as well
                return True
            visited.add(current_id)
            current = await self.role_repo.get_by_id(current_id)
            if current is None:
                return False
            current_id = current.parent_role_id
            depth += 1
        return False

    async def effective_api_names(self, roles: list[Role], inherited: bool = True) -> set[str]:
        """Union of API names granted to the given roles.

        Args:
            roles: Roles to resolve.
            inherited: Whether to include grants of every ancestor.

        Returns:
            Set of API names.
        """
        role_ids: set[int] = set()
        for role in roles:
            role_ids.add(role.id)
            if inherited:
                role_ids.update(a.id for a in await self.ancestors(role))
        return await self.api_permission_repo.list_api_names_by_role_ids(sorted(role_ids))
