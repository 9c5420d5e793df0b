"""ACL service for role, group and permission management.

Every operation takes an explicit CallContext, loads its targets, asks the
access evaluator to authorize the caller against each of them, and applies
its store mutations inside a single unit of work. Audit events are
published only after the unit of work has committed.
"""

from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from aclcore.core.config import Settings, get_settings
from aclcore.core.events import AclEventType, EventBus
from aclcore.core.exceptions import InvalidParameterValueError, PermissionDeniedError
from aclcore.core.logging import LoggingContext, get_logger
from aclcore.domain.entities.account import Account
from aclcore.domain.entities.acl_event import AclEvent
from aclcore.domain.entities.call_context import CallContext
from aclcore.domain.entities.group import Group
from aclcore.domain.entities.membership import (
    GroupAccountMembership,
    GroupRoleMembership,
)
from aclcore.domain.entities.permission import ApiPermission
from aclcore.domain.entities.role import Role
from aclcore.domain.services.access_evaluator import AccessEvaluator, DomainAccessEvaluator
from aclcore.domain.services.permission_cache import PermissionCache
from aclcore.domain.services.role_hierarchy import RoleHierarchy
from aclcore.infrastructure.persistence.database import unit_of_work
from aclcore.infrastructure.persistence.repositories import (
    AccountRepository,
    ApiPermissionRepository,
    DomainRepository,
    EntityPermissionRepository,
    GroupAccountMapRepository,
    GroupRepository,
    GroupRoleMapRepository,
    RoleRepository,
)

logger = get_logger(__name__)

AccessEvaluatorFactory = Callable[[AsyncSession], AccessEvaluator]

_UNSET: Any = object()


class AclService:
    """Service for ACL role, group and permission management."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        access_evaluator_factory: AccessEvaluatorFactory = DomainAccessEvaluator,
        event_bus: EventBus | None = None,
        permission_cache: PermissionCache | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the ACL service.

        Args:
            session_factory: Factory producing the session of each unit of work.
            access_evaluator_factory: Builds the access evaluator bound to a session.
            event_bus: Receives audit events after commit. None disables events.
            permission_cache: Cache of effective account permissions.
            settings: Application settings.
        """
        self.settings = settings or get_settings()
        self.session_factory = session_factory
        self.access_evaluator_factory = access_evaluator_factory
        self.event_bus = event_bus
        self.permission_cache = permission_cache or PermissionCache(
            ttl_seconds=self.settings.permission_cache_ttl_seconds
        )

    # ------------------------------------------------------------------
    # Role lifecycle
    # ------------------------------------------------------------------

    async def create_acl_role(
        self,
        ctx: CallContext,
        domain_id: int | None,
        name: str,
        description: str | None = None,
        parent_role_id: int | None = None,
    ) -> Role:
        """Create a role.

        Args:
            ctx: Caller context.
            domain_id: Owning domain, or None for a global role.
            name: Role name, unique within the domain.
            description: Optional description.
            parent_role_id: Optional role to inherit permissions from.

        Returns:
            The created role.

        Raises:
            PermissionDeniedError: If a non-root caller targets another domain,
                or may not administer the parent role.
            InvalidParameterValueError: If the name is taken in the domain,
                or the domain or parent role does not exist.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                role_repo = RoleRepository(session)

                await self._check_domain_ownership(session, evaluator, ctx.caller, domain_id, "role")

                if await role_repo.get_by_name(domain_id, name) is not None:
                    raise InvalidParameterValueError(
                        f"Unable to create acl role with name {name} "
                        f"already exists for domain {domain_id}"
                    )

                if parent_role_id is not None:
                    parent = await self._require_role(role_repo, parent_role_id, "create acl role")
                    await evaluator.check_access(ctx.caller, parent)

                role = await role_repo.persist(
                    self._build(
                        Role,
                        name=name,
                        description=description,
                        domain_id=domain_id,
                        parent_role_id=parent_role_id,
                    )
                )

            logger.info("Acl role created", role_id=role.id, name=name, domain_id=domain_id)
            await self._publish(
                ctx,
                AclEventType.ROLE_CREATE,
                "Creating Acl Role",
                role,
                {"name": name, "domain_id": domain_id, "parent_role_id": parent_role_id},
            )
            return role

    async def update_acl_role(
        self,
        ctx: CallContext,
        role_id: int,
        name: str | None = None,
        description: str | None = None,
        parent_role_id: int | None = _UNSET,
    ) -> Role:
        """Rename, re-describe or re-parent a role.

        Passing ``parent_role_id=None`` detaches the role from its parent;
        omitting it leaves the parent unchanged.

        Raises:
            InvalidParameterValueError: If the role or new parent does not
                exist, the new name is taken, or re-parenting would form a cycle.
            PermissionDeniedError: If the caller may not administer the role
                or the new parent.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                role_repo = RoleRepository(session)

                role = await self._require_role(role_repo, role_id, "update acl role")
                await evaluator.check_access(ctx.caller, role)

                if name is not None and name != role.name:
                    if await role_repo.get_by_name(role.domain_id, name) is not None:
                        raise InvalidParameterValueError(
                            f"Unable to rename acl role {role_id}: name {name} "
                            f"already exists for domain {role.domain_id}"
                        )
                    role.name = name
                if description is not None:
                    role.description = description

                if parent_role_id is not _UNSET and parent_role_id != role.parent_role_id:
                    if parent_role_id is not None:
                        parent = await self._require_role(
                            role_repo, parent_role_id, "update acl role"
                        )
                        await evaluator.check_access(ctx.caller, parent)
                        hierarchy = RoleHierarchy(role_repo, ApiPermissionRepository(session))
                        if await hierarchy.would_create_cycle(role_id, parent_role_id):
                            raise InvalidParameterValueError(
                                f"Unable to set role {parent_role_id} as parent of acl role "
                                f"{role_id}; the role hierarchy would contain a cycle"
                            )
                    role.parent_role_id = parent_role_id

                role = await role_repo.update(self._build(Role, **vars(role)))

            self.permission_cache.invalidate_all()
            logger.info("Acl role updated", role_id=role_id)
            await self._publish(
                ctx,
                AclEventType.ROLE_UPDATE,
                "Updating Acl Role",
                role,
                {"name": role.name, "parent_role_id": role.parent_role_id},
            )
            return role

    async def delete_acl_role(self, ctx: CallContext, role_id: int) -> bool:
        """Delete a role together with its memberships and grants.

        Children of the deleted role are re-attached to its parent.

        Returns:
            True on success.

        Raises:
            InvalidParameterValueError: If the role does not exist.
            PermissionDeniedError: If the caller may not administer the role.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                role_repo = RoleRepository(session)
                group_role_repo = GroupRoleMapRepository(session)
                api_repo = ApiPermissionRepository(session)
                entity_repo = EntityPermissionRepository(session)

                role = await self._require_role(role_repo, role_id, "delete acl role")
                await evaluator.check_access(ctx.caller, role)

                memberships = await group_role_repo.list_by_role_id(role_id)
                for membership in memberships:
                    await group_role_repo.remove(membership.id)

                grants = await api_repo.list_by_role_id(role_id)
                for grant in grants:
                    await api_repo.remove(grant.id)

                for entity_grant in await entity_repo.list_by_role_id(role_id):
                    await entity_repo.remove(entity_grant.id)

                await role_repo.reparent_children(role_id, role.parent_role_id)
                await role_repo.remove(role_id)

            self.permission_cache.invalidate_all()
            logger.info(
                "Acl role deleted",
                role_id=role_id,
                removed_memberships=len(memberships),
                removed_grants=len(grants),
            )
            await self._publish(ctx, AclEventType.ROLE_DELETE, "Deleting Acl Role", role)
            return True

    async def get_acl_role(self, ctx: CallContext, role_id: int) -> Role:
        """Get a role the caller may administer."""
        async with unit_of_work(self.session_factory) as session:
            role = await self._require_role(RoleRepository(session), role_id, "get acl role")
            await self.access_evaluator_factory(session).check_access(ctx.caller, role)
            return role

    async def list_acl_roles(
        self,
        ctx: CallContext,
        role_id: int | None = None,
        name: str | None = None,
        domain_id: int | None = None,
        start_index: int = 0,
        page_size: int | None = None,
    ) -> tuple[list[Role], int]:
        """List roles visible to the caller.

        Root admins see every role; other callers see global roles and the
        roles of their own domain subtree.

        Returns:
            Tuple of (roles on the requested page, total matching count).
        """
        async with unit_of_work(self.session_factory) as session:
            evaluator = self.access_evaluator_factory(session)
            domain_path = await self._visible_domain_path(session, evaluator, ctx.caller, domain_id)
            skip, limit = self._page(start_index, page_size)
            return await RoleRepository(session).list(
                role_id=role_id,
                name=name,
                domain_id=domain_id,
                domain_path=domain_path,
                skip=skip,
                limit=limit,
            )

    # ------------------------------------------------------------------
    # Permission grant / revoke
    # ------------------------------------------------------------------

    async def grant_permission_to_acl_role(
        self, ctx: CallContext, role_id: int, api_names: list[str]
    ) -> Role:
        """Grant API names to a role. Already granted names are skipped.

        Raises:
            InvalidParameterValueError: If the role does not exist or an API
                name is blank.
            PermissionDeniedError: If the caller may not administer the role.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                api_repo = ApiPermissionRepository(session)

                role = await self._require_role(
                    RoleRepository(session), role_id, "grant permission to role"
                )
                await evaluator.check_access(ctx.caller, role)

                granted: list[str] = []
                for api_name in api_names:
                    if await api_repo.find_by_role_and_api(role_id, api_name) is None:
                        permission = self._build(ApiPermission, role_id=role_id, api_name=api_name)
                        if await api_repo.persist(permission):
                            granted.append(api_name)

            self.permission_cache.invalidate_all()
            logger.info("Granted permissions to acl role", role_id=role_id, api_names=granted)
            await self._publish(
                ctx,
                AclEventType.ROLE_GRANT,
                "Granting permission to Acl Role",
                role,
                {"api_names": sorted(set(api_names))},
            )
            return role

    async def revoke_permission_from_acl_role(
        self, ctx: CallContext, role_id: int, api_names: list[str]
    ) -> Role:
        """Revoke API names from a role. Names not granted are skipped.

        Raises:
            InvalidParameterValueError: If the role does not exist.
            PermissionDeniedError: If the caller may not administer the role.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                api_repo = ApiPermissionRepository(session)

                role = await self._require_role(
                    RoleRepository(session), role_id, "revoke permission from role"
                )
                await evaluator.check_access(ctx.caller, role)

                revoked: list[str] = []
                for api_name in api_names:
                    permission = await api_repo.find_by_role_and_api(role_id, api_name)
                    if permission is not None:
                        await api_repo.remove(permission.id)
                        revoked.append(api_name)

            self.permission_cache.invalidate_all()
            logger.info("Revoked permissions from acl role", role_id=role_id, api_names=revoked)
            await self._publish(
                ctx,
                AclEventType.ROLE_REVOKE,
                "Revoking permission from Acl Role",
                role,
                {"api_names": sorted(set(api_names))},
            )
            return role

    async def list_role_api_permissions(
        self, ctx: CallContext, role_id: int, inherited: bool = True
    ) -> set[str]:
        """Get a role's API names, including its ancestors' unless
        ``inherited`` is False."""
        async with unit_of_work(self.session_factory) as session:
            role_repo = RoleRepository(session)
            role = await self._require_role(role_repo, role_id, "list role permissions")
            await self.access_evaluator_factory(session).check_access(ctx.caller, role)
            hierarchy = RoleHierarchy(role_repo, ApiPermissionRepository(session))
            return await hierarchy.effective_api_names([role], inherited=inherited)

    # ------------------------------------------------------------------
    # Group lifecycle
    # ------------------------------------------------------------------

    async def create_acl_group(
        self,
        ctx: CallContext,
        domain_id: int | None,
        name: str,
        description: str | None = None,
    ) -> Group:
        """Create a group.

        Raises:
            PermissionDeniedError: If a non-root caller targets another domain.
            InvalidParameterValueError: If the name is taken in the domain or
                the domain does not exist.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                group_repo = GroupRepository(session)

                await self._check_domain_ownership(session, evaluator, ctx.caller, domain_id, "group")

                if await group_repo.get_by_name(domain_id, name) is not None:
                    raise InvalidParameterValueError(
                        f"Unable to create acl group with name {name} "
                        f"already exists for domain {domain_id}"
                    )

                group = await group_repo.persist(
                    self._build(Group, name=name, description=description, domain_id=domain_id)
                )

            logger.info("Acl group created", group_id=group.id, name=name, domain_id=domain_id)
            await self._publish(
                ctx,
                AclEventType.GROUP_CREATE,
                "Creating Acl Group",
                group,
                {"name": name, "domain_id": domain_id},
            )
            return group

    async def delete_acl_group(self, ctx: CallContext, group_id: int) -> bool:
        """Delete a group together with its role and account memberships.

        Raises:
            InvalidParameterValueError: If the group does not exist.
            PermissionDeniedError: If the caller may not administer the group.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                group_repo = GroupRepository(session)
                group_role_repo = GroupRoleMapRepository(session)
                group_account_repo = GroupAccountMapRepository(session)

                group = await self._require_group(group_repo, group_id, "delete acl group")
                await evaluator.check_access(ctx.caller, group)

                for membership in await group_role_repo.list_by_group_id(group_id):
                    await group_role_repo.remove(membership.id)
                for membership in await group_account_repo.list_by_group_id(group_id):
                    await group_account_repo.remove(membership.id)

                await group_repo.remove(group_id)

            self.permission_cache.invalidate_all()
            logger.info("Acl group deleted", group_id=group_id)
            await self._publish(ctx, AclEventType.GROUP_DELETE, "Deleting Acl Group", group)
            return True

    async def get_acl_group(self, ctx: CallContext, group_id: int) -> Group:
        """Get a group the caller may administer."""
        async with unit_of_work(self.session_factory) as session:
            group = await self._require_group(GroupRepository(session), group_id, "get acl group")
            await self.access_evaluator_factory(session).check_access(ctx.caller, group)
            return group

    async def list_acl_groups(
        self,
        ctx: CallContext,
        group_id: int | None = None,
        name: str | None = None,
        domain_id: int | None = None,
        start_index: int = 0,
        page_size: int | None = None,
    ) -> tuple[list[Group], int]:
        """List groups visible to the caller.

        Returns:
            Tuple of (groups on the requested page, total matching count).
        """
        async with unit_of_work(self.session_factory) as session:
            evaluator = self.access_evaluator_factory(session)
            domain_path = await self._visible_domain_path(session, evaluator, ctx.caller, domain_id)
            skip, limit = self._page(start_index, page_size)
            return await GroupRepository(session).list(
                group_id=group_id,
                name=name,
                domain_id=domain_id,
                domain_path=domain_path,
                skip=skip,
                limit=limit,
            )

    # ------------------------------------------------------------------
    # Group membership
    # ------------------------------------------------------------------

    async def add_acl_roles_to_group(
        self, ctx: CallContext, role_ids: list[int], group_id: int
    ) -> Group:
        """Attach roles to a group. Existing attachments are skipped.

        The caller must be authorized on the group and on every role; any
        failure aborts the whole operation.

        Raises:
            InvalidParameterValueError: If the group or any role does not exist.
            PermissionDeniedError: If the caller may not administer the group
                or any of the roles.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                role_repo = RoleRepository(session)
                group_role_repo = GroupRoleMapRepository(session)

                group = await self._require_group(
                    GroupRepository(session), group_id, "add roles to acl group"
                )
                await evaluator.check_access(ctx.caller, group)

                for role_id in role_ids:
                    role = await self._require_role(role_repo, role_id, "add roles to acl group")
                    await evaluator.check_access(ctx.caller, role)

                    if await group_role_repo.find_by_group_and_role(group_id, role_id) is None:
                        await group_role_repo.persist(
                            GroupRoleMembership(group_id=group_id, role_id=role_id)
                        )

            self.permission_cache.invalidate_all()
            logger.info("Added roles to acl group", group_id=group_id, role_ids=role_ids)
            await self._publish(
                ctx,
                AclEventType.GROUP_UPDATE,
                "Adding roles to acl group",
                group,
                {"added_role_ids": list(role_ids)},
            )
            return group

    async def remove_acl_roles_from_group(
        self, ctx: CallContext, role_ids: list[int], group_id: int
    ) -> Group:
        """Detach roles from a group. Roles not attached are skipped.

        Raises:
            InvalidParameterValueError: If the group or any role does not exist.
            PermissionDeniedError: If the caller may not administer the group
                or any of the roles.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                role_repo = RoleRepository(session)
                group_role_repo = GroupRoleMapRepository(session)

                group = await self._require_group(
                    GroupRepository(session), group_id, "remove roles from acl group"
                )
                await evaluator.check_access(ctx.caller, group)

                for role_id in role_ids:
                    role = await self._require_role(
                        role_repo, role_id, "remove roles from acl group"
                    )
                    await evaluator.check_access(ctx.caller, role)

                    membership = await group_role_repo.find_by_group_and_role(group_id, role_id)
                    if membership is not None:
                        await group_role_repo.remove(membership.id)

            self.permission_cache.invalidate_all()
            logger.info("Removed roles from acl group", group_id=group_id, role_ids=role_ids)
            await self._publish(
                ctx,
                AclEventType.GROUP_UPDATE,
                "Removing roles from acl group",
                group,
                {"removed_role_ids": list(role_ids)},
            )
            return group

    async def add_accounts_to_acl_group(
        self, ctx: CallContext, account_ids: list[int], group_id: int
    ) -> Group:
        """Attach accounts to a group. Existing attachments are skipped.

        Raises:
            InvalidParameterValueError: If the group or any account does not exist.
            PermissionDeniedError: If the caller may not administer the group
                or any of the accounts.
        """
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                account_repo = AccountRepository(session)
                group_account_repo = GroupAccountMapRepository(session)

                group = await self._require_group(
                    GroupRepository(session), group_id, "add accounts to acl group"
                )
                await evaluator.check_access(ctx.caller, group)

                for account_id in account_ids:
                    account = await self._require_account(
                        account_repo, account_id, "add accounts to acl group"
                    )
                    await evaluator.check_access(ctx.caller, account)

                    existing = await group_account_repo.find_by_group_and_account(
                        group_id, account_id
                    )
                    if existing is None:
                        await group_account_repo.persist(
                            GroupAccountMembership(group_id=group_id, account_id=account_id)
                        )

            for account_id in account_ids:
                self.permission_cache.invalidate_account(account_id)
            logger.info("Added accounts to acl group", group_id=group_id, account_ids=account_ids)
            await self._publish(
                ctx,
                AclEventType.GROUP_UPDATE,
                "Adding accounts to acl group",
                group,
                {"added_account_ids": list(account_ids)},
            )
            return group

    async def remove_accounts_from_acl_group(
        self, ctx: CallContext, account_ids: list[int], group_id: int
    ) -> Group:
        """Detach accounts from a group. Accounts not attached are skipped."""
        with self._logging_scope(ctx):
            async with unit_of_work(self.session_factory) as session:
                evaluator = self.access_evaluator_factory(session)
                account_repo = AccountRepository(session)
                group_account_repo = GroupAccountMapRepository(session)

                group = await self._require_group(
                    GroupRepository(session), group_id, "remove accounts from acl group"
                )
                await evaluator.check_access(ctx.caller, group)

                for account_id in account_ids:
                    account = await self._require_account(
                        account_repo, account_id, "remove accounts from acl group"
                    )
                    await evaluator.check_access(ctx.caller, account)

                    membership = await group_account_repo.find_by_group_and_account(
                        group_id, account_id
                    )
                    if membership is not None:
                        await group_account_repo.remove(membership.id)

            for account_id in account_ids:
                self.permission_cache.invalidate_account(account_id)
            logger.info(
                "Removed accounts from acl group", group_id=group_id, account_ids=account_ids
            )
            await self._publish(
                ctx,
                AclEventType.GROUP_UPDATE,
                "Removing accounts from acl group",
                group,
                {"removed_account_ids": list(account_ids)},
            )
            return group

    # ------------------------------------------------------------------
    # Effective permissions
    # ------------------------------------------------------------------

    async def list_group_api_permissions(self, ctx: CallContext, group_id: int) -> set[str]:
        """Union of the effective API names of every role in a group."""
        async with unit_of_work(self.session_factory) as session:
            group = await self._require_group(
                GroupRepository(session), group_id, "list group permissions"
            )
            await self.access_evaluator_factory(session).check_access(ctx.caller, group)

            role_ids = await GroupRoleMapRepository(session).list_role_ids_by_group_ids([group_id])
            return await self._effective_api_names(session, role_ids)

    async def list_account_api_permissions(self, ctx: CallContext, account_id: int) -> set[str]:
        """Every API name an account may invoke through its groups.

        Callers may always read their own permissions; reading another
        account's requires the right to administer it.
        """
        # Read before any store access; a commit racing this read bumps it.
        generation = self.permission_cache.generation
        async with unit_of_work(self.session_factory) as session:
            account = await self._require_account(
                AccountRepository(session), account_id, "list account permissions"
            )
            if account.id != ctx.caller.id:
                await self.access_evaluator_factory(session).check_access(ctx.caller, account)

            cached = self.permission_cache.get(account_id)
            if cached is not None:
                return set(cached)

            group_ids = await GroupAccountMapRepository(session).list_group_ids_by_account_id(
                account_id
            )
            role_ids = await GroupRoleMapRepository(session).list_role_ids_by_group_ids(group_ids)
            api_names = await self._effective_api_names(session, role_ids)

        self.permission_cache.set(account_id, api_names, generation)
        return api_names

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _effective_api_names(self, session: AsyncSession, role_ids: list[int]) -> set[str]:
        role_repo = RoleRepository(session)
        roles = [r for r in [await role_repo.get_by_id(rid) for rid in role_ids] if r is not None]
        hierarchy = RoleHierarchy(role_repo, ApiPermissionRepository(session))
        return await hierarchy.effective_api_names(roles)

    async def _check_domain_ownership(
        self,
        session: AsyncSession,
        evaluator: AccessEvaluator,
        caller: Account,
        domain_id: int | None,
        kind: str,
    ) -> None:
        """Non-root callers may only create objects in their own domain."""
        if not await evaluator.is_root_admin(caller.id):
            if domain_id is not None and caller.domain_id != domain_id:
                raise PermissionDeniedError(
                    f"Can't create acl {kind} in domain {domain_id}, permission denied"
                )
        if domain_id is not None and await DomainRepository(session).get_by_id(domain_id) is None:
            raise InvalidParameterValueError(
                f"Unable to find domain: {domain_id}; failed to create acl {kind}."
            )

    async def _visible_domain_path(
        self,
        session: AsyncSession,
        evaluator: AccessEvaluator,
        caller: Account,
        domain_id: int | None,
    ) -> str | None:
        """Domain subtree the caller may list, or None for no restriction."""
        domain_repo = DomainRepository(session)
        if domain_id is not None:
            domain = await domain_repo.get_by_id(domain_id)
            if domain is None:
                raise InvalidParameterValueError(f"Unable to find domain: {domain_id}")
        if await evaluator.is_root_admin(caller.id):
            return None

        caller_domain = await domain_repo.get_by_id(caller.domain_id)
        if caller_domain is None:
            raise PermissionDeniedError(f"Account {caller.id} has no valid domain")
        if domain_id is not None and not caller_domain.contains(domain):
            raise PermissionDeniedError(
                f"Account {caller.id} does not have permission to list domain {domain_id}"
            )
        return caller_domain.path

    async def _require_role(self, role_repo: RoleRepository, role_id: int, action: str) -> Role:
        role = await role_repo.get_by_id(role_id)
        if role is None:
            raise InvalidParameterValueError(
                f"Unable to find acl role: {role_id}; failed to {action}."
            )
        return role

    async def _require_group(
        self, group_repo: GroupRepository, group_id: int, action: str
    ) -> Group:
        group = await group_repo.get_by_id(group_id)
        if group is None:
            raise InvalidParameterValueError(
                f"Unable to find acl group: {group_id}; failed to {action}."
            )
        return group

    async def _require_account(
        self, account_repo: AccountRepository, account_id: int, action: str
    ) -> Account:
        account = await account_repo.get_by_id(account_id)
        if account is None:
            raise InvalidParameterValueError(
                f"Unable to find account: {account_id}; failed to {action}."
            )
        return account

    def _build(self, entity_cls: type, **fields: Any) -> Any:
        """Construct an entity, reporting validation failures as bad parameters."""
        try:
            return entity_cls(**fields)
        except ValueError as e:
            raise InvalidParameterValueError(str(e)) from e

    def _page(self, start_index: int, page_size: int | None) -> tuple[int, int]:
        if start_index < 0:
            raise InvalidParameterValueError("start_index must not be negative")
        limit = self.settings.default_page_size if page_size is None else page_size
        if limit <= 0:
            raise InvalidParameterValueError("page_size must be a positive integer")
        return start_index, min(limit, self.settings.max_page_size)

    def _logging_scope(self, ctx: CallContext) -> LoggingContext:
        return LoggingContext(request_id=ctx.request_id, caller_id=str(ctx.caller.id))

    async def _publish(
        self,
        ctx: CallContext,
        event_type: str,
        description: str,
        target: Role | Group,
        details: dict[str, Any] | None = None,
    ) -> None:
        if self.event_bus is None:
            return
        await self.event_bus.publish(
            AclEvent(
                event_type=event_type,
                description=description,
                actor_id=ctx.caller.id,
                target_type=type(target).__name__.lower(),
                target_id=target.id,
                request_id=ctx.request_id,
                details=details or {},
            )
        )
