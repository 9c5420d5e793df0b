"""Command-line interface for aclcore.

This module provides the CLI commands for initializing the ACL store and
administering roles, groups and their memberships.
"""

import asyncio
from typing import Any, Awaitable, Callable, NoReturn

import click

from aclcore.core.config import get_settings
from aclcore.core.events import EventBus, register_builtin_subscribers
from aclcore.core.exceptions import AclError
from aclcore.core.logging import configure_logging, get_logger
from aclcore.domain.entities import Account, AccountType, CallContext, Group, Role
from aclcore.domain.services import AclService
from aclcore.infrastructure.persistence.database import (
    DatabaseManager,
    get_db_manager,
    init_database,
    unit_of_work,
)
from aclcore.infrastructure.persistence.repositories import (
    AccountRepository,
    DomainRepository,
)

logger = get_logger(__name__)

as_account_option = click.option(
    "--as-account",
    "as_account",
    type=int,
    default=None,
    help="ID of the calling account (defaults to the root admin)",
)


def _db(ctx: click.Context) -> DatabaseManager:
    return ctx.obj.get("db") or get_db_manager()


def _run(ctx: click.Context, action: Callable[[DatabaseManager], Awaitable[Any]]) -> Any:
    """Run an async action against the database and report ACL errors."""
    db = _db(ctx)

    async def runner() -> Any:
        try:
            return await action(db)
        finally:
            await db.disconnect()

    try:
        return asyncio.run(runner())
    except AclError as e:
        logger.error("CLI command failed", error=e.message)
        raise click.ClickException(e.message)


async def _resolve_caller(db: DatabaseManager, account_id: int | None) -> CallContext:
    async with unit_of_work(db.session_factory) as session:
        account_repo = AccountRepository(session)
        if account_id is not None:
            account = await account_repo.get_by_id(account_id)
        else:
            root = await DomainRepository(session).get_root()
            account = (
                await account_repo.get_by_name(root.id, db.settings.root_admin_account_name)
                if root
                else None
            )
    if account is None:
        raise click.ClickException(
            f"Unknown calling account {account_id or db.settings.root_admin_account_name}; "
            "run 'aclcore init-db' first"
        )
    return CallContext(caller=account)


def _service(db: DatabaseManager) -> AclService:
    bus = EventBus()
    register_builtin_subscribers(bus)
    return AclService(db.session_factory, event_bus=bus, settings=db.settings)


def _echo_role(role: Role) -> None:
    scope = "global" if role.is_global else f"domain {role.domain_id}"
    parent = f" parent={role.parent_role_id}" if role.parent_role_id else ""
    click.echo(f"{role.id}\t{role.name}\t({scope}){parent}")


def _echo_group(group: Group) -> None:
    scope = "global" if group.domain_id is None else f"domain {group.domain_id}"
    click.echo(f"{group.id}\t{group.name}\t({scope})")


@click.group()
@click.version_option(version="0.1.0", prog_name="aclcore")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides ACL_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """aclcore - role-based access control administration.

    Define roles, grant them API permissions, collect them into groups and
    attach groups to accounts, within domain-scoped boundaries.
    """
    ctx.ensure_object(dict)
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def init_db(ctx: click.Context, force: bool) -> None:
    """Create the ACL tables and seed the ROOT domain and root admin.

    Use this only in development. In production, use migrations instead.
    """
    settings = _db(ctx).settings
    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    _run(ctx, init_database)
    click.echo("Database initialized successfully.")


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Display aclcore configuration."""
    settings = _db(ctx).settings
    click.echo(f"""
aclcore v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Permissions:
  Cache TTL:    {settings.permission_cache_ttl_seconds} seconds
  Page Size:    {settings.default_page_size} (max {settings.max_page_size})

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


# ----------------------------------------------------------------------
# Domains and accounts
# ----------------------------------------------------------------------


@cli.group()
def domain() -> None:
    """Manage the domain tree."""


@domain.command("create")
@click.argument("name")
@click.option("--parent", "parent_id", type=int, default=None, help="Parent domain ID (default ROOT)")
@click.pass_context
def domain_create(ctx: click.Context, name: str, parent_id: int | None) -> None:
    """Create a sub-domain."""

    async def action(db: DatabaseManager):
        async with unit_of_work(db.session_factory) as session:
            domain_repo = DomainRepository(session)
            parent = (
                await domain_repo.get_by_id(parent_id)
                if parent_id is not None
                else await domain_repo.get_root()
            )
            if parent is None:
                raise click.ClickException(f"Unknown parent domain {parent_id}")
            try:
                return await domain_repo.create_child(parent, name)
            except ValueError as e:
                raise click.ClickException(str(e))

    created = _run(ctx, action)
    click.echo(f"{created.id}\t{created.path}")


@cli.group()
def account() -> None:
    """Manage accounts."""


@account.command("create")
@click.argument("name")
@click.option("--domain", "domain_id", type=int, required=True, help="Owning domain ID")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType]),
    default=AccountType.USER.value,
    show_default=True,
)
@click.pass_context
def account_create(ctx: click.Context, name: str, domain_id: int, account_type: str) -> None:
    """Create an account in a domain."""

    async def action(db: DatabaseManager) -> Account:
        async with unit_of_work(db.session_factory) as session:
            if await DomainRepository(session).get_by_id(domain_id) is None:
                raise click.ClickException(f"Unknown domain {domain_id}")
            return await AccountRepository(session).create(
                name, domain_id, AccountType(account_type)
            )

    created = _run(ctx, action)
    click.echo(f"{created.id}\t{created.name}\t{created.account_type.value}")


@account.command("permissions")
@click.argument("account_id", type=int)
@as_account_option
@click.pass_context
def account_permissions(ctx: click.Context, account_id: int, as_account: int | None) -> None:
    """List every API an account may invoke."""

    async def action(db: DatabaseManager) -> set[str]:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).list_account_api_permissions(call_ctx, account_id)

    for api_name in sorted(_run(ctx, action)):
        click.echo(api_name)


# ----------------------------------------------------------------------
# Roles
# ----------------------------------------------------------------------


@cli.group()
def role() -> None:
    """Manage ACL roles and their API permissions."""


@role.command("create")
@click.argument("name")
@click.option("--domain", "domain_id", type=int, default=None, help="Owning domain ID (omit for global)")
@click.option("--description", default=None)
@click.option("--parent", "parent_role_id", type=int, default=None, help="Parent role ID")
@as_account_option
@click.pass_context
def role_create(
    ctx: click.Context,
    name: str,
    domain_id: int | None,
    description: str | None,
    parent_role_id: int | None,
    as_account: int | None,
) -> None:
    """Create a role."""

    async def action(db: DatabaseManager) -> Role:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).create_acl_role(
            call_ctx, domain_id, name, description, parent_role_id
        )

    _echo_role(_run(ctx, action))


@role.command("delete")
@click.argument("role_id", type=int)
@as_account_option
@click.pass_context
def role_delete(ctx: click.Context, role_id: int, as_account: int | None) -> None:
    """Delete a role with its grants and group memberships."""

    async def action(db: DatabaseManager) -> bool:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).delete_acl_role(call_ctx, role_id)

    _run(ctx, action)
    click.echo(f"Deleted role {role_id}")


@role.command("grant")
@click.argument("role_id", type=int)
@click.argument("api_names", nargs=-1, required=True)
@as_account_option
@click.pass_context
def role_grant(
    ctx: click.Context, role_id: int, api_names: tuple[str, ...], as_account: int | None
) -> None:
    """Grant API names to a role."""

    async def action(db: DatabaseManager) -> Role:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).grant_permission_to_acl_role(
            call_ctx, role_id, list(api_names)
        )

    _run(ctx, action)
    click.echo(f"Granted {len(api_names)} API name(s) to role {role_id}")


@role.command("revoke")
@click.argument("role_id", type=int)
@click.argument("api_names", nargs=-1, required=True)
@as_account_option
@click.pass_context
def role_revoke(
    ctx: click.Context, role_id: int, api_names: tuple[str, ...], as_account: int | None
) -> None:
    """Revoke API names from a role."""

    async def action(db: DatabaseManager) -> Role:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).revoke_permission_from_acl_role(
            call_ctx, role_id, list(api_names)
        )

    _run(ctx, action)
    click.echo(f"Revoked {len(api_names)} API name(s) from role {role_id}")


@role.command("show")
@click.argument("role_id", type=int)
@click.option("--no-inherited", is_flag=True, help="Only list the role's own grants")
@as_account_option
@click.pass_context
def role_show(
    ctx: click.Context, role_id: int, no_inherited: bool, as_account: int | None
) -> None:
    """Show a role and its effective API permissions."""

    async def action(db: DatabaseManager) -> tuple[Role, set[str]]:
        call_ctx = await _resolve_caller(db, as_account)
        service = _service(db)
        found = await service.get_acl_role(call_ctx, role_id)
        api_names = await service.list_role_api_permissions(
            call_ctx, role_id, inherited=not no_inherited
        )
        return found, api_names

    found, api_names = _run(ctx, action)
    _echo_role(found)
    for api_name in sorted(api_names):
        click.echo(f"  {api_name}")


@role.command("list")
@click.option("--domain", "domain_id", type=int, default=None)
@click.option("--name", default=None)
@click.option("--start", "start_index", type=int, default=0, show_default=True)
@click.option("--page-size", type=int, default=None)
@as_account_option
@click.pass_context
def role_list(
    ctx: click.Context,
    domain_id: int | None,
    name: str | None,
    start_index: int,
    page_size: int | None,
    as_account: int | None,
) -> None:
    """List roles visible to the caller."""

    async def action(db: DatabaseManager) -> tuple[list[Role], int]:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).list_acl_roles(
            call_ctx,
            name=name,
            domain_id=domain_id,
            start_index=start_index,
            page_size=page_size,
        )

    roles, total = _run(ctx, action)
    for found in roles:
        _echo_role(found)
    click.echo(f"{len(roles)} of {total} role(s)")


# ----------------------------------------------------------------------
# Groups
# ----------------------------------------------------------------------


@cli.group()
def group() -> None:
    """Manage ACL groups and their memberships."""


@group.command("create")
@click.argument("name")
@click.option("--domain", "domain_id", type=int, default=None, help="Owning domain ID (omit for global)")
@click.option("--description", default=None)
@as_account_option
@click.pass_context
def group_create(
    ctx: click.Context,
    name: str,
    domain_id: int | None,
    description: str | None,
    as_account: int | None,
) -> None:
    """Create a group."""

    async def action(db: DatabaseManager) -> Group:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).create_acl_group(call_ctx, domain_id, name, description)

    _echo_group(_run(ctx, action))


@group.command("delete")
@click.argument("group_id", type=int)
@as_account_option
@click.pass_context
def group_delete(ctx: click.Context, group_id: int, as_account: int | None) -> None:
    """Delete a group with its memberships."""

    async def action(db: DatabaseManager) -> bool:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).delete_acl_group(call_ctx, group_id)

    _run(ctx, action)
    click.echo(f"Deleted group {group_id}")


@group.command("list")
@click.option("--domain", "domain_id", type=int, default=None)
@click.option("--name", default=None)
@click.option("--start", "start_index", type=int, default=0, show_default=True)
@click.option("--page-size", type=int, default=None)
@as_account_option
@click.pass_context
def group_list(
    ctx: click.Context,
    domain_id: int | None,
    name: str | None,
    start_index: int,
    page_size: int | None,
    as_account: int | None,
) -> None:
    """List groups visible to the caller."""

    async def action(db: DatabaseManager) -> tuple[list[Group], int]:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).list_acl_groups(
            call_ctx,
            name=name,
            domain_id=domain_id,
            start_index=start_index,
            page_size=page_size,
        )

    groups, total = _run(ctx, action)
    for found in groups:
        _echo_group(found)
    click.echo(f"{len(groups)} of {total} group(s)")


def _membership_command(name: str, member: str, method: str, verb: str) -> None:
    """Register a group membership command taking GROUP_ID and member IDs."""

    @group.command(name)
    @click.argument("group_id", type=int)
    @click.argument("member_ids", type=int, nargs=-1, required=True)
    @as_account_option
    @click.pass_context
    def command(
        ctx: click.Context, group_id: int, member_ids: tuple[int, ...], as_account: int | None
    ) -> None:
        async def action(db: DatabaseManager) -> Group:
            call_ctx = await _resolve_caller(db, as_account)
            return await getattr(_service(db), method)(call_ctx, list(member_ids), group_id)

        _run(ctx, action)
        click.echo(f"{verb} {len(member_ids)} {member}(s) for group {group_id}")

    command.help = f"{verb} {member}s for a group."


_membership_command("add-roles", "role", "add_acl_roles_to_group", "Added")
_membership_command("remove-roles", "role", "remove_acl_roles_from_group", "Removed")
_membership_command("add-accounts", "account", "add_accounts_to_acl_group", "Added")
_membership_command("remove-accounts", "account", "remove_accounts_from_acl_group", "Removed")


@group.command("permissions")
@click.argument("group_id", type=int)
@as_account_option
@click.pass_context
def group_permissions(ctx: click.Context, group_id: int, as_account: int | None) -> None:
    """List the API names granted through a group's roles."""

    async def action(db: DatabaseManager) -> set[str]:
        call_ctx = await _resolve_caller(db, as_account)
        return await _service(db).list_group_api_permissions(call_ctx, group_id)

    for api_name in sorted(_run(ctx, action)):
        click.echo(api_name)


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `aclcore` command is run
    or when using `python -m aclcore`.
    """
    cli(obj={})


if __name__ == "__main__":
    main()
