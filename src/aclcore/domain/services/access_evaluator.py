"""Access evaluation for ACL administration.

Decides whether a calling account may administer a role, group or
account. The AclService only depends on the AccessEvaluator protocol, so
platforms can plug in their own account manager.
"""

from typing import Protocol, Union

from sqlalchemy.ext.asyncio import AsyncSession

from aclcore.core.exceptions import PermissionDeniedError
from aclcore.core.logging import get_logger
from aclcore.domain.entities.account import Account, AccountType, Domain
from aclcore.domain.entities.group import Group
from aclcore.domain.entities.role import Role
from aclcore.infrastructure.persistence.repositories import (
    AccountRepository,
    DomainRepository,
)

logger = get_logger(__name__)

AccessTarget = Union[Role, Group, Account]


class AccessEvaluator(Protocol):
    """Collaborator deciding whether a caller may administer an object."""

    async def is_root_admin(self, account_id: int) -> bool:
        ...

    async def check_access(
        self,
        caller: Account,
        target: AccessTarget,
        domain: Domain | None = None,
        required: bool = True,
    ) -> None:
        """Raise PermissionDeniedError unless ``caller`` may administer ``target``."""
        ...


class DomainAccessEvaluator:
    """Default evaluator based on the domain tree.

    Rules:
    - root admins may administer everything;
    - domain admins may administer objects owned by their domain or any
      descendant domain; global objects (no domain) are root-only;
    - plain users may administer nothing.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.account_repo = AccountRepository(session)
        self.domain_repo = DomainRepository(session)

    async def is_root_admin(self, account_id: int) -> bool:
        account = await self.account_repo.get_by_id(account_id)
        return account is not None and account.is_root_admin

    async def check_access(
        self,
        caller: Account,
        target: AccessTarget,
        domain: Domain | None = None,
        required: bool = True,
    ) -> None:
        if not required:
            return
        if await self.is_root_admin(caller.id):
            return

        if caller.account_type != AccountType.DOMAIN_ADMIN:
            self._deny(caller, target)

        target_domain_id = target.domain_id
        if domain is not None:
            target_domain_id = domain.id
        if target_domain_id is None:
            self._deny(caller, target)

        caller_domain = await self.domain_repo.get_by_id(caller.domain_id)
        target_domain = await self.domain_repo.get_by_id(target_domain_id)
        if caller_domain is None or target_domain is None:
            self._deny(caller, target)
        if not caller_domain.contains(target_domain):
            self._deny(caller, target)

    def _deny(self, caller: Account, target: AccessTarget) -> None:
        kind = type(target).__name__.lower()
        logger.info(
            "Access denied",
            caller_id=caller.id,
            target_type=kind,
            target_id=target.id,
        )
        raise PermissionDeniedError(
            f"Account {caller.id} does not have permission to operate on {kind} {target.id}"
        )
