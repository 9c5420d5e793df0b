"""Account and domain entities for administrative scoping.

Domains form a tree rooted at ROOT. Every account belongs to exactly one
domain; its account type decides how far its administrative reach extends.
"""

from dataclasses import dataclass
from enum import Enum


class AccountType(str, Enum):
    """Administrative level of an account."""

    ADMIN = "admin"  # root admin
    DOMAIN_ADMIN = "domain_admin"
    USER = "user"


@dataclass
class Domain:
    """Administrative tenancy boundary.

    Attributes:
        id: Unique identifier.
        name: Domain name, unique among siblings.
        path: Slash-delimited ancestry, e.g. "/" for ROOT or "/eng/qa/".
        parent_id: Parent domain, or None for ROOT.
    """

    id: int
    name: str
    path: str
    parent_id: int | None = None

    def __post_init__(self) -> None:
        if not self.path.startswith("/") or not self.path.endswith("/"):
            raise ValueError("Domain path must start and end with '/'")

    def contains(self, other: "Domain") -> bool:
        """Whether ``other`` is this domain or one of its descendants."""
        return other.path.startswith(self.path)


@dataclass
class Account:
    """Platform account that can call ACL operations or be grouped.

    Attributes:
        id: Unique identifier.
        name: Account name.
        domain_id: Domain the account belongs to.
        account_type: Administrative level.
    """

    id: int
    name: str
    domain_id: int
    account_type: AccountType = AccountType.USER

    @property
    def is_root_admin(self) -> bool:
        return self.account_type == AccountType.ADMIN
