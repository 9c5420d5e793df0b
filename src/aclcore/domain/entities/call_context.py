"""Explicit caller context passed to every ACL operation."""

import uuid
from dataclasses import dataclass

from aclcore.domain.entities.account import Account


@dataclass
class CallContext:
    """Identity of the caller performing an ACL operation.

    Attributes:
        caller: The calling account, already resolved by the session layer.
        request_id: Correlation ID for logging and audit events.

    Example:
        ctx = CallContext(caller=account)
        role = await acl_service.create_acl_role(ctx, 5, "viewer", "Read only", None)
    """

    caller: Account
    request_id: str = ""

    def __post_init__(self) -> None:
        if not self.request_id:
            self.request_id = f"acl_{uuid.uuid4().hex[:12]}"
