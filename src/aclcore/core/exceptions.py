"""Exceptions raised by ACL operations."""


class AclError(Exception):
    """Base class for all ACL errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidParameterValueError(AclError):
    """Raised when a referenced role, group or account does not exist,
    or when a name or parent assignment violates a data invariant."""

    pass


class PermissionDeniedError(AclError):
    """Raised when the caller may not administer the target object."""

    pass
