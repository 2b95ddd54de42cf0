"""Domain exceptions."""


class CollabRBACError(Exception):
    """Base exception for collabrbac."""

    pass


class PermissionDenied(CollabRBACError):
    """Caller does not have permission for the requested action."""

    pass


class NotFound(CollabRBACError):
    """Requested resource was not found."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class ValidationError(CollabRBACError):
    """Validation failed for input data."""

    pass


class InvalidRoleTransition(CollabRBACError):
    """Attempt to alter or assign the creator role, or role change by a non-creator."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class AuditWriteFailure(CollabRBACError):
    """Audit store could not accept an entry; the paired grant mutation is not complete."""

    def __init__(self, message: str, result: object | None = None) -> None:
        super().__init__(message)
        self.result = result
