"""Domain exceptions."""


class AdminRBACError(Exception):
    """Base exception for adminrbac."""

    pass


class ValidationError(AdminRBACError):
    """Validation failed for input data."""

    pass


class InvalidLevel(ValidationError):
    """Role level outside the 0-100 range."""

    pass


class InvalidPermissionKey(ValidationError):
    """Unknown resource, or action not allowed for the resource."""

    pass


class InvalidStatusTransition(ValidationError):
    """Admin status change not allowed by the lifecycle."""

    pass


class DuplicateName(AdminRBACError):
    """An active role with the same name (or an admin with the same email) exists."""

    pass


class SystemRoleImmutable(AdminRBACError):
    """Structural change or deletion attempted on a system role."""

    pass


class RoleInUse(AdminRBACError):
    """Role is still referenced by admins or child roles."""

    pass


class InvalidHierarchy(AdminRBACError):
    """Parent/child level ordering violated."""

    pass


class CycleDetected(InvalidHierarchy):
    """Parent chain loops back or exceeds the hop limit."""

    pass


class PrivilegeEscalation(AdminRBACError):
    """Actor tried to grant privilege equal to or above its own."""

    pass


class QuotaExceeded(AdminRBACError):
    """Sub-role or sub-user quota reached."""

    pass


class PermissionDenied(AdminRBACError):
    """Actor is not allowed to perform the mutation."""

    pass


class NotFound(AdminRBACError):
    """Requested resource was not found."""

    pass


class Conflict(AdminRBACError):
    """Concurrent modification detected; retry budget exhausted."""

    pass


class DeadlineExceeded(AdminRBACError):
    """Caller-supplied deadline passed before the listing completed."""

    pass
