from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from finance_tracker.core.permissions import Action
    from finance_tracker.models.role import OrganizationRole


class FinanceTrackerException(Exception):
    """Base exception for finance tracker"""

    pass


class UnauthorizedException(FinanceTrackerException):
    """Raised when JWT validation fails or the caller cannot be identified"""

    pass


class NotFoundException(FinanceTrackerException):
    """
    Raised when resource not found.

    Also raised when the resource exists but belongs to another organization,
    so callers cannot probe for records outside their tenant.
    """

    pass


class ForbiddenException(FinanceTrackerException):
    """Raised when the caller's role does not allow the requested action"""

    def __init__(
        self,
        message: str,
        action: "Action | None" = None,
        required_role: "OrganizationRole | None" = None,
    ):
        super().__init__(message)
        self.action = action
        self.required_role = required_role


class NoOrganizationException(ForbiddenException):
    """Raised when an authenticated user has no active organization membership"""

    def __init__(self, message: str = "No organization membership"):
        super().__init__(message)


class ValidationException(FinanceTrackerException):
    """Raised for business logic validation errors"""

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.errors = errors or {}


class ConflictException(FinanceTrackerException):
    """Raised when a request collides with the current state of a record"""

    pass


class InvalidTokenException(FinanceTrackerException):
    """Raised when an invitation token does not match any invitation"""

    pass


class InvitationExpiredException(FinanceTrackerException):
    """Raised when an invitation is accepted after its expiry"""

    pass
