"""Resolved organization membership for request authorization."""

from dataclasses import dataclass
from finance_tracker.core.permissions import Action, require_permission
from finance_tracker.models.user import User
from finance_tracker.models.organization import Organization
from finance_tracker.models.role import OrganizationRole


@dataclass
class MembershipContext:
    """
    The caller's active organization membership.

    Resolved once per request by the tenant directory and passed to every
    tenant-scoped service call. organization_id always comes from here,
    never from a request payload.

    Attributes:
        user: The authenticated User object
        organization: The Organization the user is acting in
        role: The user's role within this organization
    """

    user: User
    organization: Organization
    role: OrganizationRole

    @property
    def organization_id(self) -> int:
        return self.organization.id

    @property
    def user_id(self) -> int:
        return self.user.id

    def require(self, action: Action) -> None:
        """Raise ForbiddenException unless the role allows ``action``."""
        require_permission(self.role, action)

    def __repr__(self) -> str:
        return (
            f"<MembershipContext(user_id={self.user.id}, "
            f"organization_id={self.organization.id}, role={self.role.value})>"
        )
