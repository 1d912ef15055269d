from sqlalchemy.orm import Session

from finance_tracker.core.exceptions import NoOrganizationException
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.models.user import User
from finance_tracker.repositories.membership_repository import MembershipRepository


class TenantDirectory:
    """Maps a user to the organization membership a request acts under"""

    def __init__(self, db: Session):
        self.membership_repo = MembershipRepository(db)

    def resolve_membership(
        self, user: User, organization_id: int | None = None
    ) -> MembershipContext:
        """
        Resolve the caller's active membership.

        Args:
            user: Authenticated user
            organization_id: Organization explicitly selected by the caller.
                Without it the user's oldest membership is used.

        Raises:
            NoOrganizationException: If no membership exists in an organization
                that is not soft-deleted
        """
        membership = self.membership_repo.get_first_active(user.id, organization_id)
        if membership is None:
            raise NoOrganizationException()
        return MembershipContext(
            user=user,
            organization=membership.organization,
            role=membership.role,
        )
