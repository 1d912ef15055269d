import logging

from sqlalchemy.orm import Session
from finance_tracker.core.permissions import Action
from finance_tracker.models.base import utcnow
from finance_tracker.models.organization import Organization
from finance_tracker.models.organization_member import OrganizationMember
from finance_tracker.models.user import User
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.models.role import OrganizationRole
from finance_tracker.repositories.organization_repository import OrganizationRepository
from finance_tracker.repositories.membership_repository import MembershipRepository
from finance_tracker.repositories.account_repository import AccountRepository
from finance_tracker.repositories.liability_repository import LiabilityRepository
from finance_tracker.schemas.organization_schemas import OrganizationCreate, OrganizationUpdate

logger = logging.getLogger(__name__)


class OrganizationService:
    """Service layer for organization management business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.organization_repo = OrganizationRepository(db)
        self.membership_repo = MembershipRepository(db)

    def create_organization(self, data: OrganizationCreate, user: User) -> MembershipContext:
        """
        Create an organization with the caller as OWNER.

        Organization and owner membership are committed together.

        Args:
            data: Organization name
            user: Authenticated user, becomes OWNER

        Returns:
            Membership context for the new organization
        """
        try:
            organization = self.organization_repo.create_no_commit(Organization(name=data.name))
            now = utcnow()
            self.membership_repo.create_no_commit(
                OrganizationMember(
                    organization_id=organization.id,
                    user_id=user.id,
                    role=OrganizationRole.OWNER,
                    invited_at=now,
                    accepted_at=now,
                )
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(organization)
        logger.info("Organization id=%s created by user_id=%s", organization.id, user.id)
        return MembershipContext(user=user, organization=organization, role=OrganizationRole.OWNER)

    def list_user_organizations(self, user: User) -> list[dict]:
        """
        List all organizations that a user belongs to.

        Args:
            user: Authenticated user

        Returns:
            List of organizations with user's role in each organization
        """
        memberships = self.membership_repo.get_user_memberships(user.id)
        return [
            {
                "id": membership.organization.id,
                "name": membership.organization.name,
                "plan": membership.organization.plan,
                "role": membership.role,
            }
            for membership in memberships
        ]

    def get_current_organization(self, context: MembershipContext) -> dict:
        """Current organization details together with the caller's role"""
        organization = context.organization
        return {
            "id": organization.id,
            "name": organization.name,
            "plan": organization.plan,
            "role": context.role,
            "created_at": organization.created_at,
            "updated_at": organization.updated_at,
        }

    def update_organization(
        self, organization_update: OrganizationUpdate, context: MembershipContext
    ) -> Organization:
        """
        Rename organization (OWNER only).

        Raises:
            ForbiddenException: If user is not OWNER
        """
        context.require(Action.MANAGE_ORGANIZATION)

        context.organization.name = organization_update.name
        return self.organization_repo.update(context.organization)

    def delete_organization(self, context: MembershipContext) -> None:
        """
        Soft-delete the current organization (OWNER only).

        Afterwards no membership in it resolves and its invitations can no
        longer be accepted.

        Raises:
            ForbiddenException: If user is not OWNER
        """
        context.require(Action.MANAGE_ORGANIZATION)

        self.organization_repo.soft_delete(context.organization, context.user_id)
        logger.info(
            "Organization id=%s soft-deleted by user_id=%s",
            context.organization_id,
            context.user_id,
        )

    def get_members(self, context: MembershipContext) -> list[dict]:
        """
        Get all members of current organization with user details.

        Args:
            context: Membership context

        Returns:
            List of members with user info
        """
        memberships = self.membership_repo.get_organization_members(context.organization_id)
        return [
            {
                "id": membership.id,
                "user_id": membership.user_id,
                "email": membership.user.email,
                "role": membership.role,
                "invited_by": membership.invited_by,
                "invited_at": membership.invited_at,
                "accepted_at": membership.accepted_at,
            }
            for membership in memberships
        ]

    def get_stats(self, context: MembershipContext) -> dict:
        """Active member/account/liability counts for the current organization"""
        organization_id = context.organization_id
        return {
            "member_count": self.membership_repo.count_members(organization_id),
            "account_count": AccountRepository(self.db).count_active(organization_id),
            "liability_count": LiabilityRepository(self.db).count_active(organization_id),
        }
