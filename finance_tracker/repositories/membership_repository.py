"""Repository for OrganizationMember model operations."""

from sqlalchemy.orm import Session, contains_eager, joinedload
from finance_tracker.models.organization import Organization
from finance_tracker.models.organization_member import OrganizationMember


class MembershipRepository:
    """Repository for OrganizationMember model operations"""

    def __init__(self, db: Session):
        self.db = db

    def _active_query(self):
        return (
            self.db.query(OrganizationMember)
            .join(OrganizationMember.organization)
            .filter(Organization.deleted_at.is_(None))
            .options(contains_eager(OrganizationMember.organization))
        )

    def get_first_active(
        self, user_id: int, organization_id: int | None = None
    ) -> OrganizationMember | None:
        """
        Get the user's membership in an organization that is not soft-deleted.

        Args:
            user_id: User ID
            organization_id: Restrict to this organization; when omitted the
                oldest membership (lowest id) wins so the choice is stable

        Returns:
            OrganizationMember with organization loaded, or None
        """
        query = self._active_query().filter(OrganizationMember.user_id == user_id)
        if organization_id is not None:
            query = query.filter(OrganizationMember.organization_id == organization_id)
        return query.order_by(OrganizationMember.id.asc()).first()

    def get_membership(self, organization_id: int, user_id: int) -> OrganizationMember | None:
        """
        Get membership for a specific user in a specific organization.

        Args:
            organization_id: Organization ID
            user_id: User ID

        Returns:
            OrganizationMember object or None if not found
        """
        return (
            self.db.query(OrganizationMember)
            .filter(
                OrganizationMember.organization_id == organization_id,
                OrganizationMember.user_id == user_id,
            )
            .first()
        )

    def get_user_memberships(self, user_id: int) -> list[OrganizationMember]:
        """Get all memberships of a user in organizations that still exist"""
        return (
            self._active_query()
            .filter(OrganizationMember.user_id == user_id)
            .order_by(OrganizationMember.id.asc())
            .all()
        )

    def get_organization_members(self, organization_id: int) -> list[OrganizationMember]:
        """
        Get all memberships for an organization.

        Args:
            organization_id: Organization ID

        Returns:
            List of OrganizationMember objects with users loaded
        """
        return (
            self.db.query(OrganizationMember)
            .options(joinedload(OrganizationMember.user))
            .filter(OrganizationMember.organization_id == organization_id)
            .order_by(OrganizationMember.id.asc())
            .all()
        )

    def count_members(self, organization_id: int) -> int:
        return (
            self.db.query(OrganizationMember)
            .filter(OrganizationMember.organization_id == organization_id)
            .count()
        )

    def create_no_commit(self, membership: OrganizationMember) -> OrganizationMember:
        """
        Add membership without committing (for atomic ops).

        Raises:
            IntegrityError: If (organization_id, user_id) already exists
        """
        self.db.add(membership)
        self.db.flush()
        return membership
