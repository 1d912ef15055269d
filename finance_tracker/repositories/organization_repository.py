"""Repository for Organization model operations."""

from sqlalchemy.orm import Session
from finance_tracker.models.organization import Organization


class OrganizationRepository:
    """Repository for Organization model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_active_by_id(self, organization_id: int) -> Organization | None:
        """
        Get organization by ID.

        Soft-deleted organizations are treated as missing.
        """
        return (
            self.db.query(Organization)
            .filter(Organization.id == organization_id, Organization.deleted_at.is_(None))
            .first()
        )

    def create_no_commit(self, organization: Organization) -> Organization:
        """Add organization and assign its ID without committing (for atomic ops)"""
        self.db.add(organization)
        self.db.flush()
        return organization

    def update(self, organization: Organization) -> Organization:
        """
        Update an existing organization.

        Args:
            organization: Organization object with updated fields

        Returns:
            Updated Organization object
        """
        self.db.commit()
        self.db.refresh(organization)
        return organization

    def soft_delete(self, organization: Organization, actor_id: int) -> None:
        """
        Hide an organization from every lookup.

        Memberships, invitations and financial records stay in storage; a
        physical delete would cascade to all of them.
        """
        organization.mark_deleted(actor_id)
        self.db.commit()
