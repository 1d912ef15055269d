"""Repository for Invitation model operations."""

from sqlalchemy.orm import Session, joinedload
from finance_tracker.models.invitation import Invitation


class InvitationRepository:
    """Repository for Invitation model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id_and_organization(
        self, invitation_id: int, organization_id: int
    ) -> Invitation | None:
        """
        Get invitation ensuring it belongs to the organization.

        Returns None for invitations of other organizations.
        """
        return (
            self.db.query(Invitation)
            .filter(Invitation.id == invitation_id, Invitation.organization_id == organization_id)
            .first()
        )

    def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        """Look up an invitation by the hash of its secret token"""
        return (
            self.db.query(Invitation)
            .options(joinedload(Invitation.organization))
            .filter(Invitation.token_hash == token_hash)
            .first()
        )

    def get_by_organization_and_email(self, organization_id: int, email: str) -> Invitation | None:
        return (
            self.db.query(Invitation)
            .filter(Invitation.organization_id == organization_id, Invitation.email == email)
            .populate_existing()
            .first()
        )

    def get_by_organization(self, organization_id: int) -> list[Invitation]:
        """All invitations of an organization, most recently sent first"""
        return (
            self.db.query(Invitation)
            .filter(Invitation.organization_id == organization_id)
            .order_by(Invitation.sent_at.desc(), Invitation.id.desc())
            .all()
        )

    def create(self, invitation: Invitation) -> Invitation:
        """
        Create invitation.

        Raises:
            IntegrityError: If (organization_id, email) already exists
        """
        self.db.add(invitation)
        self.db.commit()
        self.db.refresh(invitation)
        return invitation

    def update(self, invitation: Invitation) -> Invitation:
        """Update existing invitation"""
        self.db.commit()
        self.db.refresh(invitation)
        return invitation
