"""Invitation lifecycle: send, list, accept and revoke."""

import logging
from datetime import datetime, timedelta
from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finance_tracker.config import settings
from finance_tracker.core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidTokenException,
    InvitationExpiredException,
    NotFoundException,
    ValidationException,
)
from finance_tracker.core.mailer import ConsoleEmailDispatcher, EmailDispatcher, InvitationEmail
from finance_tracker.core.permissions import Action
from finance_tracker.core.security import generate_invitation_token, hash_invitation_token
from finance_tracker.models.base import utcnow
from finance_tracker.models.invitation import Invitation, InvitationStatus
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.models.organization import Organization
from finance_tracker.models.organization_member import OrganizationMember
from finance_tracker.models.user import User
from finance_tracker.repositories.invitation_repository import InvitationRepository
from finance_tracker.repositories.membership_repository import MembershipRepository
from finance_tracker.repositories.organization_repository import OrganizationRepository
from finance_tracker.repositories.user_repository import UserRepository
from finance_tracker.schemas.invitation_schemas import InvitationCreate

logger = logging.getLogger(__name__)


class InvitationService:
    """
    Service layer for organization invitations.

    Invitations are bound to an email address. The plaintext token only
    ever leaves the service inside the invitation email; storage holds its
    SHA-256 hash.
    """

    def __init__(self, db: Session, email_dispatcher: EmailDispatcher | None = None):
        self.db = db
        self.email_dispatcher = email_dispatcher or ConsoleEmailDispatcher()
        self.invitation_repo = InvitationRepository(db)
        self.membership_repo = MembershipRepository(db)
        self.organization_repo = OrganizationRepository(db)
        self.user_repo = UserRepository(db)

    def send_invitation(
        self,
        data: InvitationCreate,
        context: MembershipContext,
        background_tasks: BackgroundTasks | None = None,
    ) -> Invitation:
        """
        Invite an email address to the current organization.

        Re-inviting an address whose previous invitation expired, was revoked
        or was accepted by a member who since left reuses the same row with a
        fresh token and expiry.

        With ``background_tasks`` the email goes out after the response is
        sent; without it, before returning.

        Raises:
            ForbiddenException: If role is below ADMIN
            ValidationException: If the caller invites their own address
            ConflictException: If the address already belongs to a member or
                has a pending invitation
        """
        context.require(Action.INVITE)
        email = str(data.email)

        if email == context.user.email:
            raise ValidationException(
                "You cannot invite yourself", errors={"email": "Cannot invite your own address"}
            )

        invitee = self.user_repo.get_by_email(email)
        if invitee and self.membership_repo.get_membership(context.organization_id, invitee.id):
            raise ConflictException("User is already a member of this organization")

        invitation = self.invitation_repo.get_by_organization_and_email(
            context.organization_id, email
        )
        if invitation and invitation.status == InvitationStatus.PENDING:
            raise ConflictException("An active invitation already exists for this email")

        token, token_hash = generate_invitation_token()
        now = utcnow()
        fields = {
            "role": data.role,
            "token_hash": token_hash,
            "invited_by": context.user_id,
            "sent_at": now,
            "expires_at": now + timedelta(days=settings.INVITATION_EXPIRE_DAYS),
            "accepted_at": None,
            "revoked_at": None,
        }

        if invitation is None:
            try:
                invitation = self.invitation_repo.create(
                    Invitation(organization_id=context.organization_id, email=email, **fields)
                )
            except IntegrityError:
                # Lost a race with a concurrent send for the same address
                self.db.rollback()
                invitation = self.invitation_repo.get_by_organization_and_email(
                    context.organization_id, email
                )
                if invitation is None:
                    raise
                invitation = self._overwrite(invitation, fields)
        else:
            invitation = self._overwrite(invitation, fields)

        logger.info(
            "Invitation id=%s sent to %s for organization_id=%s as %s by user_id=%s",
            invitation.id,
            email,
            context.organization_id,
            invitation.role.value,
            context.user_id,
        )

        message = InvitationEmail(
            to=email,
            organization_name=context.organization.name,
            inviter_name=context.user.display_name,
            token=token,
            role=invitation.role.value,
        )
        if background_tasks is not None:
            background_tasks.add_task(self._deliver, invitation.id, message)
        else:
            self._deliver(invitation.id, message)

        return invitation

    def _deliver(self, invitation_id: int, message: InvitationEmail) -> None:
        try:
            self.email_dispatcher.send_invitation_email(message)
        except Exception:
            logger.exception("Failed to send invitation email for invitation id=%s", invitation_id)

    def _overwrite(self, invitation: Invitation, fields: dict) -> Invitation:
        for field, value in fields.items():
            setattr(invitation, field, value)
        return self.invitation_repo.update(invitation)

    def list_invitations(self, context: MembershipContext) -> dict:
        """
        All invitations of the current organization grouped by derived status.

        Returns:
            Dict with one list per status and a counts summary
        """
        now = utcnow()
        buckets: dict[str, list[Invitation]] = {status.value: [] for status in InvitationStatus}
        for invitation in self.invitation_repo.get_by_organization(context.organization_id):
            buckets[invitation.status_at(now).value].append(invitation)

        counts = {name: len(items) for name, items in buckets.items()}
        counts["total"] = sum(counts.values())
        return {**buckets, "counts": counts}

    def accept_invitation(self, token: str, user: User) -> dict:
        """
        Join an organization with an invitation token.

        The membership row and the invitation's accepted_at stamp are
        committed in one transaction. A caller who is already a member only
        closes the invitation.

        Raises:
            InvalidTokenException: If no invitation matches the token
            ConflictException: If the invitation was already accepted or revoked
            InvitationExpiredException: If the invitation is past its expiry
            NotFoundException: If the organization was deleted
            ForbiddenException: If the caller's email is not the invited one
        """
        invitation = self.invitation_repo.get_by_token_hash(hash_invitation_token(token))
        if invitation is None:
            raise InvalidTokenException("Invalid invitation token")

        now = utcnow()
        if invitation.accepted_at is not None:
            raise ConflictException("Invitation has already been accepted")
        if invitation.revoked_at is not None:
            raise ConflictException("Invitation has been revoked")
        if invitation.expires_at <= now:
            raise InvitationExpiredException("Invitation has expired")

        organization = self.organization_repo.get_active_by_id(invitation.organization_id)
        if organization is None:
            raise NotFoundException("Organization no longer exists")

        if user.email != invitation.email:
            raise ForbiddenException("This invitation was sent to a different email address")

        existing = self.membership_repo.get_membership(organization.id, user.id)
        if existing:
            return self._close_for_existing_member(invitation, organization, existing, now)

        try:
            membership = self.membership_repo.create_no_commit(
                OrganizationMember(
                    organization_id=organization.id,
                    user_id=user.id,
                    role=invitation.role,
                    invited_by=invitation.invited_by,
                    invited_at=invitation.sent_at,
                    accepted_at=now,
                )
            )
            invitation.accepted_at = now
            self.db.commit()
        except IntegrityError:
            # A concurrent accept created the membership first
            self.db.rollback()
            existing = self.membership_repo.get_membership(organization.id, user.id)
            if existing is None:
                raise
            return self._close_for_existing_member(invitation, organization, existing, now)
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Invitation id=%s accepted: user_id=%s joined organization_id=%s as %s",
            invitation.id,
            user.id,
            organization.id,
            membership.role.value,
        )
        return {
            "message": f"Successfully joined {organization.name}",
            "organization": {"id": organization.id, "name": organization.name},
            "role": membership.role,
            "accepted_at": membership.accepted_at,
            "already_member": False,
        }

    def _close_for_existing_member(
        self,
        invitation: Invitation,
        organization: Organization,
        membership: OrganizationMember,
        now: datetime,
    ) -> dict:
        if invitation.accepted_at is None:
            invitation.accepted_at = now
            self.invitation_repo.update(invitation)
        return {
            "message": "You are already a member of this organization",
            "organization": {"id": organization.id, "name": organization.name},
            "role": membership.role,
            "accepted_at": membership.accepted_at,
            "already_member": True,
        }

    def revoke_invitation(self, invitation_id: int, context: MembershipContext) -> Invitation:
        """
        Revoke a pending or expired invitation.

        Raises:
            ForbiddenException: If role is below ADMIN
            NotFoundException: If invitation not found or belongs to another organization
            ConflictException: If the invitation was already accepted or revoked
        """
        context.require(Action.REVOKE_INVITE)

        invitation = self.invitation_repo.get_by_id_and_organization(
            invitation_id, context.organization_id
        )
        if not invitation:
            raise NotFoundException("Invitation not found")
        if invitation.accepted_at is not None:
            raise ConflictException("Cannot revoke an accepted invitation")
        if invitation.revoked_at is not None:
            raise ConflictException("Invitation has already been revoked")

        invitation.revoked_at = utcnow()
        invitation = self.invitation_repo.update(invitation)
        logger.info(
            "Invitation id=%s revoked in organization_id=%s by user_id=%s",
            invitation.id,
            context.organization_id,
            context.user_id,
        )
        return invitation
