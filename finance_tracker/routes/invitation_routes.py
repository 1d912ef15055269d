from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from finance_tracker.core.mailer import EmailDispatcher, get_email_dispatcher
from finance_tracker.database import get_db
from finance_tracker.dependencies import get_current_user, get_membership
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.models.user import User
from finance_tracker.services.invitation_service import InvitationService
from finance_tracker.schemas.invitation_schemas import (
    InvitationCreate,
    InvitationResponse,
    InvitationListResponse,
    InvitationAcceptResponse,
)

router = APIRouter()


@router.post("", response_model=InvitationResponse, status_code=status.HTTP_201_CREATED)
async def send_invitation(
    data: InvitationCreate,
    background_tasks: BackgroundTasks,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
    email_dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
):
    """
    Invite an email address to the current organization.

    - **Requires ADMIN role or higher**
    - Default role: MEMBER
    - Expires after INVITATION_EXPIRE_DAYS days
    - The email is sent after the response; delivery failures do not cancel the invitation
    """
    service = InvitationService(db, email_dispatcher)
    return service.send_invitation(data, context, background_tasks)


@router.get("", response_model=InvitationListResponse)
async def list_invitations(
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """List invitations grouped into pending, expired, accepted and revoked"""
    service = InvitationService(db)
    return service.list_invitations(context)


@router.post("/accept/{token}", response_model=InvitationAcceptResponse)
async def accept_invitation(
    token: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Accept an invitation.

    Needs no organization context: the caller may not belong to any
    organization yet. The caller's email must match the invited address.
    """
    service = InvitationService(db)
    return service.accept_invitation(token, user)


@router.delete("/{invitation_id}", response_model=InvitationResponse)
async def revoke_invitation(
    invitation_id: int,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """
    Revoke an invitation.

    - **Requires ADMIN role or higher**
    - Accepted invitations cannot be revoked
    """
    service = InvitationService(db)
    return service.revoke_invitation(invitation_id, context)
