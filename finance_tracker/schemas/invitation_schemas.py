from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from finance_tracker.models.invitation import InvitationStatus
from finance_tracker.models.role import OrganizationRole


class InvitationCreate(BaseModel):
    """Invite an email address to the caller's organization"""

    email: EmailStr
    role: OrganizationRole = Field(
        default=OrganizationRole.MEMBER, description="Role granted on acceptance (default: MEMBER)"
    )

    @field_validator("email", mode="wrap")
    @classmethod
    def keep_submitted_address(cls, value, handler):
        """Reject malformed addresses but keep the accepted one exactly as sent"""
        handler(value)
        return value


class InvitationResponse(BaseModel):
    """Public invitation fields; the token hash is never exposed"""

    model_config = {"from_attributes": True}

    id: int
    email: str
    role: OrganizationRole
    status: InvitationStatus
    sent_at: datetime
    expires_at: datetime
    accepted_at: datetime | None
    revoked_at: datetime | None


class InvitationCounts(BaseModel):
    total: int
    pending: int
    expired: int
    accepted: int
    revoked: int


class InvitationListResponse(BaseModel):
    """Invitations of the organization grouped by lifecycle state"""

    pending: list[InvitationResponse]
    expired: list[InvitationResponse]
    accepted: list[InvitationResponse]
    revoked: list[InvitationResponse]
    counts: InvitationCounts


class InvitedOrganization(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str


class InvitationAcceptResponse(BaseModel):
    """Result of accepting an invitation"""

    message: str
    organization: InvitedOrganization
    role: OrganizationRole
    accepted_at: datetime | None
    already_member: bool = False
