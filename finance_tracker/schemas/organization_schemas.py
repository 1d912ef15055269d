from pydantic import BaseModel, Field
from datetime import datetime
from finance_tracker.models.role import OrganizationRole


class OrganizationCreate(BaseModel):
    """Create an organization; the caller becomes its OWNER"""

    name: str = Field(..., min_length=1, max_length=255)


class OrganizationUpdate(BaseModel):
    """Rename organization (OWNER only)"""

    name: str = Field(..., min_length=1, max_length=255)


class OrganizationResponse(BaseModel):
    """Organization details response"""

    id: int
    name: str
    plan: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CurrentOrganizationResponse(OrganizationResponse):
    """Organization the request is acting in, with the caller's role"""

    role: OrganizationRole


class UserOrganizationResponse(BaseModel):
    """One of the caller's organizations"""

    id: int
    name: str
    plan: str
    role: OrganizationRole


class MemberResponse(BaseModel):
    """Organization member details with user info"""

    id: int
    user_id: int
    email: str
    role: OrganizationRole
    invited_by: int | None
    invited_at: datetime
    accepted_at: datetime | None


class OrganizationStatsResponse(BaseModel):
    """Active record counts for the dashboard"""

    member_count: int
    account_count: int
    liability_count: int
