from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from finance_tracker.database import get_db
from finance_tracker.dependencies import get_membership, get_current_user
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.models.user import User
from finance_tracker.services.organization_service import OrganizationService
from finance_tracker.schemas.organization_schemas import (
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationResponse,
    CurrentOrganizationResponse,
    UserOrganizationResponse,
    MemberResponse,
    OrganizationStatsResponse,
)

router = APIRouter()


@router.post("", response_model=CurrentOrganizationResponse, status_code=status.HTTP_201_CREATED)
async def create_organization(
    data: OrganizationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create an organization.

    The caller becomes its OWNER. Does not require an existing membership.
    """
    service = OrganizationService(db)
    context = service.create_organization(data, user)
    return service.get_current_organization(context)


@router.get("", response_model=list[UserOrganizationResponse])
async def list_user_organizations(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List all organizations the authenticated user belongs to.

    This endpoint does not require an organization context - it lists ALL
    organizations of the user, which is useful for switching with the
    X-Organization-Id header.
    """
    service = OrganizationService(db)
    return service.list_user_organizations(user)


@router.get("/me", response_model=CurrentOrganizationResponse)
async def get_current_organization(
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """Get the organization the request acts in, with the caller's role"""
    service = OrganizationService(db)
    return service.get_current_organization(context)


@router.patch("/me", response_model=OrganizationResponse)
async def update_organization(
    organization_update: OrganizationUpdate,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """
    Update organization name.

    - **Requires OWNER permissions**
    """
    service = OrganizationService(db)
    return service.update_organization(organization_update, context)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_organization(
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """
    Soft-delete the current organization.

    - **Requires OWNER permissions**
    - Data stays in storage but is no longer reachable
    """
    service = OrganizationService(db)
    service.delete_organization(context)
    return None


@router.get("/me/members", response_model=list[MemberResponse])
async def list_members(
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """
    List all members of current organization.

    Available to all members.
    """
    service = OrganizationService(db)
    return service.get_members(context)


@router.get("/me/stats", response_model=OrganizationStatsResponse)
async def get_stats(
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """Counts of members, active accounts and active liabilities"""
    service = OrganizationService(db)
    return service.get_stats(context)
