from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from finance_tracker.database import get_db
from finance_tracker.dependencies import get_membership
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.services.liability_service import LiabilityService
from finance_tracker.schemas.liability_schemas import (
    LiabilityCreate,
    LiabilityUpdate,
    LiabilityResponse,
    LiabilityDetailResponse,
    LiabilityListResponse,
)

router = APIRouter()


@router.post("", response_model=LiabilityResponse, status_code=status.HTTP_201_CREATED)
async def create_liability(
    data: LiabilityCreate,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """Create a new liability in the current organization"""
    service = LiabilityService(db)
    return service.create_liability(data, context)


@router.get("", response_model=LiabilityListResponse)
async def list_liabilities(
    include_inactive: bool = Query(False),
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    service = LiabilityService(db)
    liabilities = service.get_organization_liabilities(context, include_inactive=include_inactive)
    return LiabilityListResponse(liabilities=liabilities, total=len(liabilities))


@router.get("/{liability_id}", response_model=LiabilityDetailResponse)
async def get_liability(
    liability_id: int,
    include_inactive: bool = Query(False),
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    service = LiabilityService(db)
    return service.get_liability(liability_id, context, include_inactive=include_inactive)


@router.patch("/{liability_id}", response_model=LiabilityResponse)
async def update_liability(
    liability_id: int,
    data: LiabilityUpdate,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    service = LiabilityService(db)
    return service.update_liability(liability_id, data, context)


@router.delete("/{liability_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_liability(
    liability_id: int,
    hard: bool = Query(False),
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """Soft-delete liability (``hard=true`` removes it with its balances)"""
    service = LiabilityService(db)
    service.delete_liability(liability_id, context, hard=hard)
    return None
