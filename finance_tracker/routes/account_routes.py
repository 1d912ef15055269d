from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from finance_tracker.database import get_db
from finance_tracker.dependencies import get_membership
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.services.account_service import AccountService
from finance_tracker.schemas.account_schemas import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountDetailResponse,
    AccountListResponse,
)

router = APIRouter()


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    data: AccountCreate,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """
    Create a new account in the current organization.

    - **Requires MEMBER role or higher**
    """
    service = AccountService(db)
    return service.create_account(data, context)


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    include_inactive: bool = Query(False, description="Include inactive and deleted accounts"),
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """Get all accounts of the current organization with their latest balance"""
    service = AccountService(db)
    accounts = service.get_organization_accounts(context, include_inactive=include_inactive)
    return AccountListResponse(accounts=accounts, total=len(accounts))


@router.get("/{account_id}", response_model=AccountDetailResponse)
async def get_account(
    account_id: int,
    include_inactive: bool = Query(False),
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """Get specific account details with its balance history"""
    service = AccountService(db)
    return service.get_account(account_id, context, include_inactive=include_inactive)


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: int,
    data: AccountUpdate,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """Update account details"""
    service = AccountService(db)
    return service.update_account(account_id, data, context)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: int,
    hard: bool = Query(False, description="Permanently remove the account and its balances"),
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """
    Delete account.

    - **Requires ADMIN role or higher**
    - Soft delete by default; ``hard=true`` removes the account and its balances
    """
    service = AccountService(db)
    service.delete_account(account_id, context, hard=hard)
    return None
