from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from finance_tracker.database import get_db
from finance_tracker.dependencies import get_membership
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.services.balance_service import BalanceService
from finance_tracker.schemas.balance_schemas import (
    BalanceCreate,
    BalanceResponse,
    BulkBalanceUpsert,
    BulkBalanceResponse,
    BalanceDatesResponse,
    BalancesOnDateResponse,
    NetWorthHistoryResponse,
)

router = APIRouter()


@router.get("", response_model=BalanceDatesResponse | BalancesOnDateResponse)
async def get_balances(
    on_date: Optional[date] = Query(None, alias="date"),
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """
    Without ``date``: distinct snapshot dates, newest first.
    With ``date``: account and liability balances recorded on that date.
    """
    service = BalanceService(db)
    if on_date is None:
        dates = service.get_dates(context)
        return BalanceDatesResponse(dates=dates, count=len(dates))

    accounts, liabilities = service.get_balances_for_date(on_date, context)
    return BalancesOnDateResponse(
        date=on_date,
        accounts=[BalanceResponse.model_validate(b) for b in accounts],
        liabilities=[BalanceResponse.model_validate(b) for b in liabilities],
    )


@router.get("/net-worth", response_model=NetWorthHistoryResponse)
async def get_net_worth(
    on_date: Optional[date] = Query(None, alias="date"),
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """Net worth per snapshot date, oldest first"""
    service = BalanceService(db)
    history = service.get_net_worth(context, on_date=on_date)
    return NetWorthHistoryResponse(history=history, count=len(history))


@router.post("", response_model=BalanceResponse, status_code=status.HTTP_201_CREATED)
async def create_balance(
    data: BalanceCreate,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """
    Record a balance for one account or liability.

    Writing the same instrument and date again updates the existing balance.
    """
    service = BalanceService(db)
    return service.create_balance(data, context)


@router.post("/bulk", response_model=BulkBalanceResponse, status_code=status.HTTP_201_CREATED)
async def bulk_upsert_balances(
    data: BulkBalanceUpsert,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """Record balances of many instruments for one date (all or nothing)"""
    service = BalanceService(db)
    balances = service.bulk_upsert(data, context)
    return BulkBalanceResponse(
        balances=[BalanceResponse.model_validate(b) for b in balances],
        count=len(balances),
        date=data.date,
    )


@router.delete("/{balance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_balance(
    balance_id: int,
    context: MembershipContext = Depends(get_membership),
    db: Session = Depends(get_db),
):
    """
    Delete a balance.

    - **Requires ADMIN role or higher**
    """
    service = BalanceService(db)
    service.delete_balance(balance_id, context)
    return None
