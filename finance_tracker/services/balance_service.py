import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session

from finance_tracker.core.exceptions import NotFoundException
from finance_tracker.core.permissions import Action
from finance_tracker.models.balance import Balance
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.repositories.account_repository import AccountRepository
from finance_tracker.repositories.balance_repository import BalanceRepository
from finance_tracker.repositories.liability_repository import LiabilityRepository
from finance_tracker.schemas.balance_schemas import BalanceCreate, BulkBalanceUpsert

logger = logging.getLogger(__name__)


def _to_decimal(amount: float) -> Decimal:
    return Decimal(str(amount))


class BalanceService:
    """Service layer for balance snapshots and net worth"""

    def __init__(self, db: Session):
        self.db = db
        self.balance_repo = BalanceRepository(db)
        self.account_repo = AccountRepository(db)
        self.liability_repo = LiabilityRepository(db)

    def create_balance(self, data: BalanceCreate, context: MembershipContext) -> Balance:
        """
        Record the balance of one account or liability on a date.

        A second write for the same instrument and date updates the stored
        row in place.

        Raises:
            ForbiddenException: If role cannot create records
            NotFoundException: If the instrument is missing, soft-deleted or
                owned by another organization
        """
        context.require(Action.CREATE)

        if data.account_id is not None:
            account = self.account_repo.get_by_id_and_organization(
                data.account_id, context.organization_id, include_inactive=True
            )
            if not account:
                raise NotFoundException("Account not found")
        else:
            liability = self.liability_repo.get_by_id_and_organization(
                data.liability_id, context.organization_id, include_inactive=True
            )
            if not liability:
                raise NotFoundException("Liability not found")

        try:
            balance = self.balance_repo.upsert_no_commit(
                data.date,
                _to_decimal(data.amount),
                account_id=data.account_id,
                liability_id=data.liability_id,
                note=data.note,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(balance)
        return balance

    def bulk_upsert(self, data: BulkBalanceUpsert, context: MembershipContext) -> list[Balance]:
        """
        Record many balances for one date in a single transaction.

        Every referenced instrument is checked before anything is written;
        one foreign or missing reference rejects the whole batch.

        Raises:
            ForbiddenException: If role cannot create records
            NotFoundException: If any instrument is not a live record of the organization
        """
        context.require(Action.CREATE)

        account_ids = {item.account_id for item in data.balances if item.account_id is not None}
        liability_ids = {
            item.liability_id for item in data.balances if item.liability_id is not None
        }

        found_accounts = self.account_repo.get_ids_in_organization(
            account_ids, context.organization_id
        )
        if found_accounts != account_ids:
            raise NotFoundException("One or more accounts not found")

        found_liabilities = self.liability_repo.get_ids_in_organization(
            liability_ids, context.organization_id
        )
        if found_liabilities != liability_ids:
            raise NotFoundException("One or more liabilities not found")

        try:
            balances = [
                self.balance_repo.upsert_no_commit(
                    data.date,
                    _to_decimal(item.amount),
                    account_id=item.account_id,
                    liability_id=item.liability_id,
                    note=data.note,
                )
                for item in data.balances
            ]
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for balance in balances:
            self.db.refresh(balance)
        logger.info(
            "Bulk upserted %d balances for %s in organization_id=%s",
            len(balances),
            data.date,
            context.organization_id,
        )
        return balances

    def get_dates(self, context: MembershipContext) -> list[date]:
        """Distinct snapshot dates, newest first"""
        return self.balance_repo.get_dates(context.organization_id)

    def get_balances_for_date(
        self, on_date: date, context: MembershipContext
    ) -> tuple[list[Balance], list[Balance]]:
        return self.balance_repo.get_for_date(context.organization_id, on_date)

    def delete_balance(self, balance_id: int, context: MembershipContext) -> None:
        """
        Physically delete a balance.

        Raises:
            ForbiddenException: If role is below ADMIN
            NotFoundException: If balance not found or belongs to another organization
        """
        context.require(Action.DELETE)
        balance = self.balance_repo.get_by_id_and_organization(balance_id, context.organization_id)
        if not balance:
            raise NotFoundException("Balance not found")
        self.balance_repo.delete(balance)

    def get_net_worth(
        self, context: MembershipContext, on_date: Optional[date] = None
    ) -> list[dict]:
        """
        Net worth per snapshot date, oldest first.

        Args:
            context: Membership context
            on_date: Restrict the history to a single date

        Returns:
            One entry per date with asset/liability totals and instrument counts
        """
        totals: dict[date, dict] = defaultdict(
            lambda: {
                "total_assets": Decimal("0"),
                "total_liabilities": Decimal("0"),
                "account_count": 0,
                "liability_count": 0,
            }
        )
        for balance in self.balance_repo.get_all(context.organization_id):
            if on_date is not None and balance.date != on_date:
                continue
            point = totals[balance.date]
            if balance.account_id is not None:
                point["total_assets"] += balance.amount
                point["account_count"] += 1
            else:
                point["total_liabilities"] += balance.amount
                point["liability_count"] += 1

        return [
            {
                "date": snapshot_date,
                "total_assets": float(point["total_assets"]),
                "total_liabilities": float(point["total_liabilities"]),
                "net_worth": float(point["total_assets"] - point["total_liabilities"]),
                "account_count": point["account_count"],
                "liability_count": point["liability_count"],
            }
            for snapshot_date, point in sorted(totals.items())
        ]
