from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import and_, or_, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, Query

from finance_tracker.models.account import Account
from finance_tracker.models.balance import Balance
from finance_tracker.models.base import utcnow
from finance_tracker.models.liability import Liability

_UPSERT_INSERTS = {"sqlite": sqlite_insert, "postgresql": pg_insert}


class BalanceRepository:
    """
    Repository for Balance data access.

    Balances carry no organization_id of their own; tenant isolation comes
    from joining to the owning account or liability, which must also not be
    soft-deleted.
    """

    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, organization_id: int) -> Query:
        return (
            self.db.query(Balance)
            .outerjoin(Account, Balance.account_id == Account.id)
            .outerjoin(Liability, Balance.liability_id == Liability.id)
            .filter(
                or_(
                    and_(Account.organization_id == organization_id, Account.deleted_at.is_(None)),
                    and_(
                        Liability.organization_id == organization_id,
                        Liability.deleted_at.is_(None),
                    ),
                )
            )
        )

    def get_by_id_and_organization(self, balance_id: int, organization_id: int) -> Optional[Balance]:
        """
        Get balance by ID, ensuring its instrument belongs to the organization.

        Returns:
            Balance object or None if not found or owned by a different organization
        """
        return self._scoped(organization_id).filter(Balance.id == balance_id).first()

    def get_dates(self, organization_id: int, descending: bool = True) -> list[date]:
        """Distinct snapshot dates for the organization"""
        order = Balance.date.desc() if descending else Balance.date.asc()
        rows = self._scoped(organization_id).with_entities(Balance.date).distinct().order_by(order).all()
        return [row.date for row in rows]

    def get_for_date(
        self, organization_id: int, on_date: date
    ) -> tuple[list[Balance], list[Balance]]:
        """
        Get balances recorded on a date.

        Returns:
            Tuple of (account balances, liability balances)
        """
        balances = (
            self._scoped(organization_id)
            .filter(Balance.date == on_date)
            .order_by(Balance.id.asc())
            .all()
        )
        account_balances = [b for b in balances if b.account_id is not None]
        liability_balances = [b for b in balances if b.liability_id is not None]
        return account_balances, liability_balances

    def get_all(self, organization_id: int) -> list[Balance]:
        return self._scoped(organization_id).order_by(Balance.date.asc(), Balance.id.asc()).all()

    def get_by_instrument_and_date(
        self, on_date: date, account_id: Optional[int] = None, liability_id: Optional[int] = None
    ) -> Optional[Balance]:
        query = self.db.query(Balance).filter(Balance.date == on_date)
        if account_id is not None:
            query = query.filter(Balance.account_id == account_id)
        else:
            query = query.filter(Balance.liability_id == liability_id)
        return query.populate_existing().first()

    def upsert_no_commit(
        self,
        on_date: date,
        amount: Decimal,
        account_id: Optional[int] = None,
        liability_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> Balance:
        """
        Insert or update the balance for (instrument, date) without committing.

        Uses INSERT ... ON CONFLICT DO UPDATE where the dialect supports it,
        so concurrent writers for the same key end with one row holding the
        last committed amount. A note left out of the update keeps the stored one.
        """
        key_column = "account_id" if account_id is not None else "liability_id"
        now = utcnow()
        values = {
            "account_id": account_id,
            "liability_id": liability_id,
            "amount": amount,
            "date": on_date,
            "note": note,
        }

        insert = _UPSERT_INSERTS.get(self.db.get_bind().dialect.name)
        if insert is not None:
            table = Balance.__table__
            stmt = insert(table).values(**values, created_at=now, updated_at=now)
            stmt = stmt.on_conflict_do_update(
                index_elements=[key_column, "date"],
                set_={
                    "amount": stmt.excluded.amount,
                    "note": func.coalesce(stmt.excluded.note, table.c.note),
                    "updated_at": now,
                },
            )
            self.db.execute(stmt)
        else:
            self._upsert_with_savepoint(values)

        return self.get_by_instrument_and_date(on_date, account_id=account_id, liability_id=liability_id)

    def _upsert_with_savepoint(self, values: dict) -> None:
        """Portable upsert: try the insert, fall back to update on a unique violation"""
        try:
            with self.db.begin_nested():
                self.db.add(Balance(**values))
        except IntegrityError:
            existing = self.get_by_instrument_and_date(
                values["date"], account_id=values["account_id"], liability_id=values["liability_id"]
            )
            existing.amount = values["amount"]
            if values["note"] is not None:
                existing.note = values["note"]
            self.db.flush()

    def delete(self, balance: Balance) -> None:
        """Delete a balance"""
        self.db.delete(balance)
        self.db.commit()
