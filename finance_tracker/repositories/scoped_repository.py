"""Tenant-scoped data access shared by accounts and liabilities."""

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Session, Query, selectinload

from finance_tracker.models.account import Account
from finance_tracker.models.liability import Liability

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", Account, Liability)

# Attributes that are stamped by the server and never taken from a payload
PROTECTED_FIELDS = frozenset(
    {"id", "organization_id", "created_by", "created_at", "updated_at", "deleted_at", "deleted_by"}
)


class TenantScopedRepository(Generic[ModelT]):
    """
    Single choke point for reading and writing organization-owned records.

    Every query is filtered by organization_id. By default it also excludes
    soft-deleted and inactive rows; the include_* flags relax only those two
    predicates, never the organization one.

    Lookups of a record owned by another organization return None, exactly
    like a missing record, so callers report "not found" in both cases.
    """

    model: type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def _scoped(
        self,
        organization_id: int,
        include_inactive: bool = False,
        include_deleted: bool = False,
    ) -> Query:
        query = self.db.query(self.model).filter(self.model.organization_id == organization_id)
        if not include_deleted:
            query = query.filter(self.model.deleted_at.is_(None))
        if not include_inactive:
            query = query.filter(self.model.is_active.is_(True))
        return query

    def get_by_organization(
        self,
        organization_id: int,
        include_inactive: bool = False,
    ) -> list[ModelT]:
        """
        Get all records of an organization, oldest first.

        Args:
            organization_id: Caller's organization
            include_inactive: Also return inactive and soft-deleted records
        """
        query = self._scoped(
            organization_id, include_inactive=include_inactive, include_deleted=include_inactive
        )
        return (
            query.options(selectinload(self.model.balances))
            .order_by(self.model.created_at.asc(), self.model.id.asc())
            .all()
        )

    def get_by_id_and_organization(
        self,
        record_id: int,
        organization_id: int,
        include_inactive: bool = False,
        include_deleted: bool = False,
    ) -> ModelT | None:
        """
        Get record ensuring it belongs to the organization (multi-tenant safety).

        Returns None if record doesn't exist, belongs to another organization,
        or is hidden by the inactive/deleted predicates.
        """
        return (
            self._scoped(
                organization_id,
                include_inactive=include_inactive,
                include_deleted=include_deleted,
            )
            .filter(self.model.id == record_id)
            .first()
        )

    def get_ids_in_organization(self, record_ids: set[int], organization_id: int) -> set[int]:
        """Return the subset of record_ids that are live records of the organization"""
        if not record_ids:
            return set()
        rows = (
            self.db.query(self.model.id)
            .filter(
                self.model.id.in_(record_ids),
                self.model.organization_id == organization_id,
                self.model.deleted_at.is_(None),
            )
            .all()
        )
        return {row.id for row in rows}

    def count_active(self, organization_id: int) -> int:
        return self._scoped(organization_id).count()

    def create(self, organization_id: int, actor_id: int, values: dict[str, Any]) -> ModelT:
        """
        Create a record owned by organization_id and attributed to actor_id.

        organization_id/created_by (and other server-stamped fields) present in
        ``values`` are discarded.
        """
        record = self.model(
            **{k: v for k, v in values.items() if k not in PROTECTED_FIELDS},
            organization_id=organization_id,
            created_by=actor_id,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def update(
        self, record_id: int, organization_id: int, values: dict[str, Any]
    ) -> ModelT | None:
        """
        Apply a partial update to a record that is not soft-deleted.

        Inactive records can be updated (e.g. to reactivate them). None values
        for required columns are ignored.
        """
        record = self.get_by_id_and_organization(record_id, organization_id, include_inactive=True)
        if record is None:
            return None
        columns = self.model.__table__.c
        for field, value in values.items():
            if field in PROTECTED_FIELDS:
                continue
            # explicit null only clears optional columns
            if value is None and not columns[field].nullable:
                continue
            setattr(record, field, value)
        self.db.commit()
        self.db.refresh(record)
        return record

    def soft_delete(self, record_id: int, organization_id: int, actor_id: int) -> ModelT | None:
        """Mark record inactive and deleted; it stays in storage with its balances"""
        record = self.get_by_id_and_organization(record_id, organization_id, include_inactive=True)
        if record is None:
            return None
        record.is_active = False
        record.mark_deleted(actor_id)
        self.db.commit()
        self.db.refresh(record)
        logger.info(
            "Soft-deleted %s id=%s organization_id=%s by user_id=%s",
            self.model.__tablename__,
            record_id,
            organization_id,
            actor_id,
        )
        return record

    def hard_delete(self, record_id: int, organization_id: int) -> bool:
        """
        Physically remove record (cascades to balances).

        Soft-deleted records of the organization can be purged this way.
        """
        record = self.get_by_id_and_organization(
            record_id, organization_id, include_inactive=True, include_deleted=True
        )
        if record is None:
            return False
        self.db.delete(record)
        self.db.commit()
        logger.info(
            "Hard-deleted %s id=%s organization_id=%s",
            self.model.__tablename__,
            record_id,
            organization_id,
        )
        return True
