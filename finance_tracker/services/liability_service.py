from decimal import Decimal
from sqlalchemy.orm import Session
from finance_tracker.core.exceptions import NotFoundException
from finance_tracker.core.permissions import Action
from finance_tracker.models.liability import Liability
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.repositories.liability_repository import LiabilityRepository
from finance_tracker.schemas.liability_schemas import LiabilityCreate, LiabilityUpdate

_DECIMAL_FIELDS = ("interest_rate", "minimum_payment")


def _to_columns(values: dict) -> dict:
    for field in _DECIMAL_FIELDS:
        if values.get(field) is not None:
            values[field] = Decimal(str(values[field]))
    return values


class LiabilityService:
    """Service for liability business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = LiabilityRepository(db)

    def create_liability(self, data: LiabilityCreate, context: MembershipContext) -> Liability:
        context.require(Action.CREATE)
        return self.repo.create(
            context.organization_id, context.user_id, _to_columns(data.model_dump())
        )

    def get_organization_liabilities(
        self, context: MembershipContext, include_inactive: bool = False
    ) -> list[Liability]:
        return self.repo.get_by_organization(
            context.organization_id, include_inactive=include_inactive
        )

    def get_liability(
        self, liability_id: int, context: MembershipContext, include_inactive: bool = False
    ) -> Liability:
        """
        Get specific liability ensuring organization ownership.

        Raises:
            NotFoundException: If liability not found or belongs to another organization
        """
        liability = self.repo.get_by_id_and_organization(
            liability_id,
            context.organization_id,
            include_inactive=include_inactive,
            include_deleted=include_inactive,
        )
        if not liability:
            raise NotFoundException("Liability not found")
        return liability

    def update_liability(
        self, liability_id: int, data: LiabilityUpdate, context: MembershipContext
    ) -> Liability:
        context.require(Action.EDIT)
        liability = self.repo.update(
            liability_id,
            context.organization_id,
            _to_columns(data.model_dump(exclude_unset=True)),
        )
        if not liability:
            raise NotFoundException("Liability not found")
        return liability

    def delete_liability(
        self, liability_id: int, context: MembershipContext, hard: bool = False
    ) -> None:
        """Soft-delete liability, or physically remove it with its balances when hard=True"""
        context.require(Action.DELETE)
        if hard:
            deleted = self.repo.hard_delete(liability_id, context.organization_id)
        else:
            deleted = self.repo.soft_delete(liability_id, context.organization_id, context.user_id)
        if not deleted:
            raise NotFoundException("Liability not found")
