from sqlalchemy.orm import Session
from finance_tracker.core.exceptions import NotFoundException
from finance_tracker.core.permissions import Action
from finance_tracker.models.account import Account
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.repositories.account_repository import AccountRepository
from finance_tracker.schemas.account_schemas import AccountCreate, AccountUpdate


class AccountService:
    """Service for account business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountRepository(db)

    def create_account(self, data: AccountCreate, context: MembershipContext) -> Account:
        """Create new account owned by the caller's organization"""
        context.require(Action.CREATE)
        return self.repo.create(context.organization_id, context.user_id, data.model_dump())

    def get_organization_accounts(
        self, context: MembershipContext, include_inactive: bool = False
    ) -> list[Account]:
        """Get all accounts for the organization"""
        return self.repo.get_by_organization(
            context.organization_id, include_inactive=include_inactive
        )

    def get_account(
        self, account_id: int, context: MembershipContext, include_inactive: bool = False
    ) -> Account:
        """
        Get specific account ensuring organization ownership.

        Raises:
            NotFoundException: If account not found or belongs to another organization
        """
        account = self.repo.get_by_id_and_organization(
            account_id,
            context.organization_id,
            include_inactive=include_inactive,
            include_deleted=include_inactive,
        )
        if not account:
            raise NotFoundException("Account not found")
        return account

    def update_account(
        self, account_id: int, data: AccountUpdate, context: MembershipContext
    ) -> Account:
        """Update account details (only fields present in the payload)"""
        context.require(Action.EDIT)
        account = self.repo.update(
            account_id, context.organization_id, data.model_dump(exclude_unset=True)
        )
        if not account:
            raise NotFoundException("Account not found")
        return account

    def delete_account(self, account_id: int, context: MembershipContext, hard: bool = False) -> None:
        """
        Soft-delete account, or physically remove it with its balances when hard=True.

        Raises:
            ForbiddenException: If role is below ADMIN
            NotFoundException: If account not found or belongs to another organization
        """
        context.require(Action.DELETE)
        if hard:
            deleted = self.repo.hard_delete(account_id, context.organization_id)
        else:
            deleted = self.repo.soft_delete(account_id, context.organization_id, context.user_id)
        if not deleted:
            raise NotFoundException("Account not found")
