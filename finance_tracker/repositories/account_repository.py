from finance_tracker.models.account import Account
from finance_tracker.repositories.scoped_repository import TenantScopedRepository


class AccountRepository(TenantScopedRepository[Account]):
    """Repository for Account model operations with multi-tenant support"""

    model = Account
