from finance_tracker.models.liability import Liability
from finance_tracker.repositories.scoped_repository import TenantScopedRepository


class LiabilityRepository(TenantScopedRepository[Liability]):
    """Repository for Liability model operations with multi-tenant support"""

    model = Liability
