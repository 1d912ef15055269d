"""Organization role enum for role-based access control."""

from enum import Enum as PyEnum


class OrganizationRole(str, PyEnum):
    """
    Organization membership roles with hierarchical permissions.

    Role Hierarchy (highest to lowest):
    1. OWNER - Full control, can rename or delete the organization
    2. ADMIN - Manage data, delete records, send and revoke invitations
    3. MEMBER - Create and edit accounts, liabilities and balances
    4. VIEWER - Read-only access to all data

    Roles compare by privilege, so ``OrganizationRole.ADMIN > OrganizationRole.MEMBER``.
    """

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    VIEWER = "VIEWER"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def __ge__(self, other):
        if not isinstance(other, OrganizationRole):
            return NotImplemented
        return self.rank >= other.rank

    def __gt__(self, other):
        if not isinstance(other, OrganizationRole):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other):
        if not isinstance(other, OrganizationRole):
            return NotImplemented
        return self.rank <= other.rank

    def __lt__(self, other):
        if not isinstance(other, OrganizationRole):
            return NotImplemented
        return self.rank < other.rank


_ROLE_RANK = {
    OrganizationRole.OWNER: 4,
    OrganizationRole.ADMIN: 3,
    OrganizationRole.MEMBER: 2,
    OrganizationRole.VIEWER: 1,
}
