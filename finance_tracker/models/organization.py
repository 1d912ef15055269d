"""Organization model for multi-tenant isolation."""

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from finance_tracker.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from finance_tracker.models.organization_member import OrganizationMember
    from finance_tracker.models.invitation import Invitation
    from finance_tracker.models.account import Account
    from finance_tracker.models.liability import Liability


class Organization(Base, TimestampMixin, SoftDeleteMixin):
    """
    Multi-tenant isolation boundary.

    All accounts, liabilities and balances belong to an organization, not
    to individual users. Users reach organization data through memberships
    with a role (Owner, Admin, Member, Viewer).

    A soft-deleted organization is treated as non-existent by every lookup.
    Physically deleting it cascades to memberships, invitations, accounts and
    liabilities.
    """

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    plan: Mapped[str] = mapped_column(String(50), nullable=False, default="FREE")

    # Relationships
    members: Mapped[list["OrganizationMember"]] = relationship(
        "OrganizationMember",
        back_populates="organization",
        cascade="all, delete-orphan",
    )
    invitations: Mapped[list["Invitation"]] = relationship(
        "Invitation",
        back_populates="organization",
        cascade="all, delete-orphan",
    )
    accounts: Mapped[list["Account"]] = relationship(
        "Account",
        back_populates="organization",
        cascade="all, delete-orphan",
    )
    liabilities: Mapped[list["Liability"]] = relationship(
        "Liability",
        back_populates="organization",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name='{self.name}')>"
