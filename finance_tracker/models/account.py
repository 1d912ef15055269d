from enum import Enum as PyEnum
from sqlalchemy import String, Integer, ForeignKey, Enum, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from finance_tracker.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from finance_tracker.models.organization import Organization
    from finance_tracker.models.balance import Balance


class AccountType(str, PyEnum):
    """Account type enumeration"""

    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    INVESTMENT = "INVESTMENT"
    RETIREMENT = "RETIREMENT"
    PROPERTY = "PROPERTY"
    VEHICLE = "VEHICLE"
    CRYPTO = "CRYPTO"
    OTHER = "OTHER"


class Account(Base, TimestampMixin, SoftDeleteMixin):
    """
    Asset owned by an organization.

    Value over time is tracked as dated Balance snapshots rather than a
    running total.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Critical for multi-tenant queries
    )
    created_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[AccountType] = mapped_column(
        Enum(AccountType, native_enum=False), nullable=False
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    institution: Mapped[str | None] = mapped_column(String(255), nullable=True)
    account_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    organization: Mapped["Organization"] = relationship("Organization", back_populates="accounts")
    balances: Mapped[list["Balance"]] = relationship(
        "Balance",
        back_populates="account",
        cascade="all, delete-orphan",  # Delete balances if account deleted
        order_by="desc(Balance.date)",
    )

    __table_args__ = (
        Index("ix_accounts_organization_active", "organization_id", "is_active"),
    )

    @property
    def latest_balance(self) -> "Balance | None":
        return self.balances[0] if self.balances else None
