from decimal import Decimal
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Numeric, ForeignKey, Enum, Boolean, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from finance_tracker.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from finance_tracker.models.organization import Organization
    from finance_tracker.models.balance import Balance


class LiabilityType(str, PyEnum):
    """Liability type enumeration"""

    CREDIT_CARD = "CREDIT_CARD"
    STUDENT_LOAN = "STUDENT_LOAN"
    MORTGAGE = "MORTGAGE"
    AUTO_LOAN = "AUTO_LOAN"
    PERSONAL_LOAN = "PERSONAL_LOAN"
    OTHER = "OTHER"


class Liability(Base, TimestampMixin, SoftDeleteMixin):
    """
    Debt owned by an organization.

    interest_rate is an annual percentage (0-100), due_date a day of month.
    """

    __tablename__ = "liabilities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[LiabilityType] = mapped_column(
        Enum(LiabilityType, native_enum=False), nullable=False
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    interest_rate: Mapped[Decimal | None] = mapped_column(Numeric(precision=5, scale=2), nullable=True)
    minimum_payment: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=10, scale=2), nullable=True
    )
    due_date: Mapped[int | None] = mapped_column(Integer, nullable=True)
    institution: Mapped[str | None] = mapped_column(String(255), nullable=True)
    account_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="liabilities"
    )
    balances: Mapped[list["Balance"]] = relationship(
        "Balance",
        back_populates="liability",
        cascade="all, delete-orphan",
        order_by="desc(Balance.date)",
    )

    __table_args__ = (
        Index("ix_liabilities_organization_active", "organization_id", "is_active"),
        CheckConstraint(
            "interest_rate IS NULL OR (interest_rate >= 0 AND interest_rate <= 100)",
            name="ck_liabilities_interest_rate",
        ),
        CheckConstraint(
            "minimum_payment IS NULL OR minimum_payment >= 0", name="ck_liabilities_minimum_payment"
        ),
        CheckConstraint(
            "due_date IS NULL OR (due_date >= 1 AND due_date <= 31)", name="ck_liabilities_due_date"
        ),
    )

    @property
    def latest_balance(self) -> "Balance | None":
        return self.balances[0] if self.balances else None
