from datetime import date
from decimal import Decimal
from sqlalchemy import Integer, Numeric, ForeignKey, Date, Text, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from finance_tracker.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from finance_tracker.models.account import Account
    from finance_tracker.models.liability import Liability


class Balance(Base, TimestampMixin):
    """
    Dated snapshot of an account or liability value.

    References exactly one of account_id / liability_id. At most one row per
    instrument per calendar date; writing the same date again updates it.
    """

    __tablename__ = "balances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=True,
    )
    liability_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("liabilities.id", ondelete="CASCADE"),
        nullable=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    account: Mapped["Account | None"] = relationship("Account", back_populates="balances")
    liability: Mapped["Liability | None"] = relationship("Liability", back_populates="balances")

    __table_args__ = (
        UniqueConstraint("account_id", "date", name="uq_balances_account_date"),
        UniqueConstraint("liability_id", "date", name="uq_balances_liability_date"),
        CheckConstraint(
            "(account_id IS NULL) <> (liability_id IS NULL)",
            name="ck_balances_single_instrument",
        ),
        Index("ix_balances_account_date", "account_id", "date"),
        Index("ix_balances_liability_date", "liability_id", "date"),
    )
