from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from finance_tracker.models.account import AccountType
from finance_tracker.schemas.balance_schemas import BalanceSummary


class AccountCreate(BaseModel):
    """
    Schema for creating a new account.

    organization_id and created_by are not accepted; they come from the
    caller's membership.
    """

    name: str = Field(..., min_length=1, max_length=255)
    type: AccountType
    currency: str = Field(default="USD", pattern=r"^[A-Za-z]{3}$")
    institution: str | None = Field(None, max_length=255)
    account_number: str | None = Field(None, max_length=64)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: str) -> str:
        return value.upper()


class AccountUpdate(BaseModel):
    """Schema for updating an account"""

    name: str | None = Field(None, min_length=1, max_length=255)
    type: AccountType | None = None
    institution: str | None = Field(None, max_length=255)
    account_number: str | None = Field(None, max_length=64)
    is_active: bool | None = None


class AccountResponse(BaseModel):
    """Schema for account response"""

    model_config = {"from_attributes": True}

    id: int
    organization_id: int
    created_by: int
    name: str
    type: AccountType
    currency: str
    institution: str | None
    account_number: str | None
    is_active: bool
    deleted_at: datetime | None
    latest_balance: BalanceSummary | None = None
    created_at: datetime
    updated_at: datetime


class AccountDetailResponse(AccountResponse):
    """Account with its full balance history, newest first"""

    balances: list[BalanceSummary]


class AccountListResponse(BaseModel):
    """Schema for list of accounts"""

    accounts: list[AccountResponse]
    total: int
