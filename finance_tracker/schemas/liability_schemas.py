from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from finance_tracker.models.liability import LiabilityType
from finance_tracker.schemas.balance_schemas import BalanceSummary


class LiabilityCreate(BaseModel):
    """Schema for creating a new liability"""

    name: str = Field(..., min_length=1, max_length=255)
    type: LiabilityType
    currency: str = Field(default="USD", pattern=r"^[A-Za-z]{3}$")
    interest_rate: Optional[float] = Field(None, ge=0, le=100, description="Annual rate in percent")
    minimum_payment: Optional[float] = Field(None, ge=0)
    due_date: Optional[int] = Field(None, ge=1, le=31, description="Day of month")
    institution: Optional[str] = Field(None, max_length=255)
    account_number: Optional[str] = Field(None, max_length=64)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: str) -> str:
        return value.upper()


class LiabilityUpdate(BaseModel):
    """Schema for updating a liability"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[LiabilityType] = None
    interest_rate: Optional[float] = Field(None, ge=0, le=100)
    minimum_payment: Optional[float] = Field(None, ge=0)
    due_date: Optional[int] = Field(None, ge=1, le=31)
    institution: Optional[str] = Field(None, max_length=255)
    account_number: Optional[str] = Field(None, max_length=64)
    is_active: Optional[bool] = None


class LiabilityResponse(BaseModel):
    """Schema for liability response"""

    model_config = {"from_attributes": True}

    id: int
    organization_id: int
    created_by: int
    name: str
    type: LiabilityType
    currency: str
    interest_rate: Optional[float]
    minimum_payment: Optional[float]
    due_date: Optional[int]
    institution: Optional[str]
    account_number: Optional[str]
    is_active: bool
    deleted_at: Optional[datetime]
    latest_balance: Optional[BalanceSummary] = None
    created_at: datetime
    updated_at: datetime


class LiabilityDetailResponse(LiabilityResponse):
    balances: list[BalanceSummary]


class LiabilityListResponse(BaseModel):
    """Schema for list of liabilities"""

    liabilities: list[LiabilityResponse]
    total: int
