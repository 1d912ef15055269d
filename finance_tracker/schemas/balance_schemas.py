from datetime import date, datetime
from pydantic import BaseModel, Field, model_validator
from typing import Optional

INSTRUMENT_ERROR = "Must provide either account_id or liability_id, but not both"


class BalanceSummary(BaseModel):
    """Balance snapshot embedded in account/liability responses"""

    model_config = {"from_attributes": True}

    id: int
    amount: float
    date: date
    note: Optional[str] = None


class BalanceCreate(BaseModel):
    """Schema for recording a single balance snapshot"""

    account_id: Optional[int] = Field(None, gt=0)
    liability_id: Optional[int] = Field(None, gt=0)
    amount: float
    date: date
    note: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_single_instrument(self):
        if (self.account_id is None) == (self.liability_id is None):
            raise ValueError(INSTRUMENT_ERROR)
        return self


class BulkBalanceItem(BaseModel):
    """One instrument's amount inside a bulk upsert"""

    account_id: Optional[int] = Field(None, gt=0)
    liability_id: Optional[int] = Field(None, gt=0)
    amount: float

    @model_validator(mode="after")
    def check_single_instrument(self):
        if (self.account_id is None) == (self.liability_id is None):
            raise ValueError(INSTRUMENT_ERROR)
        return self


class BulkBalanceUpsert(BaseModel):
    """Schema for recording every balance of one date at once"""

    date: date
    balances: list[BulkBalanceItem] = Field(..., min_length=1, max_length=500)
    note: Optional[str] = Field(None, max_length=1000)


class BalanceResponse(BaseModel):
    """Schema for balance response"""

    model_config = {"from_attributes": True}

    id: int
    account_id: Optional[int]
    liability_id: Optional[int]
    amount: float
    date: date
    note: Optional[str]
    created_at: datetime
    updated_at: datetime


class BulkBalanceResponse(BaseModel):
    balances: list[BalanceResponse]
    count: int
    date: date


class BalanceDatesResponse(BaseModel):
    """Distinct dates that have at least one balance"""

    dates: list[date]
    count: int


class BalancesOnDateResponse(BaseModel):
    date: date
    accounts: list[BalanceResponse]
    liabilities: list[BalanceResponse]


class NetWorthPoint(BaseModel):
    date: date
    total_assets: float
    total_liabilities: float
    net_worth: float
    account_count: int
    liability_count: int


class NetWorthHistoryResponse(BaseModel):
    history: list[NetWorthPoint]
    count: int
