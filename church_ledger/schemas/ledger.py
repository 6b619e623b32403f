import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, ConfigDict

from church_ledger.models.year_summary import YearAction


# 금액은 JSON 숫자(float)로 받지 않고 10진수 문자열로만 받는다
AmountStr = str


class ContributionCreateRequest(BaseModel):
    member_id: int
    payment_date: datetime.date = Field(..., examples=["2024-03-01"])
    period: str = Field(..., examples=["2024-Q1"])
    amount: AmountStr = Field("0", examples=["15000.50"])


class ContributionUpdateRequest(BaseModel):
    payment_date: Optional[datetime.date] = None
    period: Optional[str] = None
    amount: Optional[AmountStr] = None


class ContributionResponse(BaseModel):
    id: int
    member_id: int
    payment_date: datetime.date
    period: str
    amount: Decimal
    recorded_year: int

    model_config = ConfigDict(from_attributes=True)


class ContributionWithMemberResponse(ContributionResponse):
    member_name: str


class YearSumResponse(BaseModel):
    year: int
    total: Decimal


class YearSummaryResponse(BaseModel):
    year: int
    total: Decimal
    closed_at: Optional[datetime.datetime]
    note: Optional[str]
    status: Literal["OPEN", "CLOSED"]


class CloseYearRequest(BaseModel):
    note: Optional[str] = None


class YearAuditLogResponse(BaseModel):
    id: int
    year: int
    action: YearAction
    total: Optional[Decimal]
    note: Optional[str]
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
