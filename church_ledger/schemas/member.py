import datetime
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict

from church_ledger.models.member import Gender, MemberType


class MemberCreateRequest(BaseModel):
    full_name: str = Field(..., examples=["Jean Dupont"])
    card_number: str = Field(..., examples=["C-001"])
    address: Optional[str] = None
    phone: Optional[str] = None
    job: Optional[str] = None
    gender: Gender = Gender.MALE
    member_type: MemberType = MemberType.COMMUNICANT


# PATCH: 전달된 필드만 변경 (model_dump(exclude_unset=True))
class MemberUpdateRequest(BaseModel):
    full_name: Optional[str] = None
    card_number: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    job: Optional[str] = None
    gender: Optional[Gender] = None
    member_type: Optional[MemberType] = None


class MemberResponse(BaseModel):
    id: int
    card_number: str
    full_name: str
    address: Optional[str]
    phone: Optional[str]
    job: Optional[str]
    gender: Gender
    member_type: MemberType
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class MemberWithTotalResponse(MemberResponse):
    total_contributions: Decimal


class TransferRequest(BaseModel):
    member_ids: List[int]
    member_type: MemberType


class TransferResponse(BaseModel):
    transferred: int
