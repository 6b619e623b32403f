"""
member.py

교회 회원(Member) 모델 정의 파일.

회원의 신원 정보와 구분(세례교인 / 학습교인)을 관리하며,
헌금(Contribution) 기록이 참조하는 기준 모델이다.

"""

import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from church_ledger.db.base import Base


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"


"""
회원 구분

- COMMUNICANT : 세례교인(성찬 참여 교인)
- CATECHUMEN  : 학습교인(세례 준비 중)

"""

class MemberType(str, Enum):
    COMMUNICANT = "Communicant"
    CATECHUMEN = "Catechumen"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


"""
회원(Member) 모델

- card_number 는 전체 회원 중 고유 (다른 회원에게 재사용 불가)
- created_at 은 생성 시 한 번만 기록
- 회원 삭제 시 해당 회원의 헌금 기록도 함께 삭제 (DB FK + ORM cascade)

"""

class Member(Base):
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    card_number: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)

    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    job: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # 값("M"/"F", "Communicant"/"Catechumen")을 그대로 저장
    gender: Mapped[Gender] = mapped_column(
        SAEnum(Gender, name="gender", native_enum=False, length=1,
               values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Gender.MALE,
    )
    member_type: Mapped[MemberType] = mapped_column(
        SAEnum(MemberType, name="member_type", native_enum=False, length=20,
               values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=MemberType.COMMUNICANT,
    )

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

    contributions = relationship(
        "Contribution",
        back_populates="member",
        cascade="all, delete-orphan",
        order_by="Contribution.id",
    )
