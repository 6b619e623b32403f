import datetime
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from church_ledger.db.base import Base
from church_ledger.db.types import DecimalString


class Contribution(Base):
    """헌금 '납부' 레코드.

    - period: 납부가 해당하는 기간 라벨 (예: '2024-01', 'T1-2025'). 형식 검증 없음
    - amount: 10진수 문자열로 저장되는 정확한 금액
    - recorded_year: payment_date의 연도. payment_date가 바뀔 때마다 함께 재계산
    """

    __tablename__ = "contributions"
    __table_args__ = (
        Index("ix_contributions_member_id", "member_id"),
        Index("ix_contributions_recorded_year", "recorded_year"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    member_id: Mapped[int] = mapped_column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False)

    payment_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    period: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(DecimalString, nullable=False, default=Decimal("0"))

    recorded_year: Mapped[int] = mapped_column(Integer, nullable=False)

    member = relationship("Member", back_populates="contributions")

    # payment_date 대입 시점에 recorded_year를 같이 갱신 (생성자 kwargs 포함)
    @validates("payment_date")
    def _derive_recorded_year(self, key, value):
        self.recorded_year = value.year
        return value
