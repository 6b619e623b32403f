"""
year_summary.py

연도별 헌금 합계(YearSummary) 및 마감/재개 이력(YearAuditLog) 모델 정의 파일.

연도 합계는 두 가지 상태를 가진다.

- 열림(open)   : closed_at IS NULL. 합계는 저장값을 신뢰하지 않고 매번 장부에서 재계산
- 마감(closed) : closed_at IS NOT NULL. 마감 시점의 total이 스냅샷으로 고정됨

마감/재개는 감사(Audit) 목적상 YearAuditLog에 영구 기록한다.

설계 원칙:
- 연도(year) 자체가 기본 키 (연도당 최대 1행)
- 마감된 연도의 total은 마감 작업 외에는 절대 변경하지 않음
- 이력 데이터는 수정/삭제하지 않는 것을 전제로 설계

"""

import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from church_ledger.db.base import Base
from church_ledger.db.types import DecimalString


class YearSummary(Base):
    __tablename__ = "year_summaries"

    year: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    total: Mapped[Decimal] = mapped_column(DecimalString, nullable=False, default=Decimal("0"))
    closed_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None


#  연도 마감 행위 유형 Enum

class YearAction(str, Enum):
    CLOSE_YEAR = "CLOSE_YEAR"
    REOPEN_YEAR = "REOPEN_YEAR"


"""
연도 마감/재개 이력 모델

- year       : 대상 연도
- action     : CLOSE_YEAR / REOPEN_YEAR
- total      : 행위 시점의 합계 (마감: 고정된 합계, 재개: 해제 직전 고정 합계)
- note       : 마감 메모 (재개 시에는 해제된 메모)
- created_at : 행위 발생 시각 (UTC)

"""

class YearAuditLog(Base):
    __tablename__ = "year_audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    year: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    action: Mapped[YearAction] = mapped_column(SAEnum(YearAction, name="year_action", native_enum=False, length=20), nullable=False)
    total: Mapped[Decimal | None] = mapped_column(DecimalString, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.datetime.now(datetime.timezone.utc),
        nullable=False,
    )
