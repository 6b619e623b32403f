"""
services/years.py

연도 합계(Year Summary) 엔진.

연도별 헌금 합계의 조회와 마감(close) / 재개(reopen) 생명주기를 담당한다.

상태 전이:

    열림(open) --close_year--> 마감(closed) --reopen_year--> 열림(open)

- 열림 : 합계는 조회할 때마다 장부(sum_for_year)에서 새로 계산. 조회만으로는 행을 저장하지 않음
- 마감 : 마감 시점의 합계가 year_summaries.total 에 고정되며 이후 헌금 변경에 영향받지 않음
- 재개 : closed_at / note 를 비우고 다시 실시간 계산으로 돌아감. 이력은 YearAuditLog 에 남음

설계 원칙:
- 고정 합계를 바꾸는 유일한 작업은 close_year
- 마감/재개는 요약 행을 잠근 상태(SELECT ... FOR UPDATE)에서 합계 계산과 저장을 수행
- 트랜잭션 제어는 호출 측에서 수행

관련 파일:
- church_ledger.services.contributions : sum_for_year
- church_ledger.services.year_log      : 마감/재개 이력 기록
- church_ledger.routers.years          : 연도 합계 API

"""

import datetime
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from church_ledger.core.errors import AlreadyClosed, NotClosed, ValidationError
from church_ledger.models import Contribution, YearAction, YearSummary
from church_ledger.services.contributions import sum_for_year
from church_ledger.services.year_log import write_year_log

logger = logging.getLogger(__name__)


def validate_year(year) -> int:
    if isinstance(year, bool) or not isinstance(year, int) or not (1 <= year <= 9999):
        raise ValidationError(f"invalid year: {year!r}")
    return year


def _get_summary_for_update(db: Session, year: int) -> YearSummary | None:
    return db.scalar(
        select(YearSummary).where(YearSummary.year == year).with_for_update()
    )


"""
연도 합계 조회

- 마감된 연도 : 저장된(고정) 행을 그대로 반환
- 열린 연도   : 장부에서 합계를 계산한 임시 객체를 반환 (세션에 추가하지 않음)

"""

def get_summary(db: Session, year: int) -> YearSummary:
    validate_year(year)
    stored = db.get(YearSummary, year)
    if stored is not None and stored.is_closed:
        return stored

    return YearSummary(
        year=year,
        total=sum_for_year(db, year),
        closed_at=None,
        note=stored.note if stored is not None else None,
    )


# 저장된 요약 행이 있거나 헌금 기록이 있는 모든 연도 (최신 연도 먼저)
def list_summaries(db: Session) -> list[YearSummary]:
    years = set(db.scalars(select(YearSummary.year)).all())
    years |= set(db.scalars(select(Contribution.recorded_year).distinct()).all())
    return [get_summary(db, y) for y in sorted(years, reverse=True)]


"""
연도 마감

- 이미 마감된 연도면 AlreadyClosed (기존 고정 합계는 그대로)
- 현재 시점의 sum_for_year 를 total 로 고정하고 closed_at 기록
- 마감 이력을 같은 트랜잭션에 기록

"""

def close_year(db: Session, year: int, note: str | None = None) -> YearSummary:
    validate_year(year)
    note = note.strip() if note and note.strip() else None

    summary = _get_summary_for_update(db, year)
    if summary is not None and summary.is_closed:
        raise AlreadyClosed(year)

    total = sum_for_year(db, year)

    if summary is None:
        summary = YearSummary(year=year)
        db.add(summary)

    summary.total = total
    summary.closed_at = datetime.datetime.now(datetime.timezone.utc)
    summary.note = note

    write_year_log(db, year=year, action=YearAction.CLOSE_YEAR, total=total, note=note)

    try:
        db.flush()
    except IntegrityError as e:
        # 동시에 같은 연도를 처음 마감하려 한 다른 트랜잭션이 먼저 행을 만든 경우
        raise AlreadyClosed(year) from e

    logger.info("year closed year=%s total=%s", year, total)
    return summary


"""
연도 재개

- 마감되지 않은 연도면 NotClosed
- closed_at / note 를 비우고, 이후 조회는 다시 실시간 합계
- 해제 직전의 고정 합계와 메모를 이력에 남김

"""

def reopen_year(db: Session, year: int) -> YearSummary:
    validate_year(year)

    summary = _get_summary_for_update(db, year)
    if summary is None or not summary.is_closed:
        raise NotClosed(year)

    write_year_log(db, year=year, action=YearAction.REOPEN_YEAR, total=summary.total, note=summary.note)

    summary.closed_at = None
    summary.note = None
    db.flush()

    logger.info("year reopened year=%s previous_total=%s", year, summary.total)
    return get_summary(db, year)


"""
직전 연도 자동 마감

- today 기준 전년도가 이미 마감되어 있으면 None
- 아니면 합계를 담은 메모와 함께 마감하고 요약을 반환

"""

def close_previous_year(db: Session, today: datetime.date | None = None) -> YearSummary | None:
    previous = (today or datetime.date.today()).year - 1

    stored = db.get(YearSummary, previous)
    if stored is not None and stored.is_closed:
        return None

    total = sum_for_year(db, previous)
    note = f"Contributions for {previous} / total: {total}"
    return close_year(db, previous, note=note)
