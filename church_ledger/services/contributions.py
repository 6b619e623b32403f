"""
services/contributions.py

헌금 장부(Contribution Ledger) 비즈니스 로직 모음.

이 파일은 헌금 기록의 생성, 정정, 삭제와
연도별 합계 계산 및 조회 규칙을 담당한다.

설계 원칙:
- recorded_year 는 payment_date 에서만 파생 (모델의 validates 훅)
- 금액은 항상 Decimal 로 계산하고 문자열로 저장 (float 금지)
- 연도 합계는 항상 DB 의 현재 헌금 기록 기준으로 계산
- 마감된 연도에 대한 기록/정정/삭제도 허용한다.
  단, 마감 시 고정된 합계는 바뀌지 않으며 경고 로그를 남긴다.
- 트랜잭션 제어는 호출 측에서 수행

관련 파일:
- church_ledger.models.contribution     : Contribution 모델
- church_ledger.services.years          : 연도 합계 조회/마감 (sum_for_year 사용)
- church_ledger.routers.contributions   : 헌금 API

"""

import datetime
import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from church_ledger.core.errors import NotFound, UnknownMember, ValidationError
from church_ledger.db.types import parse_amount, sum_amounts
from church_ledger.models import Contribution, Member, YearSummary

logger = logging.getLogger(__name__)


def parse_payment_date(value) -> datetime.date:
    """date 또는 'YYYY-MM-DD' 문자열을 date 로 변환."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"invalid payment_date: {value!r} (expected YYYY-MM-DD)")


def _required_period(value) -> str:
    if value is None or not str(value).strip():
        raise ValidationError("period is required")
    return str(value).strip()


def _lock_year(db: Session, year: int) -> YearSummary | None:
    # 마감 작업과 직렬화되도록 해당 연도 요약 행을 잠근다 (행이 없으면 None)
    return db.scalar(
        select(YearSummary).where(YearSummary.year == year).with_for_update()
    )


def _warn_if_closed(db: Session, year: int, action: str, contribution_id=None) -> None:
    summary = _lock_year(db, year)
    if summary is not None and summary.is_closed:
        logger.warning(
            "contribution %s against closed year=%s id=%s; frozen total %s unchanged",
            action, year, contribution_id, summary.total,
        )


def get_contribution(db: Session, contribution_id: int) -> Contribution:
    contribution = db.get(Contribution, contribution_id)
    if contribution is None:
        raise NotFound("contribution", contribution_id)
    return contribution


"""
헌금 기록 생성

- member_id 가 존재하지 않으면 UnknownMember
- amount 가 음수/숫자가 아니면 InvalidAmount
- recorded_year 는 payment_date 의 연도로 자동 설정

"""

def record_contribution(
    db: Session,
    *,
    member_id: int,
    payment_date,
    period: str,
    amount="0",
) -> Contribution:
    if db.get(Member, member_id) is None:
        raise UnknownMember(member_id)

    amount = parse_amount(amount)
    payment_date = parse_payment_date(payment_date)
    period = _required_period(period)

    _warn_if_closed(db, payment_date.year, "recorded")

    contribution = Contribution(
        member_id=member_id,
        payment_date=payment_date,
        period=period,
        amount=amount,
    )
    db.add(contribution)
    db.flush()

    logger.info(
        "contribution recorded id=%s member_id=%s year=%s amount=%s",
        contribution.id, member_id, contribution.recorded_year, amount,
    )
    return contribution


"""
헌금 기록 정정

- 전달된 값만 변경 (None 은 변경 없음)
- payment_date 변경 시 recorded_year 도 같은 작업에서 재계산

"""

def correct_contribution(
    db: Session,
    contribution_id: int,
    *,
    payment_date=None,
    period: str | None = None,
    amount=None,
) -> Contribution:
    contribution = get_contribution(db, contribution_id)
    old_year = contribution.recorded_year

    if amount is not None:
        contribution.amount = parse_amount(amount)
    if period is not None:
        contribution.period = _required_period(period)
    if payment_date is not None:
        contribution.payment_date = parse_payment_date(payment_date)

    for year in sorted({old_year, contribution.recorded_year}):
        _warn_if_closed(db, year, "corrected", contribution.id)

    db.flush()

    logger.info(
        "contribution corrected id=%s year=%s->%s amount=%s",
        contribution.id, old_year, contribution.recorded_year, contribution.amount,
    )
    return contribution


def remove_contribution(db: Session, contribution_id: int) -> None:
    contribution = get_contribution(db, contribution_id)
    year = contribution.recorded_year

    _warn_if_closed(db, year, "removed", contribution.id)

    db.delete(contribution)
    db.flush()

    logger.info("contribution removed id=%s year=%s", contribution_id, year)


# 특정 연도의 헌금 총액 (기록이 없으면 Decimal("0"))
def sum_for_year(db: Session, year: int) -> Decimal:
    amounts = db.scalars(
        select(Contribution.amount).where(Contribution.recorded_year == year)
    ).all()
    return sum_amounts(amounts)


def list_for_member(db: Session, member_id: int) -> list[Contribution]:
    return list(db.scalars(
        select(Contribution)
        .where(Contribution.member_id == member_id)
        .order_by(Contribution.payment_date.desc(), Contribution.id.desc())
    ).all())


def list_for_year(db: Session, year: int) -> list[Contribution]:
    return list(db.scalars(
        select(Contribution)
        .where(Contribution.recorded_year == year)
        .order_by(Contribution.payment_date.desc(), Contribution.id.desc())
    ).all())


"""
연도별 헌금 기록 + 회원 이름 (아카이브 화면 / 내보내기용)

- 납부일 오름차순 (가장 오래된 기록이 먼저)

"""

def list_for_year_with_member(db: Session, year: int) -> list[tuple[Contribution, str]]:
    rows = db.execute(
        select(Contribution, Member.full_name)
        .join(Member, Member.id == Contribution.member_id)
        .where(Contribution.recorded_year == year)
        .order_by(Contribution.payment_date.asc(), Contribution.id.asc())
    ).all()
    return [(c, name) for c, name in rows]
