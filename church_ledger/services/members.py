"""
services/members.py

회원 명부(Member Registry) 비즈니스 로직 모음.

이 파일은 회원 등록, 수정, 삭제, 조회 및
회원 구분 일괄 변경(transfer) 규칙을 담당한다.

라우터는 이 파일의 함수를 호출하여
검증/조회 결과를 받아 응답만 처리한다.

설계 원칙:
- HTTP / FastAPI 의존성 없음
- 트랜잭션 제어(commit/rollback)는 호출 측(라우터/스크립트)에서 수행
- card_number 고유성은 사전 조회 + DB UNIQUE 제약 두 단계로 보장
- 회원 삭제 시 헌금 기록은 같은 트랜잭션에서 cascade 삭제

관련 파일:
- church_ledger.models.member      : Member / Gender / MemberType 모델
- church_ledger.routers.members    : 회원 API

"""

import logging
from decimal import Decimal

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from church_ledger.core.errors import DuplicateCardNumber, NotFound, ValidationError
from church_ledger.db.types import sum_amounts
from church_ledger.models import Contribution, Gender, Member, MemberType

logger = logging.getLogger(__name__)

# update_member 로 변경 가능한 필드 (id, created_at 제외)
EDITABLE_FIELDS = ("full_name", "card_number", "address", "phone", "job", "gender", "member_type")


def _required_text(value, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def _optional_text(value) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _coerce_gender(value) -> Gender:
    if value is None:
        return Gender.MALE
    try:
        return Gender(value)
    except ValueError:
        raise ValidationError(f"invalid gender: {value!r}")


def _coerce_member_type(value) -> MemberType:
    if value is None:
        return MemberType.COMMUNICANT
    try:
        return MemberType(value)
    except ValueError:
        raise ValidationError(f"invalid member_type: {value!r}")


def _flush_unique(db: Session, card_number: str) -> None:
    # 사전 조회와 INSERT 사이에 다른 트랜잭션이 같은 번호를 쓴 경우
    try:
        db.flush()
    except IntegrityError as e:
        raise DuplicateCardNumber(card_number) from e


def get_member(db: Session, member_id: int) -> Member:
    member = db.get(Member, member_id)
    if member is None:
        raise NotFound("member", member_id)
    return member


def get_member_by_card_number(db: Session, card_number: str) -> Member | None:
    return db.scalar(select(Member).where(Member.card_number == card_number))


"""
회원 등록

- full_name / card_number 는 공백 불가
- card_number 중복 시 DuplicateCardNumber
- id / created_at 은 시스템이 부여

"""

def register_member(
    db: Session,
    *,
    full_name: str,
    card_number: str,
    address: str | None = None,
    phone: str | None = None,
    job: str | None = None,
    gender=None,
    member_type=None,
) -> Member:
    full_name = _required_text(full_name, "full_name")
    card_number = _required_text(card_number, "card_number")

    if get_member_by_card_number(db, card_number):
        raise DuplicateCardNumber(card_number)

    member = Member(
        full_name=full_name,
        card_number=card_number,
        address=_optional_text(address),
        phone=_optional_text(phone),
        job=_optional_text(job),
        gender=_coerce_gender(gender),
        member_type=_coerce_member_type(member_type),
    )
    db.add(member)
    _flush_unique(db, card_number)

    logger.info("member registered id=%s card_number=%s", member.id, member.card_number)
    return member


"""
회원 정보 수정

- fields 에 포함된 키만 변경 (EDITABLE_FIELDS 외의 키는 ValidationError)
- 다른 회원이 이미 사용 중인 card_number 로 변경 불가

"""

def update_member(db: Session, member_id: int, fields: dict) -> Member:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"fields not editable: {', '.join(sorted(unknown))}")

    # 등록 시 기본값(M / Communicant)은 수정에서 null로 되돌릴 수 없음
    for key in ("gender", "member_type"):
        if key in fields and fields[key] is None:
            raise ValidationError(f"{key} cannot be null")

    member = get_member(db, member_id)

    if "full_name" in fields:
        member.full_name = _required_text(fields["full_name"], "full_name")

    if "card_number" in fields:
        card_number = _required_text(fields["card_number"], "card_number")
        other = db.scalar(
            select(Member).where(Member.card_number == card_number, Member.id != member.id)
        )
        if other:
            raise DuplicateCardNumber(card_number)
        member.card_number = card_number

    for key in ("address", "phone", "job"):
        if key in fields:
            setattr(member, key, _optional_text(fields[key]))

    if "gender" in fields:
        member.gender = _coerce_gender(fields["gender"])
    if "member_type" in fields:
        member.member_type = _coerce_member_type(fields["member_type"])

    _flush_unique(db, member.card_number)
    logger.info("member updated id=%s fields=%s", member.id, sorted(fields))
    return member


"""
회원 삭제

- 해당 회원의 헌금 기록을 같은 트랜잭션 안에서 모두 삭제
- commit 전 실패 시 회원/헌금 모두 롤백되어 부분 삭제 상태가 남지 않음

"""

def delete_member(db: Session, member_id: int) -> None:
    member = get_member(db, member_id)
    removed = len(member.contributions)

    db.delete(member)
    db.flush()

    logger.info("member deleted id=%s contributions_removed=%s", member_id, removed)


def list_members(
    db: Session,
    *,
    member_type=None,
    q: str | None = None,
) -> list[Member]:
    stmt = select(Member)
    if member_type is not None:
        stmt = stmt.where(Member.member_type == _coerce_member_type(member_type))
    if q and q.strip():
        text = q.strip()
        # %, _ 는 와일드카드가 아닌 일반 문자로 검색
        stmt = stmt.where(or_(
            Member.full_name.icontains(text, autoescape=True),
            Member.card_number.icontains(text, autoescape=True),
        ))
    return list(db.scalars(stmt.order_by(Member.id)).all())


"""
회원 목록 + 회원별 누적 헌금 합계

- 합계는 Decimal로 정확히 계산 (float 변환 없음)
- 헌금 기록이 없는 회원은 0

"""

def list_members_with_totals(db: Session, *, member_type=None) -> list[tuple[Member, Decimal]]:
    members = list_members(db, member_type=member_type)
    if not members:
        return []

    amounts: dict[int, list[Decimal]] = {}
    rows = db.execute(
        select(Contribution.member_id, Contribution.amount)
        .where(Contribution.member_id.in_([m.id for m in members]))
    ).all()
    for member_id, amount in rows:
        amounts.setdefault(member_id, []).append(amount)

    return [(m, sum_amounts(amounts.get(m.id, []))) for m in members]


"""
회원 구분 일괄 변경 (예: 학습교인 -> 세례교인)

- 헌금 기록은 회원 id에 그대로 연결되어 유지
- 존재하지 않는 id가 하나라도 있으면 NotFound, 아무것도 변경하지 않음
- 변경된 회원 수를 반환

"""

def transfer_members(db: Session, member_ids: list[int], member_type) -> int:
    if not member_ids:
        return 0

    new_type = _coerce_member_type(member_type)
    wanted = set(member_ids)
    members = db.scalars(select(Member).where(Member.id.in_(wanted))).all()

    missing = wanted - {m.id for m in members}
    if missing:
        raise NotFound("member", sorted(missing)[0])

    for m in members:
        m.member_type = new_type
    db.flush()

    logger.info("members transferred count=%s member_type=%s", len(members), new_type.value)
    return len(members)
