"""
members.py

회원 명부(Member Registry) API 모음.

이 파일은 회원 등록/수정/삭제/조회와
회원 구분 일괄 변경(transfer) 요청을 처리한다.

주요 기능:
- 회원 등록 / 정보 수정 / 삭제 (헌금 기록 cascade 삭제)
- 회원 목록 조회 (구분 필터, 이름/카드번호 검색)
- 회원별 누적 헌금 합계 목록
- 회원별 헌금 기록 조회

설계 원칙:
- 비즈니스 로직은 service 계층(church_ledger.services.members)에 위임
- 이 라우터는 요청/응답 처리와 트랜잭션(commit/rollback)에만 집중
- 도메인 예외는 http_error 로 상태 코드 변환

관련 파일:
- church_ledger.services.members        : 회원 규칙
- church_ledger.services.contributions  : 회원별 헌금 기록 조회
- church_ledger.schemas.member          : 요청/응답 스키마

"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from church_ledger.core.deps import get_db, http_error
from church_ledger.core.errors import LedgerError
from church_ledger.models.member import MemberType
from church_ledger.schemas.ledger import ContributionResponse
from church_ledger.schemas.member import (
    MemberCreateRequest,
    MemberResponse,
    MemberUpdateRequest,
    MemberWithTotalResponse,
    TransferRequest,
    TransferResponse,
)
from church_ledger.services import members as registry
from church_ledger.services.contributions import list_for_member

router = APIRouter(prefix="/members", tags=["members"])


"""
회원 등록 API

- card_number 중복 시 409
- full_name / card_number 공백 시 400

"""
@router.post("", response_model=MemberResponse, status_code=201)
def register_member(body: MemberCreateRequest, db: Session = Depends(get_db)):
    try:
        member = registry.register_member(db, **body.model_dump())
        db.commit()
        db.refresh(member)
        return member
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise


@router.get("", response_model=list[MemberResponse])
def list_members(
    member_type: MemberType | None = Query(default=None),
    q: str | None = Query(default=None, description="이름 또는 카드번호 일부"),
    db: Session = Depends(get_db),
):
    return registry.list_members(db, member_type=member_type, q=q)


"""
회원별 누적 헌금 합계 목록 API

- 구분(member_type) 지정 시 해당 구분만
- 합계는 정확한 10진수 문자열로 반환

"""
@router.get("/with-totals", response_model=list[MemberWithTotalResponse])
def list_members_with_totals(
    member_type: MemberType | None = Query(default=None),
    db: Session = Depends(get_db),
):
    rows = registry.list_members_with_totals(db, member_type=member_type)
    return [
        MemberWithTotalResponse(
            **MemberResponse.model_validate(m).model_dump(),
            total_contributions=total,
        )
        for m, total in rows
    ]


"""
회원 구분 일괄 변경 API

- 예: 학습교인(Catechumen) -> 세례교인(Communicant)
- 존재하지 않는 id가 있으면 404, 아무것도 변경하지 않음

"""
@router.post("/transfer", response_model=TransferResponse)
def transfer_members(body: TransferRequest, db: Session = Depends(get_db)):
    try:
        count = registry.transfer_members(db, body.member_ids, body.member_type)
        db.commit()
        return TransferResponse(transferred=count)
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise


@router.get("/{member_id}", response_model=MemberResponse)
def get_member(member_id: int, db: Session = Depends(get_db)):
    try:
        return registry.get_member(db, member_id)
    except LedgerError as e:
        raise http_error(e)


@router.patch("/{member_id}", response_model=MemberResponse)
def update_member(member_id: int, body: MemberUpdateRequest, db: Session = Depends(get_db)):
    fields = body.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="no fields to update")

    try:
        member = registry.update_member(db, member_id, fields)
        db.commit()
        db.refresh(member)
        return member
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise


"""
회원 삭제 API

- 회원과 모든 헌금 기록을 하나의 트랜잭션으로 삭제

"""
@router.delete("/{member_id}", status_code=204)
def delete_member(member_id: int, db: Session = Depends(get_db)):
    try:
        registry.delete_member(db, member_id)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise


@router.get("/{member_id}/contributions", response_model=list[ContributionResponse])
def member_contributions(member_id: int, db: Session = Depends(get_db)):
    try:
        registry.get_member(db, member_id)
    except LedgerError as e:
        raise http_error(e)
    return list_for_member(db, member_id)
