"""
contributions.py

헌금 장부(Contribution Ledger) API 모음.

주요 기능:
- 헌금 기록 생성 / 정정 / 삭제
- 연도별 헌금 기록 조회 및 합계 조회
- 연도별 아카이브(회원 이름 포함) 조회
- 연도별 헌금 기록 CSV / Excel(xlsx) 내보내기

설계 원칙:
- 비즈니스 로직은 service 계층(church_ledger.services.contributions)에 위임
- 이 라우터는 요청/응답 처리와 트랜잭션(commit/rollback)에만 집중
- 금액은 항상 10진수 문자열로 주고받음

관련 파일:
- church_ledger.services.contributions : 헌금 규칙
- church_ledger.schemas.ledger         : 요청/응답 스키마

"""

import csv
import io
from starlette.responses import StreamingResponse, Response
from openpyxl import Workbook

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from church_ledger.core.deps import get_db, http_error
from church_ledger.core.errors import LedgerError
from church_ledger.schemas.ledger import (
    ContributionCreateRequest,
    ContributionResponse,
    ContributionUpdateRequest,
    ContributionWithMemberResponse,
    YearSumResponse,
)
from church_ledger.services import contributions as ledger
from church_ledger.services.years import validate_year

router = APIRouter(prefix="/contributions", tags=["contributions"])


def _checked_year(year: int) -> int:
    try:
        return validate_year(year)
    except LedgerError as e:
        raise http_error(e)


"""
헌금 기록 생성 API

- 존재하지 않는 회원이면 404
- 금액이 음수/숫자가 아니면 400
- 마감된 연도에 대한 기록도 저장되지만 고정 합계는 바뀌지 않음

"""
@router.post("", response_model=ContributionResponse, status_code=201)
def record_contribution(body: ContributionCreateRequest, db: Session = Depends(get_db)):
    try:
        contribution = ledger.record_contribution(
            db,
            member_id=body.member_id,
            payment_date=body.payment_date,
            period=body.period,
            amount=body.amount,
        )
        db.commit()
        db.refresh(contribution)
        return contribution
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise


@router.get("", response_model=list[ContributionResponse])
def list_for_year(
    year: int = Query(..., description="예: 2024"),
    db: Session = Depends(get_db),
):
    return ledger.list_for_year(db, _checked_year(year))


@router.get("/sum", response_model=YearSumResponse)
def sum_for_year(
    year: int = Query(..., description="예: 2024"),
    db: Session = Depends(get_db),
):
    year = _checked_year(year)
    return YearSumResponse(year=year, total=ledger.sum_for_year(db, year))


"""
연도별 아카이브 조회 API

- 회원 이름을 포함한 헌금 기록
- 납부일 오름차순

"""
@router.get("/archive", response_model=list[ContributionWithMemberResponse])
def archive_for_year(
    year: int = Query(..., description="예: 2024"),
    db: Session = Depends(get_db),
):
    rows = ledger.list_for_year_with_member(db, _checked_year(year))
    return [
        ContributionWithMemberResponse(
            **ContributionResponse.model_validate(c).model_dump(),
            member_name=name,
        )
        for c, name in rows
    ]


EXPORT_HEADER = ["year", "contribution_id", "member_id", "member_name", "payment_date", "period", "amount"]


def _export_row(year: int, c, name: str) -> list:
    # CSV / XLSX 모두 금액은 문자열로 기록 (Excel 숫자 변환 시 소수점 손실 방지)
    return [year, c.id, c.member_id, name, c.payment_date.isoformat(), c.period, str(c.amount)]


"""
연도별 헌금 기록 CSV 다운로드 API

- StreamingResponse로 행 단위 전송
- UTF-8 BOM을 먼저 출력하여 Excel에서 악센트 문자가 깨지지 않도록 처리

"""
@router.get("/export")
def export_year_csv(
    year: int = Query(..., description="예: 2024"),
    db: Session = Depends(get_db),
):
    year = _checked_year(year)
    rows = ledger.list_for_year_with_member(db, year)

    def generate():
        yield "\ufeff"

        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow(EXPORT_HEADER)
        yield output.getvalue()
        output.seek(0)
        output.truncate(0)

        for c, name in rows:
            writer.writerow(_export_row(year, c, name))
            yield output.getvalue()
            output.seek(0)
            output.truncate(0)

    filename = f"contributions_{year}.csv"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(generate(), media_type="text/csv; charset=utf-8", headers=headers)


@router.get("/export.xlsx")
def export_year_xlsx(
    year: int = Query(..., description="예: 2024"),
    db: Session = Depends(get_db),
):
    year = _checked_year(year)
    rows = ledger.list_for_year_with_member(db, year)

    wb = Workbook()
    ws = wb.active
    ws.title = f"contributions_{year}"

    ws.append(EXPORT_HEADER)
    for c, name in rows:
        ws.append(_export_row(year, c, name))

    buf = io.BytesIO()
    wb.save(buf)

    filename = f"contributions_{year}.xlsx"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(
        content=buf.getvalue(),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=headers,
    )


"""
헌금 기록 정정 API

- 전달된 필드만 변경
- 납부일 변경 시 recorded_year 재계산

"""
@router.patch("/{contribution_id}", response_model=ContributionResponse)
def correct_contribution(
    contribution_id: int,
    body: ContributionUpdateRequest,
    db: Session = Depends(get_db),
):
    fields = body.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="no fields to update")

    try:
        contribution = ledger.correct_contribution(db, contribution_id, **fields)
        db.commit()
        db.refresh(contribution)
        return contribution
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise


@router.delete("/{contribution_id}", status_code=204)
def remove_contribution(contribution_id: int, db: Session = Depends(get_db)):
    try:
        ledger.remove_contribution(db, contribution_id)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise
