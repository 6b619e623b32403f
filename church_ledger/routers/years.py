"""
years.py

연도 합계(Year Summary) 조회 및 마감/재개 API 모음.

주요 기능:
- 연도 목록 / 단일 연도 합계 조회 (열린 연도는 실시간 합계)
- 연도 마감 (합계 고정) / 재개
- 직전 연도 자동 마감
- 연도별 마감/재개 이력 조회

설계 원칙:
- 마감 상태 전이 규칙은 service 계층(church_ledger.services.years)에 위임
- 이 라우터는 요청/응답 처리와 트랜잭션(commit/rollback)에만 집중

관련 파일:
- church_ledger.services.years     : 연도 합계 엔진
- church_ledger.services.year_log  : 마감/재개 이력

"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from church_ledger.core.deps import get_db, http_error
from church_ledger.core.errors import LedgerError
from church_ledger.models.year_summary import YearSummary
from church_ledger.schemas.ledger import CloseYearRequest, YearAuditLogResponse, YearSummaryResponse
from church_ledger.services import years as engine
from church_ledger.services.year_log import list_year_logs

router = APIRouter(prefix="/years", tags=["years"])


def _to_response(summary: YearSummary) -> YearSummaryResponse:
    return YearSummaryResponse(
        year=summary.year,
        total=summary.total,
        closed_at=summary.closed_at,
        note=summary.note,
        status="CLOSED" if summary.is_closed else "OPEN",
    )


@router.get("", response_model=list[YearSummaryResponse])
def list_years(db: Session = Depends(get_db)):
    return [_to_response(s) for s in engine.list_summaries(db)]


"""
직전 연도 자동 마감 API

- 이미 마감되어 있으면 null 반환
- 아니면 합계 메모와 함께 마감한 결과 반환

"""
@router.post("/close-previous", response_model=YearSummaryResponse | None)
def close_previous_year(db: Session = Depends(get_db)):
    try:
        summary = engine.close_previous_year(db)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise

    return _to_response(summary) if summary is not None else None


@router.get("/{year}", response_model=YearSummaryResponse)
def get_year(year: int, db: Session = Depends(get_db)):
    try:
        return _to_response(engine.get_summary(db, year))
    except LedgerError as e:
        raise http_error(e)


"""
연도 마감 API

- 현재 합계를 고정하고 closed_at 기록
- 이미 마감된 연도면 409

"""
@router.post("/{year}/close", response_model=YearSummaryResponse)
def close_year(year: int, body: CloseYearRequest | None = None, db: Session = Depends(get_db)):
    try:
        summary = engine.close_year(db, year, note=body.note if body else None)
        db.commit()
        db.refresh(summary)
        return _to_response(summary)
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise


@router.post("/{year}/reopen", response_model=YearSummaryResponse)
def reopen_year(year: int, db: Session = Depends(get_db)):
    try:
        summary = engine.reopen_year(db, year)
        db.commit()
        return _to_response(summary)
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise


@router.get("/{year}/history", response_model=list[YearAuditLogResponse])
def year_history(year: int, db: Session = Depends(get_db)):
    return list_year_logs(db, year)
