"""
services/year_log.py

연도 마감/재개 이력 기록 서비스.

마감(close_year)과 재개(reopen_year)가 수행될 때마다
YearAuditLog 테이블에 한 행씩 기록한다.

설계 원칙:
- 이력 기록은 마감/재개와 같은 트랜잭션에 포함 (둘 다 반영되거나 둘 다 롤백)
- 이력 데이터는 수정/삭제하지 않는 것을 전제로 설계

"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from church_ledger.models import YearAction, YearAuditLog


"""
연도 이력 기록 함수

- year   : 대상 연도
- action : CLOSE_YEAR / REOPEN_YEAR
- total  : 행위 시점의 고정 합계 (선택)
- note   : 마감 메모 (선택)

NOTE:
- db.commit()은 호출 측(라우터/스크립트)에서 수행

"""

def write_year_log(
    db: Session,
    *,
    year: int,
    action: YearAction,
    total=None,
    note=None,
) -> YearAuditLog:
    log = YearAuditLog(year=year, action=action, total=total, note=note)
    db.add(log)
    return log


def list_year_logs(db: Session, year: int) -> list[YearAuditLog]:
    return list(db.scalars(
        select(YearAuditLog).where(YearAuditLog.year == year).order_by(YearAuditLog.id)
    ).all())
