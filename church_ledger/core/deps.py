from typing import Generator

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from church_ledger.core.errors import (
    AlreadyClosed,
    DuplicateCardNumber,
    LedgerError,
    NotClosed,
    NotFound,
    UnknownMember,
    ValidationError,
)
from church_ledger.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# 도메인 예외 타입 -> HTTP 상태 코드
ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    UnknownMember: status.HTTP_404_NOT_FOUND,
    DuplicateCardNumber: status.HTTP_409_CONFLICT,
    AlreadyClosed: status.HTTP_409_CONFLICT,
    NotClosed: status.HTTP_409_CONFLICT,
}


def http_error(e: LedgerError) -> HTTPException:
    # InvalidAmount 처럼 하위 타입은 부모(ValidationError)의 상태 코드를 따른다
    for cls in type(e).__mro__:
        if cls in ERROR_STATUS:
            return HTTPException(status_code=ERROR_STATUS[cls], detail=e.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
