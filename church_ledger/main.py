"""
main.py

FastAPI 애플리케이션 진입점(Entry Point).

이 파일은 서버 실행 시 가장 먼저 로드되며,
애플리케이션 전반의 설정과 라우터 등록을 담당한다.

주요 역할:
- FastAPI 앱 인스턴스 생성
- 로깅 설정 및 (개발용) 스키마 생성
- CORS 미들웨어 설정
- 각 도메인별 라우터(members, contributions, years) 등록
- 헬스 체크 및 DB 연결 상태 확인용 엔드포인트 제공

설계 원칙:
- 비즈니스 로직은 포함하지 않고 설정/조립 역할만 수행
- 실제 기능은 routers / services 계층에 위임

관련 파일:
- church_ledger.core.config   : 환경 변수 및 설정 로드
- church_ledger.core.deps     : DB 세션 의존성
- church_ledger.routers.*     : 기능별 API 라우터

"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text

from church_ledger.core.config import settings
from church_ledger.core.deps import get_db
from church_ledger.core.logging_config import configure_logging
from church_ledger.db.base import Base
from church_ledger.db.session import engine
from church_ledger.routers import members, contributions, years

import church_ledger.models  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    if settings.CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Church Ledger", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(members.router)
app.include_router(contributions.router)
app.include_router(years.router)

"""
서버 헬스 체크 엔드포인트

- 애플리케이션 프로세스가 정상 동작 중인지 확인

"""
@app.get("/health")
def health():
    return {"status": "ok"}

"""
데이터베이스 연결 상태 확인 엔드포인트

- 간단한 SELECT 1 쿼리를 통해 DB 연결 여부 확인
- 서버는 살아 있으나 DB가 죽은 상황을 분리해서 감지 가능

"""
@app.get("/db-ping")
def db_ping(db: Session = Depends(get_db)):
    value = db.execute(text("SELECT 1")).scalar_one()
    return {"db": "ok", "value": value}
