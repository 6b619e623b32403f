"""
session.py

데이터베이스 엔진 및 세션(Session) 관리 파일.

이 파일은 SQLAlchemy Engine과 SessionLocal을 생성하여
애플리케이션 전반에서 공통으로 사용하는 DB 연결을 관리한다.

FastAPI 의존성(get_db)을 통해
요청 단위로 세션을 생성/종료하는 구조를 지원한다.

설계 원칙:
- DB 연결 설정은 한 곳에서만 정의
- 세션 생성/종료 책임을 명확히 분리
- pool_pre_ping=True로 유휴 연결 오류 방지
- SQLite 사용 시 외래 키(ON DELETE CASCADE)를 연결마다 활성화

관련 파일:
- church_ledger.core.config   : DATABASE_URL 설정
- church_ledger.core.deps     : get_db 의존성
- tests/conftest.py           : make_engine으로 테스트 엔진 생성

"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from church_ledger.core.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite는 기본적으로 FK 제약을 검사하지 않으므로 연결마다 켜준다
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str) -> Engine:
    is_sqlite = url.startswith("sqlite")
    engine = create_engine(
        url,
        pool_pre_ping=True,
        # TestClient / 스레드풀에서 같은 연결을 공유할 수 있도록 허용
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


# SQLAlchemy Engine 생성
# pool_pre_ping=True:
#   장시간 idle 후 끊어진 DB 커넥션을 자동으로 감지/재연결
engine = make_engine(settings.DATABASE_URL)

# 요청 단위로 사용할 세션 팩토리
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)
