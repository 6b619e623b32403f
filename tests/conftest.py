import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from church_ledger.main import app as fastapi_app
from church_ledger.core.config import settings
from church_ledger.core.deps import get_db
from church_ledger.db.base import Base
from church_ledger.db.session import make_engine

# ✅ 모델 import (Base.metadata에 테이블 등록)
import church_ledger.models  # noqa: F401


# 미설정 시 로컬 SQLite 파일로 테스트
TEST_DB_URL = (
    getattr(settings, "TEST_DATABASE_URL", None)
    or os.getenv("TEST_DATABASE_URL")
    or "sqlite:///./church_ledger_test.db"
)

engine = make_engine(TEST_DB_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """테스트 전체 시작/종료 때만 스키마 생성/삭제"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables():
    """각 테스트마다 데이터 초기화 (테이블은 유지, row만 삭제)"""
    # FK 의존성 역순(자식 -> 부모)으로 삭제
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db():
    """테스트에서 직접 DB 조작할 때 쓰는 세션"""
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client():
    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()
