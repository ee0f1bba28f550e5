import os

# coachapi 설정은 import 시점에 로드되므로 먼저 지정
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coachapi.config import Settings
from coachapi.core.auth_middleware import get_current_user
from coachapi.main import create_app
from coachapi.models import checkin, gamification, points  # noqa: F401
from coachapi.models.base import Base
from coachapi.schemas.user import CurrentUser


TEST_USER_ID = "user-123"


@pytest.fixture
def engine():
    """SAVEPOINT를 지원하는 인메모리 SQLite 엔진"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite 기본 트랜잭션 처리를 끄고 SQLAlchemy가 BEGIN을 직접 발행
    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return Settings(_env_file=None, DATABASE_URL="sqlite://")


@pytest.fixture
def app():
    app = create_app()
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(id=TEST_USER_ID)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """인증된 사용자로 동작하는 테스트 클라이언트"""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def anonymous_client():
    """인증 오버라이드 없는 테스트 클라이언트"""
    return TestClient(create_app(), raise_server_exceptions=False)
