from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from coachapi.config import settings


def build_engine(database_url: str):
    """설정값으로 엔진 생성 (SQLite는 로컬 개발용)"""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=settings.DEBUG,
        )

    return create_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # 연결 유효성 검사
        pool_recycle=3600,  # 1시간마다 연결 재생성
        echo=settings.DEBUG,  # 디버그 모드에서 SQL 로깅
        connect_args={
            "options": f"-csearch_path={settings.POSTGRES_SCHEMA} -clock_timeout={settings.DB_LOCK_TIMEOUT_MS}"
        },
    )


engine = build_engine(settings.database_url)

# Use expire_on_commit=False to avoid DetachedInstanceError when accessing
# attributes after commit within the same request scope (common FastAPI pattern).
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)
