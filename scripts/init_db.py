import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text

from coachapi.config import settings
from coachapi.database.connection import engine
from coachapi.models import checkin, gamification, points  # noqa: F401  테이블 등록
from coachapi.models.base import Base


def init_db():
    """스키마와 체크인/게이미피케이션 테이블 생성"""
    try:
        if engine.dialect.name == "postgresql":
            with engine.connect() as conn:
                conn.execute(
                    text(f"CREATE SCHEMA IF NOT EXISTS {settings.POSTGRES_SCHEMA}")
                )
                conn.commit()

        Base.metadata.create_all(bind=engine)
        print(
            f"Database initialized successfully with schema: {settings.POSTGRES_SCHEMA}"
        )

    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise


if __name__ == "__main__":
    init_db()
