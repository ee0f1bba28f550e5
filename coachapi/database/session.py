import logging

from coachapi.database.connection import SessionLocal

logger = logging.getLogger(__name__)


def get_db():
    """요청(또는 Lambda 실행 환경) 단위 세션

    커밋/롤백 시점은 서비스가 정합니다. 여기서는 처리되지 않은
    예외로 남은 트랜잭션만 정리합니다.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            logger.warning("Rolling back open transaction after unhandled error")
            db.rollback()
        raise
    finally:
        db.close()
