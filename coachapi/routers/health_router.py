import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from coachapi.database.connection import engine
from coachapi.schemas.health import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthCheckResponse)
def health_check() -> HealthCheckResponse:
    """서비스/DB 상태 확인 (DB 장애 시에도 200, status로 구분)"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Health check database ping failed: {str(e)}")
        return HealthCheckResponse(status="degraded", database="unavailable")

    return HealthCheckResponse()
