from pydantic import BaseModel, Field
from typing import Optional

from coachapi.config import settings


class CursorParams(BaseModel):
    """커서 페이지네이션 파라미터"""
    take: int = Field(
        settings.POINTS_PAGE_DEFAULT,
        ge=1,
        le=settings.POINTS_PAGE_MAX,
        description="페이지당 항목 수",
    )
    cursor: Optional[str] = Field(None, description="이전 페이지의 next_cursor")


# 엔드포인트별 페이지네이션 제한
class PaginationLimits:
    POINTS_HISTORY = {
        "min": 1,
        "max": settings.POINTS_PAGE_MAX,
        "default": settings.POINTS_PAGE_DEFAULT,
    }
