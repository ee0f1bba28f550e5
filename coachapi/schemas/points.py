from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from coachapi.core.gamification import PointsReason


class PointsLedgerEntry(BaseModel):
    """포인트 원장 항목"""

    id: int = Field(..., description="원장 항목 ID (커서)")
    user_id: str = Field(..., description="사용자 ID")
    delta: int = Field(..., description="포인트 변화량")
    reason: PointsReason = Field(..., description="지급 사유")
    meta: Optional[Dict[str, Any]] = Field(None, description="감사용 부가 정보")
    created_at: Optional[datetime] = Field(None, description="생성 시간")

    class Config:
        from_attributes = True


class PointsHistoryItem(BaseModel):
    """내 포인트 내역 항목"""

    id: str = Field(..., description="원장 항목 ID")
    delta: int = Field(..., description="포인트 변화량")
    reason: PointsReason = Field(..., description="지급 사유")
    meta: Optional[Dict[str, Any]] = Field(None, description="감사용 부가 정보")
    created_at: Optional[datetime] = Field(None, description="생성 시간")


class PointsHistoryResponse(BaseModel):
    """내 포인트 내역 응답 (최신순, 커서 페이지네이션)"""

    items: List[PointsHistoryItem] = Field(..., description="원장 항목 목록")
    next_cursor: Optional[str] = Field(
        None, description="다음 페이지 커서 (마지막 페이지면 null)"
    )
