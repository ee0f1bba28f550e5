from datetime import date as Date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from coachapi.schemas.gamification import CheckinEffects


class CheckinUpsertRequest(BaseModel):
    """체크인 저장 요청 (같은 날짜면 덮어쓰기)"""

    date: Optional[Date] = Field(
        None, description="체크인 날짜 (YYYY-MM-DD, 기본: 오늘)"
    )
    weight_kg: Optional[Decimal] = Field(
        None, gt=0, le=500, max_digits=5, decimal_places=2, description="체중 (kg)"
    )
    adherence_pct: Optional[int] = Field(
        None, ge=0, le=100, description="계획 준수율 (%)"
    )
    hunger_lvl: Optional[int] = Field(None, ge=1, le=10, description="공복감 (1-10)")
    notes: Optional[str] = Field(None, max_length=2000, description="메모")

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v.strip() == "":
            return None
        return v


class Checkin(BaseModel):
    id: int
    user_id: str
    date: Date
    weight_kg: Optional[Decimal] = None
    adherence_pct: Optional[int] = None
    hunger_lvl: Optional[int] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class CheckinUpsertResponse(BaseModel):
    ok: bool = True
    id: int
    date: Date
    gamification: CheckinEffects


class TodayCheckinResponse(BaseModel):
    checkin: Optional[Checkin] = None
    has_checkin: bool
    date: Date


class CheckinListResponse(BaseModel):
    items: List[Checkin]
