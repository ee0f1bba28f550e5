from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from coachapi.core.gamification import AchievementCode


class StreakSnapshot(BaseModel):
    """저장된 스트릭 상태"""

    user_id: str
    current_days: int = Field(..., ge=0)
    last_counted_day: Optional[date] = None

    class Config:
        from_attributes = True


class AchievementUnlockEntry(BaseModel):
    """업적 해금 기록"""

    user_id: str
    achievement_code: AchievementCode
    unlocked_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UnlockResult(BaseModel):
    """업적 해금 시도 결과"""

    code: AchievementCode
    already_unlocked: bool


class CheckinEffects(BaseModel):
    """체크인 확정 시 게이미피케이션 처리 결과"""

    streak_days: int = Field(..., description="처리 후 연속 일수")
    points_added: int = Field(..., description="이번 호출에서 추가된 포인트")
    unlocked: List[AchievementCode] = Field(
        default_factory=list, description="이번 호출에서 새로 해금된 업적"
    )
    total_points: int = Field(..., description="처리 후 총 포인트")


class GamificationSummary(BaseModel):
    """내 게이미피케이션 요약"""

    streak_days: int = Field(..., description="현재 연속 일수")
    total_points: int = Field(..., description="총 포인트 (원장 합계)")
    achievements: List[AchievementCode] = Field(
        default_factory=list, description="해금된 업적 코드 (해금 순)"
    )


class AchievementStatus(BaseModel):
    """업적 카탈로그 항목 + 해금 상태"""

    code: AchievementCode
    title: str
    description: str
    required_streak_days: Optional[int] = None
    points: int = Field(..., description="해금 보너스 포인트")
    unlocked: bool
    unlocked_at: Optional[datetime] = None


class AchievementsResponse(BaseModel):
    achievements: List[AchievementStatus]
    unlocked_count: int
