from sqlalchemy import Column, Date, DateTime, Integer, String, func
from sqlalchemy.schema import UniqueConstraint

from coachapi.models.base import BaseModel, BigIntegerPK


class Streak(BaseModel):
    """사용자별 연속 체크인 일수 (사용자당 1행, 삭제되지 않음)"""

    __tablename__ = "streaks"

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True)

    # 현재 연속 일수
    current_days = Column(Integer, nullable=False, default=0)

    # 마지막으로 집계된 날짜 (기준 오프셋으로 정규화된 달력 날짜)
    # NULL = 아직 집계된 체크인 없음
    last_counted_day = Column(Date, nullable=True)

    def __repr__(self):
        return f"<Streak(user_id={self.user_id}, current_days={self.current_days}, last_counted_day={self.last_counted_day})>"


class AchievementUnlock(BaseModel):
    """업적 해금 기록 - (user_id, achievement_code) 쌍마다 최대 1행"""

    __tablename__ = "achievement_unlocks"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "achievement_code", name="uq_achievement_unlock_user_code"
        ),
    )

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    achievement_code = Column(String(50), nullable=False)
    unlocked_at = Column(DateTime(timezone=True), server_default=func.now())
