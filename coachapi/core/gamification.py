"""
게이미피케이션 도메인 규칙

- 업적 코드/포인트 사유 열거형 (닫힌 집합)
- 연속 체크인(스트릭) 계산 규칙
- 스트릭 달성 업적 판정

저장소에 의존하지 않는 순수 로직만 둡니다.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Dict, List, Optional


class AchievementCode(str, Enum):
    """해금 가능한 업적 코드"""

    FIRST_CHECKIN = "first_checkin"
    STREAK_7 = "streak_7"
    STREAK_30 = "streak_30"


class PointsReason(str, Enum):
    """포인트 원장 사유"""

    DAILY_CHECKIN = "daily_checkin"
    FIRST_CHECKIN = "first_checkin"
    STREAK_7 = "streak_7"
    STREAK_30 = "streak_30"


@dataclass(frozen=True)
class AchievementDefinition:
    code: AchievementCode
    title: str
    description: str
    reason: PointsReason
    required_streak_days: Optional[int] = None  # None = 스트릭과 무관


ACHIEVEMENT_DEFINITIONS: Dict[AchievementCode, AchievementDefinition] = {
    AchievementCode.FIRST_CHECKIN: AchievementDefinition(
        code=AchievementCode.FIRST_CHECKIN,
        title="First check-in",
        description="Logged your very first daily check-in",
        reason=PointsReason.FIRST_CHECKIN,
    ),
    AchievementCode.STREAK_7: AchievementDefinition(
        code=AchievementCode.STREAK_7,
        title="7-day streak",
        description="Checked in 7 days in a row",
        reason=PointsReason.STREAK_7,
        required_streak_days=7,
    ),
    AchievementCode.STREAK_30: AchievementDefinition(
        code=AchievementCode.STREAK_30,
        title="30-day streak",
        description="Checked in 30 days in a row",
        reason=PointsReason.STREAK_30,
        required_streak_days=30,
    ),
}

# 평가 순서 고정: 원장 기록 순서가 이 순서를 따름
STREAK_ACHIEVEMENTS: List[AchievementCode] = [
    AchievementCode.STREAK_7,
    AchievementCode.STREAK_30,
]


def get_achievement_definition(code: AchievementCode) -> AchievementDefinition:
    """업적 정의 조회 - 정의가 빠진 코드는 즉시 실패"""
    try:
        return ACHIEVEMENT_DEFINITIONS[AchievementCode(code)]
    except KeyError:
        raise LookupError(f"No definition for achievement code: {code}")


@dataclass(frozen=True)
class StreakState:
    """저장된 스트릭 상태"""

    current_days: int
    last_counted_day: date


@dataclass(frozen=True)
class StreakTransition:
    """스트릭 계산 결과"""

    new_days: int
    is_new_day_for_user: bool


def compute_next_streak(
    existing: Optional[StreakState], incoming_day: date
) -> StreakTransition:
    """
    다음 스트릭 값 계산

    Args:
        existing: 기존 스트릭 (없으면 None)
        incoming_day: 정규화된 체크인 날짜

    Returns:
        StreakTransition: 새 일수와 신규 집계일 여부

    규칙:
    - 기존 없음 → 1일, 신규
    - 같은 날 → 변화 없음, 신규 아님 (재진입 호출)
    - 다음 날 → +1, 신규
    - 그 외(2일 이상 공백, 과거 날짜) → 1일로 리셋, 신규
      과거 날짜도 이력 재계산 없이 리셋으로 처리 (전진 전용 카운터)
    """
    if existing is None:
        return StreakTransition(new_days=1, is_new_day_for_user=True)

    if incoming_day == existing.last_counted_day:
        return StreakTransition(
            new_days=existing.current_days, is_new_day_for_user=False
        )

    if incoming_day == existing.last_counted_day + timedelta(days=1):
        return StreakTransition(
            new_days=existing.current_days + 1, is_new_day_for_user=True
        )

    return StreakTransition(new_days=1, is_new_day_for_user=True)


def qualifying_streak_achievements(streak_days: int) -> List[AchievementCode]:
    """해당 일수로 조건을 만족하는 스트릭 업적 (평가 순서대로)"""
    qualified = []
    for code in STREAK_ACHIEVEMENTS:
        required = get_achievement_definition(code).required_streak_days
        if required is None:
            raise LookupError(f"Streak achievement without threshold: {code}")
        if streak_days >= required:
            qualified.append(code)
    return qualified
