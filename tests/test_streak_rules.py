import pytest
from datetime import date

from coachapi.core.gamification import (
    ACHIEVEMENT_DEFINITIONS,
    AchievementCode,
    PointsReason,
    StreakState,
    compute_next_streak,
    get_achievement_definition,
    qualifying_streak_achievements,
)


class TestComputeNextStreak:
    """스트릭 계산 규칙 테스트"""

    def test_first_checkin_starts_at_one(self):
        """기존 스트릭 없음 → 1일, 신규"""
        result = compute_next_streak(None, date(2025, 1, 15))

        assert result.new_days == 1
        assert result.is_new_day_for_user is True

    def test_same_day_is_not_new(self):
        """같은 날 재호출 → 변화 없음"""
        existing = StreakState(current_days=4, last_counted_day=date(2025, 1, 15))

        result = compute_next_streak(existing, date(2025, 1, 15))

        assert result.new_days == 4
        assert result.is_new_day_for_user is False

    def test_next_day_increments(self):
        existing = StreakState(current_days=4, last_counted_day=date(2025, 1, 15))

        result = compute_next_streak(existing, date(2025, 1, 16))

        assert result.new_days == 5
        assert result.is_new_day_for_user is True

    def test_next_day_across_month_boundary(self):
        existing = StreakState(current_days=2, last_counted_day=date(2025, 2, 28))

        result = compute_next_streak(existing, date(2025, 3, 1))

        assert result.new_days == 3

    def test_gap_resets_to_one(self):
        """2일 이상 공백 → 1일로 리셋"""
        existing = StreakState(current_days=5, last_counted_day=date(2025, 1, 15))

        result = compute_next_streak(existing, date(2025, 1, 18))

        assert result.new_days == 1
        assert result.is_new_day_for_user is True

    def test_backdated_day_resets_to_one(self):
        """과거 날짜 → 이력 재계산 없이 리셋"""
        existing = StreakState(current_days=10, last_counted_day=date(2025, 1, 15))

        result = compute_next_streak(existing, date(2025, 1, 10))

        assert result.new_days == 1
        assert result.is_new_day_for_user is True


class TestStreakAchievements:
    """스트릭 업적 판정 테스트"""

    @pytest.mark.parametrize(
        "days, expected",
        [
            (1, []),
            (6, []),
            (7, [AchievementCode.STREAK_7]),
            (29, [AchievementCode.STREAK_7]),
            (30, [AchievementCode.STREAK_7, AchievementCode.STREAK_30]),
            (45, [AchievementCode.STREAK_7, AchievementCode.STREAK_30]),
        ],
    )
    def test_qualifying_streak_achievements(self, days, expected):
        assert qualifying_streak_achievements(days) == expected

    def test_every_code_has_definition(self):
        """모든 업적 코드는 정의와 원장 사유를 가짐"""
        for code in AchievementCode:
            definition = get_achievement_definition(code)
            assert definition.code == code
            assert definition.reason == PointsReason(code.value)

        assert set(ACHIEVEMENT_DEFINITIONS) == set(AchievementCode)

    def test_unknown_code_rejected(self):
        with pytest.raises(ValueError):
            get_achievement_definition("streak_100")
