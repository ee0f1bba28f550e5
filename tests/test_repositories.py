import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from coachapi.core.gamification import AchievementCode, PointsReason
from coachapi.models.gamification import AchievementUnlock, Streak
from coachapi.repositories.achievement_repository import AchievementRepository
from coachapi.repositories.checkin_repository import CheckinRepository
from coachapi.repositories.points_repository import PointsRepository
from coachapi.repositories.streak_repository import StreakRepository


USER_ID = "user-123"


class TestPointsRepository:
    """포인트 원장 리포지토리 테스트"""

    def test_append_and_total(self, db):
        # Arrange
        repo = PointsRepository(db)

        # Act
        entry = repo.append(USER_ID, 10, PointsReason.DAILY_CHECKIN, {"date": "2025-01-15"})
        repo.append(USER_ID, 50, PointsReason.FIRST_CHECKIN)
        repo.append("other-user", 70, PointsReason.STREAK_7)

        # Assert
        assert entry.id is not None
        assert entry.reason == PointsReason.DAILY_CHECKIN
        assert repo.total_points(USER_ID) == 60
        assert repo.total_points("nobody") == 0

    def test_total_includes_uncommitted_appends(self, db):
        """같은 트랜잭션 안의 append가 합계에 반영됨"""
        repo = PointsRepository(db)
        repo.append(USER_ID, 10, PointsReason.DAILY_CHECKIN)

        assert db.in_transaction()
        assert repo.total_points(USER_ID) == 10

        db.rollback()
        assert repo.total_points(USER_ID) == 0

    @pytest.mark.parametrize("user_id, reason", [("", PointsReason.DAILY_CHECKIN), (USER_ID, None)])
    def test_append_requires_user_and_reason(self, db, user_id, reason):
        with pytest.raises(ValueError):
            PointsRepository(db).append(user_id, 10, reason)

    def test_list_page_newest_first(self, db):
        repo = PointsRepository(db)
        ids = [repo.append(USER_ID, 10, PointsReason.DAILY_CHECKIN).id for _ in range(5)]
        db.commit()

        first, has_more = repo.list_page(USER_ID, take=3)
        rest, rest_has_more = repo.list_page(USER_ID, take=3, before_id=first[-1].id)

        assert [e.id for e in first] == ids[::-1][:3]
        assert has_more is True
        assert [e.id for e in rest] == ids[::-1][3:]
        assert rest_has_more is False


class TestAchievementRepository:
    """업적 해금 리포지토리 테스트"""

    def test_unlock_is_idempotent(self, db):
        repo = AchievementRepository(db)

        first = repo.unlock(USER_ID, AchievementCode.STREAK_7)
        second = repo.unlock(USER_ID, AchievementCode.STREAK_7)
        db.commit()

        assert first.already_unlocked is False
        assert second.already_unlocked is True
        assert db.query(AchievementUnlock).filter_by(user_id=USER_ID).count() == 1

    def test_unique_conflict_treated_as_already_unlocked(self, db):
        """동시 해금 경쟁 → 유니크 제약 위반을 '이미 해금'으로 처리"""
        # Arrange: 다른 트랜잭션이 먼저 해금한 상황
        repo = AchievementRepository(db)
        db.add(AchievementUnlock(user_id=USER_ID, achievement_code="first_checkin"))
        db.commit()

        # Act: 사전 확인을 통과했다고 가정
        with patch.object(repo, "has_unlocked", return_value=False):
            result = repo.unlock(USER_ID, AchievementCode.FIRST_CHECKIN)

        # Assert: 외부 트랜잭션은 계속 사용 가능
        assert result.already_unlocked is True
        other = repo.unlock(USER_ID, AchievementCode.STREAK_7)
        db.commit()
        assert other.already_unlocked is False
        assert db.query(AchievementUnlock).filter_by(user_id=USER_ID).count() == 2

    def test_list_unlocked(self, db):
        repo = AchievementRepository(db)
        repo.unlock(USER_ID, AchievementCode.FIRST_CHECKIN)
        repo.unlock(USER_ID, AchievementCode.STREAK_7)
        db.commit()

        unlocked = repo.list_unlocked(USER_ID)

        assert [u.achievement_code for u in unlocked] == [
            AchievementCode.FIRST_CHECKIN,
            AchievementCode.STREAK_7,
        ]
        assert repo.has_unlocked(USER_ID, AchievementCode.STREAK_30) is False


class TestStreakRepository:
    """스트릭 리포지토리 테스트"""

    def test_lock_creates_placeholder(self, db):
        repo = StreakRepository(db)

        streak = repo.lock_for_user(USER_ID)

        assert streak.current_days == 0
        assert streak.last_counted_day is None
        assert repo.to_state(streak) is None

    def test_lock_returns_existing_row(self, db):
        db.add(Streak(user_id=USER_ID, current_days=3, last_counted_day=date(2025, 1, 15)))
        db.commit()
        repo = StreakRepository(db)

        state = repo.to_state(repo.lock_for_user(USER_ID))

        assert state.current_days == 3
        assert state.last_counted_day == date(2025, 1, 15)
        assert db.query(Streak).count() == 1

    def test_save_and_read(self, db):
        repo = StreakRepository(db)
        streak = repo.lock_for_user(USER_ID)

        repo.save(streak, 4, date(2025, 1, 18))
        db.commit()

        snapshot = repo.get_by_user(USER_ID)
        assert snapshot.current_days == 4
        assert snapshot.last_counted_day == date(2025, 1, 18)
        assert repo.get_current_days(USER_ID) == 4
        assert repo.get_current_days("nobody") == 0

    def test_lock_recovers_when_row_created_concurrently(self, db):
        """다른 요청이 먼저 행을 만든 경우 SAVEPOINT만 롤백하고 그 행을 잠금"""
        # Given: 첫 잠금 조회 이후 경쟁 요청이 행을 커밋한 상황
        db.add(Streak(user_id=USER_ID, current_days=3, last_counted_day=date(2025, 1, 15)))
        db.commit()
        repo = StreakRepository(db)
        select_for_update = repo._select_for_update
        calls = []

        def first_miss(user_id):
            calls.append(user_id)
            if len(calls) == 1:
                return None
            return select_for_update(user_id)

        # When
        with patch.object(repo, "_select_for_update", side_effect=first_miss) as mocked:
            streak = repo.lock_for_user(USER_ID)

        # Then: 승자의 행을 돌려받고 바깥 트랜잭션은 계속 사용 가능
        assert mocked.call_count == 2
        assert streak.current_days == 3
        assert streak.last_counted_day == date(2025, 1, 15)

        repo.save(streak, 4, date(2025, 1, 16))
        db.commit()

        assert db.query(Streak).count() == 1
        assert repo.get_current_days(USER_ID) == 4


class TestCheckinRepository:
    """체크인 리포지토리 테스트"""

    def test_upsert_updates_same_day(self, db):
        repo = CheckinRepository(db)

        created = repo.upsert_for_date(USER_ID, date(2025, 1, 15), weight_kg=Decimal("80.5"))
        updated = repo.upsert_for_date(
            USER_ID, date(2025, 1, 15), weight_kg=Decimal("80.1"), notes="ok"
        )
        db.commit()

        assert updated.id == created.id
        assert updated.weight_kg == Decimal("80.1")
        assert updated.notes == "ok"

    def test_list_in_range_inclusive(self, db):
        repo = CheckinRepository(db)
        for day in (14, 15, 16, 17):
            repo.upsert_for_date(USER_ID, date(2025, 1, day))
        repo.upsert_for_date("other-user", date(2025, 1, 15))
        db.commit()

        items = repo.list_in_range(USER_ID, date(2025, 1, 15), date(2025, 1, 16))

        assert [c.date for c in items] == [date(2025, 1, 15), date(2025, 1, 16)]
        assert repo.get_for_date(USER_ID, date(2025, 1, 20)) is None
