from datetime import date
from typing import List, Optional

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from coachapi.config import Settings
from coachapi.core.exceptions import StorageUnavailableError, ValidationError
from coachapi.core.gamification import (
    ACHIEVEMENT_DEFINITIONS,
    AchievementCode,
    PointsReason,
    compute_next_streak,
    get_achievement_definition,
    qualifying_streak_achievements,
)
from coachapi.repositories.achievement_repository import AchievementRepository
from coachapi.repositories.points_repository import PointsRepository
from coachapi.repositories.streak_repository import StreakRepository
from coachapi.schemas.gamification import (
    AchievementsResponse,
    AchievementStatus,
    CheckinEffects,
    GamificationSummary,
)
from coachapi.schemas.pagination import CursorParams
from coachapi.schemas.points import PointsHistoryItem, PointsHistoryResponse
from coachapi.utils.timezone_utils import DayLike, to_canonical_day
import logging

logger = logging.getLogger(__name__)


def require_user_id(user_id: Optional[str]) -> str:
    """사용자 ID 검증 (공백 제거 없이 그대로 사용, 앞뒤 공백은 거부)"""
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError("user_id is required")
    if user_id != user_id.strip():
        raise ValidationError(
            "user_id must not have surrounding whitespace",
            details={"user_id": user_id},
        )
    return user_id


class GamificationService:
    """스트릭/포인트/업적 처리와 조회를 담당하는 서비스

    스트릭, 포인트 원장, 업적 해금의 유일한 쓰기 경로입니다.
    """

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.streak_repo = StreakRepository(db)
        self.points_repo = PointsRepository(db)
        self.achievement_repo = AchievementRepository(db)

    def _points_for(self, code: AchievementCode) -> int:
        """업적별 해금 보너스 포인트"""
        points = {
            AchievementCode.FIRST_CHECKIN: self.settings.FIRST_CHECKIN_POINTS,
            AchievementCode.STREAK_7: self.settings.STREAK_7_POINTS,
            AchievementCode.STREAK_30: self.settings.STREAK_30_POINTS,
        }
        try:
            return points[AchievementCode(code)]
        except KeyError:
            raise LookupError(f"No points configured for achievement code: {code}")

    @staticmethod
    def _validate_event(user_id: Optional[str], day: Optional[DayLike]) -> date:
        require_user_id(user_id)
        try:
            return to_canonical_day(day)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"Invalid check-in date: {str(e)}", details={"date": str(day)}
            )

    def on_daily_checkin(self, user_id: str, day: DayLike) -> CheckinEffects:
        """체크인 확정 처리 - 스트릭 갱신, 포인트 적립, 업적 해금

        Args:
            user_id: 사용자 ID
            day: 체크인 날짜 (date, datetime 또는 ISO 문자열)

        Returns:
            CheckinEffects: 연속 일수, 추가 포인트, 새로 해금된 업적, 총 포인트

        Raises:
            ValidationError: user_id 누락, 날짜 형식 오류 (트랜잭션 시작 전)
            StorageUnavailableError: 잠금 대기 초과/연결 끊김 (롤백됨, 재시도 가능)

        단일 트랜잭션으로 처리하며 실패 시 모든 쓰기를 롤백합니다.
        같은 (user_id, day)로 재호출하면 아무것도 추가하지 않습니다.
        """
        counted_day = self._validate_event(user_id, day)

        self.streak_repo.ensure_clean_session()
        try:
            effects = self._apply_checkin(user_id, counted_day)
            self.db.commit()
        except OperationalError as e:
            self.db.rollback()
            logger.error(
                f"Gamification transaction for user {user_id} on {counted_day} rolled back (storage): {str(e)}"
            )
            raise StorageUnavailableError(
                "Gamification update could not be applied, retry the request",
                details={"user_id": user_id, "date": counted_day.isoformat()},
            )
        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Gamification transaction for user {user_id} on {counted_day} rolled back: {str(e)}"
            )
            raise

        if effects.points_added or effects.unlocked:
            logger.info(
                f"Check-in applied for user {user_id} on {counted_day}: "
                f"streak={effects.streak_days}, +{effects.points_added} points, unlocked={[c.value for c in effects.unlocked]}"
            )
        else:
            logger.info(
                f"Check-in for user {user_id} on {counted_day} already counted (streak={effects.streak_days})"
            )
        return effects

    def _apply_checkin(self, user_id: str, counted_day: date) -> CheckinEffects:
        streak = self.streak_repo.lock_for_user(user_id)
        existing = self.streak_repo.to_state(streak)

        if (
            self.settings.REJECT_BACKDATED_CHECKINS
            and existing is not None
            and counted_day < existing.last_counted_day
        ):
            raise ValidationError(
                "Check-in date is before the last counted day",
                details={
                    "date": counted_day.isoformat(),
                    "last_counted_day": existing.last_counted_day.isoformat(),
                },
            )

        transition = compute_next_streak(existing, counted_day)

        # 같은 날 재호출이어도 저장 (재시도 시 동일 상태로 수렴)
        self.streak_repo.save(streak, transition.new_days, counted_day)

        points_added = 0
        unlocked: List[AchievementCode] = []

        if transition.is_new_day_for_user:
            # 1) 첫 체크인: 해금이 실제로 기록된 경우에만 보너스
            if existing is None:
                result = self.achievement_repo.unlock(
                    user_id, AchievementCode.FIRST_CHECKIN
                )
                if not result.already_unlocked:
                    points_added += self._award(
                        user_id,
                        AchievementCode.FIRST_CHECKIN,
                        meta={"date": counted_day.isoformat()},
                    )
                    unlocked.append(AchievementCode.FIRST_CHECKIN)

            # 2) 일일 체크인
            self.points_repo.append(
                user_id,
                self.settings.DAILY_CHECKIN_POINTS,
                PointsReason.DAILY_CHECKIN,
                meta={"date": counted_day.isoformat()},
            )
            points_added += self.settings.DAILY_CHECKIN_POINTS

            # 3) 스트릭 업적 (streak_7 → streak_30)
            for code in qualifying_streak_achievements(transition.new_days):
                result = self.achievement_repo.unlock(user_id, code)
                if result.already_unlocked:
                    continue
                points_added += self._award(
                    user_id, code, meta={"days": transition.new_days}
                )
                unlocked.append(code)

        return CheckinEffects(
            streak_days=transition.new_days,
            points_added=points_added,
            unlocked=unlocked,
            total_points=self.points_repo.total_points(user_id),
        )

    def _award(self, user_id: str, code: AchievementCode, meta: dict) -> int:
        """업적 보너스 원장 기록 후 지급 포인트 반환"""
        definition = get_achievement_definition(code)
        points = self._points_for(code)
        self.points_repo.append(user_id, points, definition.reason, meta=meta)
        return points

    @staticmethod
    def _read_unavailable(
        what: str, user_id: str, error: OperationalError
    ) -> StorageUnavailableError:
        logger.error(f"Failed to read {what} for user {user_id} (storage): {str(error)}")
        return StorageUnavailableError(
            f"Could not read {what}, retry the request",
            details={"user_id": user_id},
        )

    def get_summary(self, user_id: str) -> GamificationSummary:
        """내 게이미피케이션 요약 (읽기 전용)

        Args:
            user_id: 사용자 ID

        Returns:
            GamificationSummary: 연속 일수, 총 포인트, 해금된 업적

        Raises:
            StorageUnavailableError: 저장소 일시 장애 (재시도 가능)
        """
        self.streak_repo.ensure_clean_session()
        try:
            # 한 트랜잭션 안에서 세 값을 읽어 일관된 스냅샷 제공
            summary = GamificationSummary(
                streak_days=self.streak_repo.get_current_days(user_id),
                total_points=self.points_repo.total_points(user_id),
                achievements=[
                    unlock.achievement_code
                    for unlock in self.achievement_repo.list_unlocked(user_id)
                ],
            )
        except OperationalError as e:
            raise self._read_unavailable("gamification summary", user_id, e)
        finally:
            self.db.rollback()

        logger.info(
            f"Retrieved gamification summary for user {user_id}: "
            f"streak={summary.streak_days}, points={summary.total_points}"
        )
        return summary

    def list_points(
        self, user_id: str, params: Optional[CursorParams] = None
    ) -> PointsHistoryResponse:
        """내 포인트 내역 조회 (최신순, 커서 페이지네이션)

        Args:
            user_id: 사용자 ID
            params: take(1-100, 기본 20), cursor(이전 응답의 next_cursor)

        Returns:
            PointsHistoryResponse: 항목 목록과 다음 커서

        Raises:
            ValidationError: 잘못된 커서
            StorageUnavailableError: 저장소 일시 장애 (재시도 가능)
        """
        params = params or CursorParams()
        before_id = self._parse_cursor(params.cursor)

        self.points_repo.ensure_clean_session()
        try:
            entries, has_more = self.points_repo.list_page(
                user_id=user_id, take=params.take, before_id=before_id
            )
        except OperationalError as e:
            raise self._read_unavailable("points history", user_id, e)
        finally:
            self.db.rollback()

        items = [
            PointsHistoryItem(
                id=str(entry.id),
                delta=entry.delta,
                reason=entry.reason,
                meta=entry.meta,
                created_at=entry.created_at,
            )
            for entry in entries
        ]
        next_cursor = items[-1].id if has_more and items else None

        logger.info(
            f"Retrieved {len(items)} points entries for user {user_id} (cursor={params.cursor})"
        )
        return PointsHistoryResponse(items=items, next_cursor=next_cursor)

    @staticmethod
    def _parse_cursor(cursor: Optional[str]) -> Optional[int]:
        if cursor is None or cursor == "":
            return None
        try:
            value = int(cursor)
        except (TypeError, ValueError):
            raise ValidationError("Invalid cursor", details={"cursor": cursor})
        if value <= 0:
            raise ValidationError("Invalid cursor", details={"cursor": cursor})
        return value

    def list_achievements(self, user_id: str) -> AchievementsResponse:
        """업적 카탈로그 + 내 해금 상태"""
        self.achievement_repo.ensure_clean_session()
        try:
            unlocks = {
                unlock.achievement_code: unlock
                for unlock in self.achievement_repo.list_unlocked(user_id)
            }
        except OperationalError as e:
            raise self._read_unavailable("achievements", user_id, e)
        finally:
            self.db.rollback()

        achievements = []
        for code, definition in ACHIEVEMENT_DEFINITIONS.items():
            unlock = unlocks.get(code)
            achievements.append(
                AchievementStatus(
                    code=code,
                    title=definition.title,
                    description=definition.description,
                    required_streak_days=definition.required_streak_days,
                    points=self._points_for(code),
                    unlocked=unlock is not None,
                    unlocked_at=unlock.unlocked_at if unlock else None,
                )
            )

        return AchievementsResponse(
            achievements=achievements, unlocked_count=len(unlocks)
        )
