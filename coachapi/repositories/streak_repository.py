"""
스트릭 리포지토리

사용자별 스트릭 행의 조회/잠금/저장을 담당합니다.
게이미피케이션 오케스트레이터만 쓰기 메서드를 호출합니다.
"""

from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coachapi.core.gamification import StreakState
from coachapi.models.gamification import Streak as StreakModel
from coachapi.repositories.base import BaseRepository
from coachapi.schemas.gamification import StreakSnapshot

import logging

logger = logging.getLogger(__name__)


class StreakRepository(BaseRepository[StreakModel, StreakSnapshot]):
    def __init__(self, db: Session):
        super().__init__(StreakModel, StreakSnapshot, db)

    def get_by_user(self, user_id: str) -> Optional[StreakSnapshot]:
        """사용자 스트릭 조회 (읽기 전용)"""
        return self._to_schema(self._for_user(user_id).first())

    def get_current_days(self, user_id: str) -> int:
        """현재 연속 일수 (행이 없으면 0)"""
        days = (
            self.db.query(self.model_class.current_days)
            .filter(self.model_class.user_id == user_id)
            .scalar()
        )
        return days or 0

    def _select_for_update(self, user_id: str) -> Optional[StreakModel]:
        return (
            self._for_user(user_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def lock_for_user(self, user_id: str) -> StreakModel:
        """
        사용자 스트릭 행을 배타 잠금으로 가져옴 (없으면 빈 행 생성 후 잠금)

        Returns:
            StreakModel: 트랜잭션 종료까지 잠긴 행
                (last_counted_day가 None이면 집계 이력 없음)

        동시성:
        - 같은 사용자의 동시 호출은 이 잠금에서 직렬화됨
        - 첫 체크인 경쟁 시 user_id 유니크 제약으로 한 쪽만 INSERT 성공,
          진 쪽은 SAVEPOINT만 롤백하고 승자의 행을 다시 잠금 조회
        """
        streak = self._select_for_update(user_id)
        if streak is not None:
            return streak

        placeholder = self.model_class(
            user_id=user_id, current_days=0, last_counted_day=None
        )
        try:
            with self.db.begin_nested():
                self.db.add(placeholder)
        except IntegrityError:
            logger.info(
                f"Streak row for user {user_id} created concurrently, re-reading with lock"
            )

        streak = self._select_for_update(user_id)
        if streak is None:
            raise RuntimeError(f"Streak row for user {user_id} could not be locked")
        return streak

    @staticmethod
    def to_state(streak: StreakModel) -> Optional[StreakState]:
        """잠긴 행을 도메인 상태로 변환 (집계 이력 없으면 None)"""
        if streak.last_counted_day is None:
            return None
        return StreakState(
            current_days=streak.current_days,
            last_counted_day=streak.last_counted_day,
        )

    def save(self, streak: StreakModel, current_days: int, counted_day: date) -> None:
        """잠긴 스트릭 행 갱신 (커밋은 호출자 책임)"""
        streak.current_days = current_days
        streak.last_counted_day = counted_day
        self.db.flush()
