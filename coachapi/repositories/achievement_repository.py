"""
업적 리포지토리

업적 해금은 단방향(취소 불가)이며 멱등입니다.
(user_id, achievement_code) 유니크 제약이 중복 해금을 막는 최종 방어선입니다.
"""

from typing import List

from sqlalchemy import asc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coachapi.core.gamification import AchievementCode
from coachapi.models.gamification import AchievementUnlock as AchievementUnlockModel
from coachapi.repositories.base import BaseRepository
from coachapi.schemas.gamification import AchievementUnlockEntry, UnlockResult

import logging

logger = logging.getLogger(__name__)


class AchievementRepository(
    BaseRepository[AchievementUnlockModel, AchievementUnlockEntry]
):
    def __init__(self, db: Session):
        super().__init__(AchievementUnlockModel, AchievementUnlockEntry, db)

    def has_unlocked(self, user_id: str, code: AchievementCode) -> bool:
        """업적 해금 여부"""
        return (
            self.db.query(self.model_class.id)
            .filter(
                self.model_class.user_id == user_id,
                self.model_class.achievement_code == AchievementCode(code).value,
            )
            .first()
            is not None
        )

    def unlock(self, user_id: str, code: AchievementCode) -> UnlockResult:
        """
        업적 해금 (멱등)

        Returns:
            UnlockResult: already_unlocked=True면 아무것도 쓰지 않음

        - 이미 해금된 경우 INSERT 없이 반환
        - 동시 해금 경쟁으로 유니크 제약 위반 시 SAVEPOINT만 롤백하고
          "이미 해금됨"으로 처리 (에러 아님, 외부 트랜잭션은 계속 사용 가능)
        """
        code = AchievementCode(code)
        if self.has_unlocked(user_id, code):
            return UnlockResult(code=code, already_unlocked=True)

        try:
            with self.db.begin_nested():
                self.db.add(
                    self.model_class(user_id=user_id, achievement_code=code.value)
                )
        except IntegrityError:
            logger.warning(
                f"Achievement {code.value} for user {user_id} unlocked concurrently, treating as already unlocked"
            )
            return UnlockResult(code=code, already_unlocked=True)

        return UnlockResult(code=code, already_unlocked=False)

    def list_unlocked(self, user_id: str) -> List[AchievementUnlockEntry]:
        """해금 기록 (해금 순)"""
        rows = (
            self._for_user(user_id)
            .order_by(asc(self.model_class.unlocked_at), asc(self.model_class.id))
            .all()
        )
        return self._to_schemas(rows)
