from datetime import date
from typing import Optional

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from coachapi.config import Settings
from coachapi.core.exceptions import StorageUnavailableError, ValidationError
from coachapi.repositories.checkin_repository import CheckinRepository
from coachapi.schemas.checkin import (
    CheckinListResponse,
    CheckinUpsertRequest,
    CheckinUpsertResponse,
    TodayCheckinResponse,
)
from coachapi.services.gamification_service import (
    GamificationService,
    require_user_id,
)
from coachapi.utils.timezone_utils import get_canonical_today
import logging

logger = logging.getLogger(__name__)


class CheckinService:
    """일일 체크인 저장/조회 서비스"""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        gamification_service: Optional[GamificationService] = None,
    ):
        self.db = db
        self.settings = settings
        self.checkin_repo = CheckinRepository(db)
        self.gamification_service = gamification_service or GamificationService(
            db=db, settings=settings
        )

    def upsert_checkin(
        self, user_id: str, request: CheckinUpsertRequest
    ) -> CheckinUpsertResponse:
        """체크인 저장 후 게이미피케이션 처리

        Args:
            user_id: 사용자 ID
            request: 체크인 내용 (date 생략 시 오늘)

        Returns:
            CheckinUpsertResponse: 저장된 체크인 ID/날짜와 게이미피케이션 결과

        체크인 행은 먼저 커밋되어 보존됩니다. 이후 게이미피케이션 처리가
        실패하면 예외가 그대로 전달되며, 같은 요청을 다시 보내도 안전합니다.
        """
        require_user_id(user_id)

        day = request.date or get_canonical_today()

        self.checkin_repo.ensure_clean_session()
        try:
            saved = self.checkin_repo.upsert_for_date(
                user_id=user_id,
                day=day,
                weight_kg=request.weight_kg,
                adherence_pct=request.adherence_pct,
                hunger_lvl=request.hunger_lvl,
                notes=request.notes,
            )
            self.db.commit()
        except OperationalError as e:
            self.db.rollback()
            logger.error(f"Failed to save check-in for user {user_id} on {day}: {str(e)}")
            raise StorageUnavailableError("Check-in could not be saved, retry the request")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save check-in for user {user_id} on {day}: {str(e)}")
            raise

        logger.info(f"Saved check-in {saved.id} for user {user_id} on {day}")

        effects = self.gamification_service.on_daily_checkin(user_id, saved.date)
        return CheckinUpsertResponse(
            ok=True, id=saved.id, date=saved.date, gamification=effects
        )

    def get_today_checkin(self, user_id: str) -> TodayCheckinResponse:
        """오늘(기준 오프셋) 체크인 조회"""
        today = get_canonical_today()

        self.checkin_repo.ensure_clean_session()
        try:
            checkin = self.checkin_repo.get_for_date(user_id, today)
        except OperationalError as e:
            logger.error(f"Failed to read today check-in for user {user_id}: {str(e)}")
            raise StorageUnavailableError("Check-in could not be read, retry the request")
        finally:
            self.db.rollback()

        return TodayCheckinResponse(
            checkin=checkin, has_checkin=checkin is not None, date=today
        )

    def list_checkins(
        self, user_id: str, date_from: date, date_to: date
    ) -> CheckinListResponse:
        """기간 내 체크인 목록 (양 끝 포함)"""
        if date_from > date_to:
            raise ValidationError(
                "'from' must not be after 'to'",
                details={"from": date_from.isoformat(), "to": date_to.isoformat()},
            )

        self.checkin_repo.ensure_clean_session()
        try:
            items = self.checkin_repo.list_in_range(user_id, date_from, date_to)
        except OperationalError as e:
            logger.error(f"Failed to list check-ins for user {user_id}: {str(e)}")
            raise StorageUnavailableError("Check-ins could not be read, retry the request")
        finally:
            self.db.rollback()

        logger.info(
            f"Retrieved {len(items)} check-ins for user {user_id} ({date_from} ~ {date_to})"
        )
        return CheckinListResponse(items=items)
