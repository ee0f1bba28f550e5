from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import asc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coachapi.models.checkin import Checkin as CheckinModel
from coachapi.repositories.base import BaseRepository
from coachapi.schemas.checkin import Checkin as CheckinSchema


class CheckinRepository(BaseRepository[CheckinModel, CheckinSchema]):
    def __init__(self, db: Session):
        super().__init__(CheckinModel, CheckinSchema, db)

    def _find(self, user_id: str, day: date) -> Optional[CheckinModel]:
        return (
            self._for_user(user_id)
            .filter(self.model_class.date == day)
            .first()
        )

    def upsert_for_date(
        self,
        user_id: str,
        day: date,
        weight_kg: Optional[Decimal] = None,
        adherence_pct: Optional[int] = None,
        hunger_lvl: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> CheckinSchema:
        """(user_id, date) 기준 체크인 저장 - 있으면 갱신, 없으면 생성"""
        values = {
            "weight_kg": weight_kg,
            "adherence_pct": adherence_pct,
            "hunger_lvl": hunger_lvl,
            "notes": notes,
        }

        instance = self._find(user_id, day)
        if instance is None:
            try:
                with self.db.begin_nested():
                    instance = self.model_class(user_id=user_id, date=day, **values)
                    self.db.add(instance)
            except IntegrityError:
                # 같은 날짜 동시 제출 - 먼저 들어간 행을 갱신
                instance = self._find(user_id, day)
                if instance is None:
                    raise

        for key, value in values.items():
            setattr(instance, key, value)
        self.db.flush()
        self.db.refresh(instance)
        return self._to_schema(instance)

    def get_for_date(self, user_id: str, day: date) -> Optional[CheckinSchema]:
        return self._to_schema(self._find(user_id, day))

    def list_in_range(
        self, user_id: str, date_from: date, date_to: date
    ) -> List[CheckinSchema]:
        """기간 내 체크인 (양 끝 포함, 날짜 오름차순)"""
        rows = (
            self._for_user(user_id)
            .filter(
                self.model_class.date >= date_from,
                self.model_class.date <= date_to,
            )
            .order_by(asc(self.model_class.date))
            .all()
        )
        return self._to_schemas(rows)
