"""
포인트 리포지토리 - 포인트 원장 데이터베이스 접근

이 파일은 포인트 원장의 데이터 접근을 담당합니다:
1. 원장 항목 추가 (append-only)
2. 총 포인트 계산 (delta 합계)
3. 최신순 커서 페이지네이션 조회

핵심 특징:
- 원장 항목은 생성 후 수정/삭제되지 않습니다
- 총 포인트는 저장하지 않고 항상 원장에서 계산합니다 (drift 방지)
- 커밋하지 않습니다. 호출한 서비스의 트랜잭션 안에서 flush만 합니다
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from coachapi.core.gamification import PointsReason
from coachapi.models.points import PointsLedger as PointsLedgerModel
from coachapi.schemas.points import PointsLedgerEntry
from coachapi.repositories.base import BaseRepository


class PointsRepository(BaseRepository[PointsLedgerModel, PointsLedgerEntry]):
    """
    포인트 리포지토리 - 포인트 원장 관련 데이터베이스 작업 처리

    주요 기능:
    1. 불변 기록 - INSERT만 수행
    2. 원자성 - 호출자 트랜잭션에 참여 (같은 트랜잭션에서 합계 조회 가능)
    3. 안정적인 페이지네이션 - id 내림차순 + id 커서
    """

    def __init__(self, db: Session):
        super().__init__(PointsLedgerModel, PointsLedgerEntry, db)

    def append(
        self,
        user_id: str,
        delta: int,
        reason: PointsReason,
        meta: Optional[Dict[str, Any]] = None,
    ) -> PointsLedgerEntry:
        """
        원장 항목 추가

        Args:
            user_id: 사용자 ID
            delta: 포인트 변화량 (부호 있음)
            reason: 지급 사유
            meta: 감사용 부가 정보

        Returns:
            PointsLedgerEntry: 생성된 원장 항목

        Raises:
            ValueError: user_id 또는 reason 누락
        """
        if not user_id:
            raise ValueError("user_id is required for a ledger entry")
        if reason is None:
            raise ValueError("reason is required for a ledger entry")

        entry = self.model_class(
            user_id=user_id,
            delta=delta,
            reason=PointsReason(reason).value,
            meta=meta,
        )
        self.db.add(entry)
        self.db.flush()
        self.db.refresh(entry)
        return self._to_schema(entry)

    def total_points(self, user_id: str) -> int:
        """
        사용자의 총 포인트 (원장 delta 합계)

        같은 세션/트랜잭션에서 호출하면 아직 커밋되지 않은 append도 포함됩니다.
        """
        result = (
            self.db.query(func.coalesce(func.sum(self.model_class.delta), 0))
            .filter(self.model_class.user_id == user_id)
            .scalar()
        )
        return int(result or 0)

    def list_page(
        self, user_id: str, take: int, before_id: Optional[int] = None
    ) -> Tuple[List[PointsLedgerEntry], bool]:
        """
        최신순 원장 페이지 조회

        Args:
            user_id: 사용자 ID
            take: 페이지 크기
            before_id: 커서 (이 id보다 작은 항목만 조회)

        Returns:
            (항목 목록, 다음 페이지 존재 여부)

        id는 단조 증가하므로 이미 전달한 커서 "앞"에 새 항목이 끼어들지 않습니다.
        """
        query = self._for_user(user_id)
        if before_id is not None:
            query = query.filter(self.model_class.id < before_id)

        rows = query.order_by(desc(self.model_class.id)).limit(take + 1).all()
        has_more = len(rows) > take
        return self._to_schemas(rows[:take]), has_more

    def list_by_reason(self, user_id: str, reason: PointsReason) -> List[PointsLedgerEntry]:
        """사유별 원장 항목 (오래된 순)"""
        return self.find_all(
            filters={"user_id": user_id, "reason": PointsReason(reason).value},
            order_by="id",
        )
