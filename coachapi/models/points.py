"""
포인트 원장 데이터 모델

사용자 포인트의 모든 변동 내역을 저장하는 원장(Ledger) 테이블을 정의합니다.
총 포인트는 별도 컬럼에 저장하지 않고 항상 이 테이블의 delta 합계로 계산합니다.
"""

from sqlalchemy import JSON, BigInteger, Column, Index, String
from sqlalchemy.dialects.postgresql import JSONB

from coachapi.models.base import BaseModel, BigIntegerPK


class PointsLedger(BaseModel):
    """
    포인트 원장 테이블 - 모든 포인트 지급 내역을 저장

    이 테이블은 다음 원칙을 따릅니다:
    1. 불변성(Immutable): 한번 생성된 레코드는 수정/삭제되지 않음
    2. 완전성(Complete): 모든 포인트 변동사항이 기록됨
    3. 파생 합계: 총 포인트 = SUM(delta), 캐시 컬럼 없음

    특징:
    - id는 단조 증가하며 커서 페이지네이션 키로 사용
    - reason은 PointsReason 열거형 값만 저장
    """

    __tablename__ = "points_ledger"
    __table_args__ = (
        Index("idx_points_ledger_user_id_id", "user_id", "id"),
    )

    # 기본 키 - 자동 증가하는 고유 식별자
    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)

    # 사용자 ID - 인증 제공자가 발급한 식별자 (sub 클레임)
    user_id = Column(String(64), nullable=False)

    # 포인트 변동량 - 양수면 증가, 음수면 감소
    delta = Column(BigInteger, nullable=False)

    # 지급 사유 - daily_checkin, first_checkin, streak_7, streak_30
    reason = Column(String(50), nullable=False)

    # 감사용 부가 정보 (예: {"date": "2025-01-15"}, {"days": 7})
    meta = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
