"""
타임존 유틸리티

체크인 "하루" 경계를 계산하기 위한 유틸리티 함수들.
서버 로컬 시간대와 무관하게 고정 오프셋(기본 UTC-3, 칠레 본토) 하나만 사용합니다.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

from coachapi.config import settings

# 시스템 전체에서 사용하는 기준 오프셋 (DST 없음)
CANONICAL_TZ = timezone(timedelta(hours=settings.DAY_BOUNDARY_UTC_OFFSET_HOURS))

DayLike = Union[date, datetime, str]


def get_canonical_now() -> datetime:
    """현재 기준 오프셋 시간을 반환합니다."""
    return datetime.now(CANONICAL_TZ)


def get_canonical_today() -> date:
    """현재 기준 오프셋 날짜를 반환합니다."""
    return get_canonical_now().date()


def to_canonical(dt: datetime) -> datetime:
    """UTC 또는 다른 타임존의 datetime을 기준 오프셋으로 변환합니다."""
    if dt.tzinfo is None:
        # naive datetime은 UTC로 가정
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(CANONICAL_TZ)


def to_canonical_day(value: Optional[DayLike]) -> date:
    """
    체크인 시각/날짜를 기준 오프셋의 달력 날짜로 정규화합니다.

    Args:
        value: date(그대로 사용), datetime, 또는 ISO 문자열
            ("YYYY-MM-DD" 또는 타임스탬프)

    Returns:
        date: 정규화된 달력 날짜

    Raises:
        ValueError: 해석할 수 없는 값
    """
    if value is None:
        raise ValueError("date is required")

    # datetime은 date의 하위 클래스이므로 먼저 검사
    if isinstance(value, datetime):
        return to_canonical(value).date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValueError("date is required")
        # 시각 성분이 없는 문자열은 날짜 그대로 (예: 2025-01-15, 20250115)
        if "T" not in raw and " " not in raw:
            return date.fromisoformat(raw)
        return to_canonical(datetime.fromisoformat(raw)).date()

    raise ValueError(f"Unsupported date value: {value!r}")
