"""
체크인 API 라우터

- POST /checkins: 오늘(또는 지정 날짜) 체크인 저장 + 게이미피케이션 처리
- GET /checkins/today: 오늘 체크인 조회
- GET /checkins?from=YYYY-MM-DD&to=YYYY-MM-DD: 기간 내 체크인 목록
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from dependency_injector.wiring import inject, Provide

from coachapi.core.auth_middleware import get_current_user
from coachapi.schemas.user import CurrentUser
from coachapi.services.checkin_service import CheckinService
from coachapi.containers import Container
from coachapi.schemas.checkin import (
    CheckinListResponse,
    CheckinUpsertRequest,
    CheckinUpsertResponse,
    TodayCheckinResponse,
)

router = APIRouter(prefix="/checkins", tags=["checkins"])


@router.post("", response_model=CheckinUpsertResponse)
@inject
async def upsert_checkin(
    request: CheckinUpsertRequest,
    current_user: CurrentUser = Depends(get_current_user),
    checkin_service: CheckinService = Depends(
        Provide[Container.services.checkin_service]
    ),
) -> CheckinUpsertResponse:
    """
    체크인 저장 - 같은 날짜면 내용을 갱신합니다.

    HTTP Status:
        200: 저장 및 게이미피케이션 처리 완료
        401: 인증 실패
        422: 입력값 오류
        503: 저장소 일시 장애 (같은 요청으로 재시도 가능)
    """
    return checkin_service.upsert_checkin(current_user.id, request)


@router.get("/today", response_model=TodayCheckinResponse)
@inject
async def get_today_checkin(
    current_user: CurrentUser = Depends(get_current_user),
    checkin_service: CheckinService = Depends(
        Provide[Container.services.checkin_service]
    ),
) -> TodayCheckinResponse:
    """오늘 체크인 조회"""
    return checkin_service.get_today_checkin(current_user.id)


@router.get("", response_model=CheckinListResponse)
@inject
async def list_checkins(
    date_from: date = Query(..., alias="from", description="시작 날짜 (YYYY-MM-DD)"),
    date_to: date = Query(..., alias="to", description="종료 날짜 (YYYY-MM-DD, 포함)"),
    current_user: CurrentUser = Depends(get_current_user),
    checkin_service: CheckinService = Depends(
        Provide[Container.services.checkin_service]
    ),
) -> CheckinListResponse:
    """기간 내 체크인 목록"""
    return checkin_service.list_checkins(current_user.id, date_from, date_to)
