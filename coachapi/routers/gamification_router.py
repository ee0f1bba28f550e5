"""
게이미피케이션 API 라우터

사용자용 엔드포인트:
- GET /me/gamification: 내 연속 일수, 총 포인트, 해금된 업적
- GET /me/points: 내 포인트 내역 (최신순, 커서 페이지네이션)
- GET /me/achievements: 업적 카탈로그와 내 해금 상태

인증 및 권한:
- 모든 엔드포인트는 Bearer 토큰 인증 필요
- 사용자 ID는 토큰의 sub 클레임에서 결정 (요청 파라미터로 받지 않음)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from dependency_injector.wiring import inject, Provide

from coachapi.core.auth_middleware import get_current_user
from coachapi.schemas.user import CurrentUser
from coachapi.services.gamification_service import GamificationService
from coachapi.containers import Container
from coachapi.schemas.gamification import AchievementsResponse, GamificationSummary
from coachapi.schemas.pagination import CursorParams, PaginationLimits
from coachapi.schemas.points import PointsHistoryResponse


router = APIRouter(prefix="/me", tags=["gamification"])


@router.get("/gamification", response_model=GamificationSummary)
@inject
async def get_my_gamification(
    current_user: CurrentUser = Depends(get_current_user),
    gamification_service: GamificationService = Depends(
        Provide[Container.services.gamification_service]
    ),
) -> GamificationSummary:
    """
    내 게이미피케이션 요약

    Returns:
        GamificationSummary: streak_days, total_points, achievements

    HTTP Status:
        200: 성공
        401: 인증 실패
        503: 저장소 일시 장애
    """
    return gamification_service.get_summary(current_user.id)


@router.get("/points", response_model=PointsHistoryResponse)
@inject
async def list_my_points(
    take: int = Query(
        PaginationLimits.POINTS_HISTORY["default"],
        ge=PaginationLimits.POINTS_HISTORY["min"],
        le=PaginationLimits.POINTS_HISTORY["max"],
        description="페이지 크기",
    ),
    cursor: Optional[str] = Query(None, description="이전 응답의 next_cursor"),
    current_user: CurrentUser = Depends(get_current_user),
    gamification_service: GamificationService = Depends(
        Provide[Container.services.gamification_service]
    ),
) -> PointsHistoryResponse:
    """
    내 포인트 내역 조회 - 최신순 커서 페이지네이션

    Query Parameters:
        take: 한 페이지 항목 수 (1-100, 기본: 20)
        cursor: 이전 페이지 응답의 next_cursor

    사용 예시:
        GET /me/points?take=20
        GET /me/points?take=20&cursor=1234
    """
    return gamification_service.list_points(
        current_user.id, CursorParams(take=take, cursor=cursor)
    )


@router.get("/achievements", response_model=AchievementsResponse)
@inject
async def list_my_achievements(
    current_user: CurrentUser = Depends(get_current_user),
    gamification_service: GamificationService = Depends(
        Provide[Container.services.gamification_service]
    ),
) -> AchievementsResponse:
    """업적 카탈로그와 내 해금 상태"""
    return gamification_service.list_achievements(current_user.id)
