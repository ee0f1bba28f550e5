import pytest
from datetime import datetime, timezone
from unittest.mock import Mock

from fastapi.testclient import TestClient

from coachapi.core.exceptions import StorageUnavailableError, ValidationError
from coachapi.core.gamification import AchievementCode, PointsReason
from coachapi.core.security import create_access_token
from coachapi.main import create_app
from coachapi.schemas.gamification import (
    AchievementsResponse,
    AchievementStatus,
    GamificationSummary,
)
from coachapi.schemas.points import PointsHistoryItem, PointsHistoryResponse
from coachapi.services.gamification_service import GamificationService


TEST_USER_ID = "user-123"


@pytest.fixture
def mock_service(app):
    service = Mock(spec=GamificationService)
    with app.container.services.gamification_service.override(service):
        yield service


class TestGamificationRoutes:
    """게이미피케이션 라우터 테스트"""

    def test_get_my_gamification(self, client, mock_service):
        """내 게이미피케이션 요약 조회 테스트"""
        # Given
        mock_service.get_summary.return_value = GamificationSummary(
            streak_days=7,
            total_points=190,
            achievements=[AchievementCode.FIRST_CHECKIN, AchievementCode.STREAK_7],
        )

        # When
        response = client.get("/api/v1/me/gamification")

        # Then
        assert response.status_code == 200
        assert response.json() == {
            "streak_days": 7,
            "total_points": 190,
            "achievements": ["first_checkin", "streak_7"],
        }
        mock_service.get_summary.assert_called_once_with(TEST_USER_ID)

    def test_list_my_points(self, client, mock_service):
        """내 포인트 내역 조회 테스트"""
        # Given
        mock_service.list_points.return_value = PointsHistoryResponse(
            items=[
                PointsHistoryItem(
                    id="12",
                    delta=10,
                    reason=PointsReason.DAILY_CHECKIN,
                    meta={"date": "2025-01-15"},
                    created_at=datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
                )
            ],
            next_cursor="12",
        )

        # When
        response = client.get("/api/v1/me/points?take=1&cursor=20")

        # Then
        assert response.status_code == 200
        data = response.json()
        assert data["next_cursor"] == "12"
        assert data["items"][0]["reason"] == "daily_checkin"

        user_id, params = mock_service.list_points.call_args.args
        assert user_id == TEST_USER_ID
        assert params.take == 1
        assert params.cursor == "20"

    @pytest.mark.parametrize("take", [0, 101])
    def test_list_my_points_take_out_of_range(self, client, mock_service, take):
        response = client.get(f"/api/v1/me/points?take={take}")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_001"
        mock_service.list_points.assert_not_called()

    def test_list_my_points_invalid_cursor(self, client, mock_service):
        mock_service.list_points.side_effect = ValidationError(
            "Invalid cursor", details={"cursor": "abc"}
        )

        response = client.get("/api/v1/me/points?cursor=abc")

        assert response.status_code == 422
        assert response.json()["error"]["message"] == "Invalid cursor"

    def test_list_my_achievements(self, client, mock_service):
        mock_service.list_achievements.return_value = AchievementsResponse(
            achievements=[
                AchievementStatus(
                    code=AchievementCode.FIRST_CHECKIN,
                    title="First check-in",
                    description="Logged your very first daily check-in",
                    points=50,
                    unlocked=True,
                )
            ],
            unlocked_count=1,
        )

        response = client.get("/api/v1/me/achievements")

        assert response.status_code == 200
        assert response.json()["unlocked_count"] == 1

    def test_storage_unavailable_returns_503(self, client, mock_service):
        mock_service.get_summary.side_effect = StorageUnavailableError()

        response = client.get("/api/v1/me/gamification")

        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "STORAGE_001"
        assert error["details"]["retryable"] is True

    def test_unexpected_error_returns_500(self, client, mock_service):
        mock_service.get_summary.side_effect = RuntimeError("boom")

        response = client.get("/api/v1/me/gamification")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_001"


class TestGamificationAuth:
    """인증 테스트"""

    def test_requires_token(self, anonymous_client):
        response = anonymous_client.get("/api/v1/me/gamification")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_001"

    def test_rejects_invalid_token(self, anonymous_client):
        response = anonymous_client.get(
            "/api/v1/me/points", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    def test_user_id_from_token_subject(self):
        """토큰의 sub 클레임이 사용자 ID로 전달됨"""
        # Given
        app = create_app()
        service = Mock(spec=GamificationService)
        service.get_summary.return_value = GamificationSummary(
            streak_days=0, total_points=0
        )
        token = create_access_token("user-from-token")

        # When
        with app.container.services.gamification_service.override(service):
            response = TestClient(app).get(
                "/api/v1/me/gamification",
                headers={"Authorization": f"Bearer {token}"},
            )

        # Then
        assert response.status_code == 200
        service.get_summary.assert_called_once_with("user-from-token")
