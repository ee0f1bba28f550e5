# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .achievement_repository import AchievementRepository
from .checkin_repository import CheckinRepository
from .points_repository import PointsRepository
from .streak_repository import StreakRepository

__all__ = [
    "BaseRepository",
    "AchievementRepository",
    "CheckinRepository",
    "PointsRepository",
    "StreakRepository",
]
