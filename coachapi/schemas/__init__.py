from .checkin import CheckinUpsertRequest, CheckinUpsertResponse
from .gamification import CheckinEffects, GamificationSummary
from .points import PointsHistoryResponse
from .user import CurrentUser
