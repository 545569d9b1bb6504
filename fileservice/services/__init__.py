"""Service layer for business logic."""

from fileservice.services.auth_service import AuthService
from fileservice.services.file_service import FileService
from fileservice.services.leaderboard_service import LeaderboardService
from fileservice.services.search_insights_service import SearchInsightsService
from fileservice.services.search_service import SearchAggregator

__all__ = [
    "AuthService",
    "FileService",
    "LeaderboardService",
    "SearchInsightsService",
    "SearchAggregator",
]
