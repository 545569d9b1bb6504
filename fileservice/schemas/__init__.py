"""Pydantic schemas for API requests and responses."""

from fileservice.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    LoginResponse
)
from fileservice.schemas.files import (
    FileResponse,
    ListFilesResponse,
    SearchRequest,
    SearchResponse,
    ShareRequest,
    UpdateFileRequest,
    FileUrlResponse
)
from fileservice.schemas.leaderboard import (
    LeaderboardEntryResponse,
    CategoryLeaderboardResponse,
    LeaderboardStatsResponse
)
from fileservice.schemas.search import (
    SearchSuggestionsResponse,
    FileAnalysisResponse,
    TrendingSearchResponse
)
from fileservice.schemas.common import ErrorResponse

__all__ = [
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "LoginResponse",
    "FileResponse",
    "ListFilesResponse",
    "SearchRequest",
    "SearchResponse",
    "ShareRequest",
    "UpdateFileRequest",
    "FileUrlResponse",
    "LeaderboardEntryResponse",
    "CategoryLeaderboardResponse",
    "LeaderboardStatsResponse",
    "SearchSuggestionsResponse",
    "FileAnalysisResponse",
    "TrendingSearchResponse",
    "ErrorResponse"
]
