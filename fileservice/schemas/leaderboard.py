"""Pydantic schemas for leaderboard endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from fileservice.services.leaderboard_service import CategoryLeaderboard, LeaderboardEntry, LeaderboardStats


class LeaderboardEntryResponse(BaseModel):
    """One ranked file on a leaderboard."""
    rank: int
    file_id: str
    file_name: str
    owner_email: str
    download_count: int
    view_count: int
    popularity_score: float
    content_type: str
    tags: List[str]
    created_date: datetime
    last_accessed_date: Optional[datetime] = None
    trending_score: float = 0.0

    @classmethod
    def from_entry(cls, entry: LeaderboardEntry) -> "LeaderboardEntryResponse":
        record = entry.record
        return cls(
            rank=entry.rank,
            file_id=record.file_id,
            file_name=record.file_name,
            owner_email=record.owner_email,
            download_count=record.download_count,
            view_count=record.view_count,
            popularity_score=record.popularity_score,
            content_type=record.content_type,
            tags=record.tags,
            created_date=record.created_date,
            last_accessed_date=record.last_accessed_date,
            trending_score=entry.trending_score,
        )


class CategoryLeaderboardResponse(BaseModel):
    """Top files of one content category."""
    category: str
    top_files: List[LeaderboardEntryResponse]

    @classmethod
    def from_board(cls, board: CategoryLeaderboard) -> "CategoryLeaderboardResponse":
        return cls(
            category=board.category,
            top_files=[LeaderboardEntryResponse.from_entry(e) for e in board.top_files],
        )


class TagStatsResponse(BaseModel):
    tag: str
    count: int


class LeaderboardStatsResponse(BaseModel):
    """Aggregate statistics over public files."""
    total_public_files: int
    total_downloads: int
    total_views: int
    average_popularity_score: float
    most_popular_category: str
    top_tags: List[TagStatsResponse]
    files_created_today: int
    files_accessed_today: int

    @classmethod
    def from_stats(cls, stats: LeaderboardStats) -> "LeaderboardStatsResponse":
        return cls(
            total_public_files=stats.total_public_files,
            total_downloads=stats.total_downloads,
            total_views=stats.total_views,
            average_popularity_score=stats.average_popularity_score,
            most_popular_category=stats.most_popular_category,
            top_tags=[TagStatsResponse(tag=tag, count=count) for tag, count in stats.top_tags],
            files_created_today=stats.files_created_today,
            files_accessed_today=stats.files_accessed_today,
        )
