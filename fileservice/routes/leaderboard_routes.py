"""Leaderboard API routes. Anonymous, public files only."""

from typing import List

from fastapi import APIRouter, Query

from fileservice.schemas.leaderboard import (
    CategoryLeaderboardResponse,
    LeaderboardEntryResponse,
    LeaderboardStatsResponse
)
from fileservice.services.leaderboard_service import LeaderboardService

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("/popular", response_model=List[LeaderboardEntryResponse])
async def popular(limit: int = Query(10, ge=0)):
    entries = LeaderboardService().popular(limit)
    return [LeaderboardEntryResponse.from_entry(e) for e in entries]


@router.get("/most-downloaded", response_model=List[LeaderboardEntryResponse])
async def most_downloaded(limit: int = Query(10, ge=0)):
    entries = LeaderboardService().most_downloaded(limit)
    return [LeaderboardEntryResponse.from_entry(e) for e in entries]


@router.get("/recent-popular", response_model=List[LeaderboardEntryResponse])
async def recent_popular(days: int = Query(7, ge=0), limit: int = Query(10, ge=0)):
    """
    Public files created or accessed in the last `days` days.
    """
    entries = LeaderboardService().recent_popular(days, limit)
    return [LeaderboardEntryResponse.from_entry(e) for e in entries]


@router.get("/trending", response_model=List[LeaderboardEntryResponse])
async def trending(hours: int = Query(24, ge=0), limit: int = Query(10, ge=0)):
    """
    Public files accessed in the last `hours` hours, ranked by trending score.
    """
    entries = LeaderboardService().trending(hours, limit)
    return [LeaderboardEntryResponse.from_entry(e) for e in entries]


@router.get("/by-category", response_model=List[CategoryLeaderboardResponse])
async def by_category(limit: int = Query(5, ge=0)):
    boards = LeaderboardService().by_category(limit)
    return [CategoryLeaderboardResponse.from_board(b) for b in boards]


@router.get("/stats", response_model=LeaderboardStatsResponse)
async def stats():
    return LeaderboardStatsResponse.from_stats(LeaderboardService().stats())
