"""Leaderboard views over public files."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from common.logging_config import get_logger
from fileservice.repositories.file_repository import FileRepository
from fileservice.scoring import file_category, is_within_window, trending_score
from fileservice.types import FileRecord
from fileservice.utils import utcnow

logger = get_logger(__name__)

TOP_TAG_STATS = 10


@dataclass
class LeaderboardEntry:
    rank: int
    record: FileRecord
    trending_score: float = 0.0


@dataclass
class CategoryLeaderboard:
    category: str
    top_files: List[LeaderboardEntry]


@dataclass
class LeaderboardStats:
    total_public_files: int = 0
    total_downloads: int = 0
    total_views: int = 0
    average_popularity_score: float = 0.0
    most_popular_category: str = "Unknown"
    top_tags: List[Tuple[str, int]] = field(default_factory=list)
    files_created_today: int = 0
    files_accessed_today: int = 0


def rank_entries(records: List[FileRecord], limit: int) -> List[LeaderboardEntry]:
    return [
        LeaderboardEntry(rank=index + 1, record=record)
        for index, record in enumerate(records[:max(0, limit)])
    ]


class LeaderboardService:
    def __init__(self, file_repo=None):
        self.file_repo = file_repo or FileRepository()

    def popular(self, limit: int = 10) -> List[LeaderboardEntry]:
        return rank_entries(self.file_repo.list_popular(max(0, limit)), limit)

    def most_downloaded(self, limit: int = 10) -> List[LeaderboardEntry]:
        files = sorted(
            self.file_repo.list_public(),
            key=lambda record: (record.download_count, record.created_date),
            reverse=True,
        )
        return rank_entries(files, limit)

    def recent_popular(self, days: int = 7, limit: int = 10, now: Optional[datetime] = None) -> List[LeaderboardEntry]:
        """
        Public files created or accessed within the last `days` days, by
        descending popularity score.
        """
        now = now or utcnow()
        cutoff = now - timedelta(days=days)

        def is_recent(record: FileRecord) -> bool:
            if record.created_date >= cutoff:
                return True
            return record.last_accessed_date is not None and record.last_accessed_date >= cutoff

        files = sorted(
            (record for record in self.file_repo.list_public() if is_recent(record)),
            key=lambda record: (record.popularity_score, record.download_count),
            reverse=True,
        )
        return rank_entries(files, limit)

    def trending(self, hours: int = 24, limit: int = 10, now: Optional[datetime] = None) -> List[LeaderboardEntry]:
        """
        Public files accessed within the last `hours` hours, ranked by
        trending score.
        """
        now = now or utcnow()
        scored = [
            (record, trending_score(record, now, hours))
            for record in self.file_repo.list_public()
            if is_within_window(record, now, hours)
        ]
        scored.sort(key=lambda item: item[1], reverse=True)

        logger.info(f"Trending over {hours}h: {len(scored)} files accessed in window")
        return [
            LeaderboardEntry(rank=index + 1, record=record, trending_score=score)
            for index, (record, score) in enumerate(scored[:max(0, limit)])
        ]

    def by_category(self, limit: int = 5) -> List[CategoryLeaderboard]:
        groups: Dict[str, List[FileRecord]] = {}
        for record in self.file_repo.list_public():
            groups.setdefault(file_category(record.content_type), []).append(record)

        boards = []
        for category, records in groups.items():
            records.sort(key=lambda record: record.popularity_score, reverse=True)
            entries = rank_entries(records, limit)
            if entries:
                boards.append(CategoryLeaderboard(category=category, top_files=entries))

        boards.sort(key=lambda board: sum(e.record.popularity_score for e in board.top_files), reverse=True)
        return boards

    def stats(self, now: Optional[datetime] = None) -> LeaderboardStats:
        now = now or utcnow()
        files = self.file_repo.list_public()
        if not files:
            return LeaderboardStats()

        category_scores: Counter = Counter()
        for record in files:
            category_scores[file_category(record.content_type)] += record.popularity_score

        tag_counts = Counter(tag for record in files for tag in record.tags)
        today = now.date()

        return LeaderboardStats(
            total_public_files=len(files),
            total_downloads=sum(record.download_count for record in files),
            total_views=sum(record.view_count for record in files),
            average_popularity_score=sum(record.popularity_score for record in files) / len(files),
            most_popular_category=category_scores.most_common(1)[0][0],
            top_tags=tag_counts.most_common(TOP_TAG_STATS),
            files_created_today=sum(1 for record in files if record.created_date.date() == today),
            files_accessed_today=sum(
                1 for record in files
                if record.last_accessed_date is not None and record.last_accessed_date.date() == today
            ),
        )
