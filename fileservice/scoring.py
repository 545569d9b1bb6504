"""Popularity, trending and recommendation scoring for file records."""

import math
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from common.constants import (
    CONTENT_TYPE_MATCH_BONUS,
    DOWNLOAD_WEIGHT,
    RECENCY_DECAY_PER_DAY,
    RECENCY_MAX_BONUS,
    TAG_MATCH_BONUS,
    TOP_CONTENT_TYPES,
    TOP_TAGS,
    TRENDING_BOOST,
    VIEW_WEIGHT,
)
from fileservice.types import FileRecord

SECONDS_PER_DAY = 86400.0
SECONDS_PER_HOUR = 3600.0


def popularity_score(
    download_count: int,
    view_count: int,
    last_accessed: Optional[datetime],
    created: datetime,
    now: datetime,
) -> float:
    """
    Weighted popularity: log-scaled downloads (40) and views (20) plus a
    recency bonus of up to 40 that decays by 2 per day since the last access.

    Files that were never accessed decay from their creation date.

    Args:
        download_count: Number of downloads (negative values count as 0)
        view_count: Number of views (negative values count as 0)
        last_accessed: Last access time or None
        created: Creation time
        now: Reference time of the computation

    Returns:
        Non-negative popularity score
    """
    downloads = max(0, download_count)
    views = max(0, view_count)

    reference = last_accessed if last_accessed is not None else created
    days_since_access = (now - reference).total_seconds() / SECONDS_PER_DAY

    download_score = math.log10(downloads + 1) * DOWNLOAD_WEIGHT
    view_score = math.log10(views + 1) * VIEW_WEIGHT
    recency_score = max(0.0, RECENCY_MAX_BONUS - days_since_access * RECENCY_DECAY_PER_DAY)

    return download_score + view_score + recency_score


def score_file(record: FileRecord, now: datetime) -> float:
    return popularity_score(
        record.download_count,
        record.view_count,
        record.last_accessed_date,
        record.created_date,
        now,
    )


def is_within_window(record: FileRecord, now: datetime, window_hours: float) -> bool:
    if record.last_accessed_date is None or window_hours <= 0:
        return False
    hours_since_access = (now - record.last_accessed_date).total_seconds() / SECONDS_PER_HOUR
    return hours_since_access <= window_hours


def trending_score(record: FileRecord, now: datetime, window_hours: float) -> float:
    """
    Popularity scaled by how recently the file was accessed inside the window.

    The recency multiplier is clamped to [0, 1]: an access at the window
    boundary scores 0, an access stamped in the future scores as "now".
    """
    if not is_within_window(record, now, window_hours):
        return 0.0

    hours_since_access = (now - record.last_accessed_date).total_seconds() / SECONDS_PER_HOUR
    multiplier = (window_hours - hours_since_access) / window_hours
    multiplier = min(1.0, max(0.0, multiplier))

    return record.popularity_score * multiplier * TRENDING_BOOST


def top_content_types(records: Iterable[FileRecord], limit: int = TOP_CONTENT_TYPES) -> List[str]:
    counts = Counter(record.content_type for record in records if not record.is_archived)
    return [content_type for content_type, _ in counts.most_common(limit)]


def top_tags(records: Iterable[FileRecord], limit: int = TOP_TAGS) -> List[str]:
    counts = Counter(
        tag
        for record in records
        if not record.is_archived
        for tag in record.tags
    )
    return [tag for tag, _ in counts.most_common(limit)]


def recommendation_score(
    record: FileRecord,
    preferred_content_types: Sequence[str],
    preferred_tags: Sequence[str],
) -> float:
    score = record.popularity_score

    if record.content_type in preferred_content_types:
        score += CONTENT_TYPE_MATCH_BONUS

    matching_tags = set(record.tags) & set(preferred_tags)
    score += len(matching_tags) * TAG_MATCH_BONUS

    return score


def file_category(content_type: str) -> str:
    """
    Group a MIME type into a leaderboard category.
    """
    ct = (content_type or "").lower()
    if ct.startswith("image/"):
        return "Images"
    if ct.startswith("video/"):
        return "Videos"
    if ct.startswith("audio/"):
        return "Audio"
    # OOXML types all contain "officedocument"
    if "excel" in ct or "spreadsheet" in ct:
        return "Spreadsheets"
    if "powerpoint" in ct or "presentation" in ct:
        return "Presentations"
    if "pdf" in ct or "word" in ct or "document" in ct:
        return "Documents"
    if ct.startswith("text/"):
        return "Text Files"
    if "zip" in ct or "archive" in ct:
        return "Archives"
    if "json" in ct or "xml" in ct:
        return "Data Files"
    return "Other"
