"""AI-assisted search with a deterministic substring fallback."""

import asyncio
import json
from typing import Iterable, List, Optional, Sequence

from common.logging_config import get_logger
from fileservice import config
from fileservice.llm_utils import parse_string_array
from fileservice.ranking_client import TextRankingClient
from fileservice.types import FileRecord

logger = get_logger(__name__)


def matches_query(record: FileRecord, query: str) -> bool:
    """
    Case-insensitive substring match over name, description, tags and summary.

    The empty query matches every record.
    """
    needle = (query or "").lower()
    if needle in record.file_name.lower():
        return True
    if record.description and needle in record.description.lower():
        return True
    if any(needle in tag.lower() for tag in record.tags):
        return True
    return bool(record.ai_summary) and needle in record.ai_summary.lower()


def substring_search(
    query: str,
    records: Iterable[FileRecord],
    limit: int,
    exclude_ids: Iterable[str] = (),
) -> List[FileRecord]:
    """
    Fallback ranking: matching records by descending popularity score.

    Ties keep the input order.
    """
    if limit <= 0:
        return []
    excluded = set(exclude_ids)
    matches = [
        record for record in records
        if record.file_id not in excluded and matches_query(record, query)
    ]
    matches.sort(key=lambda record: record.popularity_score, reverse=True)
    return matches[:limit]


def serialize_candidates(records: Sequence[FileRecord], limit: int) -> str:
    return json.dumps([
        {
            "id": record.file_id,
            "fileName": record.file_name,
            "description": record.description,
            "tags": record.tags,
            "contentType": record.content_type,
            "aiSummary": record.ai_summary,
            "aiKeywords": record.ai_keywords,
        }
        for record in records[:limit]
    ])


def build_ranking_prompt(query: str, records: Sequence[FileRecord], max_results: int, candidate_limit: int) -> str:
    return (
        "You are a file search assistant. Given a search query and a list of files, "
        "rank the files by relevance to the query.\n"
        "Consider file names, descriptions, tags, content types, and AI summaries.\n\n"
        f"Search Query: \"{query}\"\n\n"
        "Files to search through:\n"
        f"{serialize_candidates(records, candidate_limit)}\n\n"
        f"Return only the IDs of the most relevant files in order of relevance (max {max_results}), "
        "as a JSON array of strings.\n"
        "If no files are relevant, return an empty array.\n"
    )


def merge_results(
    ranked_ids: Sequence[str],
    pool: Sequence[FileRecord],
    query: str,
    max_results: int,
) -> List[FileRecord]:
    """
    Resolve ranked ids against the pool, then pad with fallback matches.

    Ranked order is kept as returned; unknown and repeated ids are dropped.
    """
    if max_results <= 0:
        return []

    by_id = {record.file_id: record for record in pool}
    selected: List[FileRecord] = []
    seen = set()
    for file_id in ranked_ids:
        record = by_id.get(file_id)
        if record is None or file_id in seen:
            continue
        seen.add(file_id)
        selected.append(record)
        if len(selected) >= max_results:
            return selected

    selected.extend(substring_search(query, pool, max_results - len(selected), exclude_ids=seen))
    return selected[:max_results]


class SearchAggregator:
    def __init__(self, ranking_client: Optional[TextRankingClient] = None, candidate_limit: Optional[int] = None):
        self.ranking_client = ranking_client
        self.candidate_limit = candidate_limit or config.AI_CANDIDATE_LIMIT

    @property
    def ai_enabled(self) -> bool:
        return self.ranking_client is not None and self.ranking_client.configured

    async def rank_with_collaborator(self, query: str, pool: Sequence[FileRecord], max_results: int) -> List[str]:
        """
        Ask the collaborator for ranked ids.

        Returns:
            Ranked ids, or an empty list on any failure (never raises)
        """
        if not self.ai_enabled or not pool or max_results <= 0:
            return []

        prompt = build_ranking_prompt(query, pool, max_results, self.candidate_limit)
        try:
            text = await asyncio.wait_for(
                self.ranking_client.complete(prompt),
                timeout=self.ranking_client.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Ranking collaborator timed out for query: {query!r}")
            return []
        except Exception as e:
            logger.warning(f"Ranking collaborator failed for query {query!r}: {e}")
            return []

        return parse_string_array(text)

    async def search(self, query: str, pool: Sequence[FileRecord], max_results: int) -> List[FileRecord]:
        """
        Rank a candidate pool for a query.

        Args:
            query: Free-text query
            pool: Access-scoped candidate records
            max_results: Upper bound on the result size

        Returns:
            Ordered, duplicate-free list of at most max_results records
        """
        pool = list(pool)
        ranked_ids = await self.rank_with_collaborator(query, pool, max_results)
        results = merge_results(ranked_ids, pool, query, max_results)
        logger.info(
            f"Search completed for query {query!r}: {len(results)} results "
            f"({len(ranked_ids)} ranked ids, pool={len(pool)})"
        )
        return results
