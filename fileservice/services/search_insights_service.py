"""Search suggestions, upload analysis and trending search terms."""

from collections import Counter
from dataclasses import dataclass, field
from typing import BinaryIO, List

from common.logging_config import get_logger
from fileservice.exceptions import InvalidUploadError
from fileservice.repositories.file_repository import FileRepository
from fileservice.scoring import file_category
from fileservice.service_locator import get_ranking_client
from fileservice.services.ai_metadata_service import AiMetadataService
from fileservice.types import Caller

logger = get_logger(__name__)

TRENDING_POOL_SIZE = 50
SUGGESTED_TAG_COUNT = 5

SEARCH_CATEGORIES = {
    "documents": "File Types",
    "images": "File Types",
    "videos": "File Types",
    "audio": "File Types",
    "spreadsheets": "File Types",
    "presentations": "File Types",
    "text files": "File Types",
    "archives": "File Types",
    "data files": "File Types",
    "pdf": "File Types",
    "excel": "File Types",
    "contract": "Business",
    "report": "Business",
    "invoice": "Business",
    "template": "Templates",
    "backup": "System",
}


@dataclass
class FileAnalysis:
    file_name: str
    content_type: str
    file_size: int
    ai_summary: str
    suggested_keywords: List[str] = field(default_factory=list)
    suggested_tags: List[str] = field(default_factory=list)


@dataclass
class TrendingSearch:
    term: str
    count: int
    category: str


def search_category(term: str) -> str:
    return SEARCH_CATEGORIES.get(term.lower(), "General")


class SearchInsightsService:
    def __init__(self, file_repo=None, ranking_client=None):
        self.file_repo = file_repo or FileRepository()
        self.ai_metadata = AiMetadataService(ranking_client or get_ranking_client())

    async def suggestions(self, query: str) -> List[str]:
        return await self.ai_metadata.generate_suggestions(query)

    async def analyze_file(
        self,
        caller: Caller,
        file_name: str,
        content_type: str,
        file_data: BinaryIO,
    ) -> FileAnalysis:
        """
        Summarize an uploaded file and propose keywords and tags for it.
        Nothing is stored.

        Raises:
            InvalidUploadError: If no name or no content was sent
        """
        content = file_data.read()
        if not file_name or not content:
            raise InvalidUploadError("No file provided")

        content_type = content_type or "application/octet-stream"
        summary = await self.ai_metadata.generate_summary(file_name, content_type)
        keywords = await self.ai_metadata.extract_keywords(file_name, summary, content_type)

        logger.info(f"File analyzed: {file_name} for user {caller.user_id}")
        return FileAnalysis(
            file_name=file_name,
            content_type=content_type,
            file_size=len(content),
            ai_summary=summary,
            suggested_keywords=keywords,
            suggested_tags=keywords[:SUGGESTED_TAG_COUNT],
        )

    def trending_searches(self, limit: int = 10) -> List[TrendingSearch]:
        """
        Most frequent tag and category terms over the most popular public
        files. Terms are lower-cased; ties keep first-seen order.
        """
        counts: Counter = Counter()
        for record in self.file_repo.list_popular(TRENDING_POOL_SIZE):
            for term in record.tags + [file_category(record.content_type)]:
                counts[term.lower()] += 1

        return [
            TrendingSearch(term=term, count=count, category=search_category(term))
            for term, count in counts.most_common(max(0, limit))
        ]
