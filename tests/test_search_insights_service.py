"""Tests for query suggestions, file analysis and trending search terms."""

from io import BytesIO

import httpx
import pytest

from fileservice.exceptions import InvalidUploadError
from fileservice.ranking_client import TextRankingClient
from fileservice.repositories.file_repository import FileRepository
from fileservice.services.ai_metadata_service import AiMetadataService, basic_suggestions, basic_summary
from fileservice.services.search_insights_service import SearchInsightsService, search_category
from fileservice.types import Caller

CALLER = Caller(user_id="user-1", email="user@example.com")


def completion_client(content=None, status_code=200) -> TextRankingClient:
    def handler(request):
        if status_code != 200:
            return httpx.Response(status_code, json={"error": "boom"})
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

    return TextRankingClient(api_key="k", base_url="http://llm.test", transport=httpx.MockTransport(handler))


class TestBasicSuggestions:
    def test_prefix_matches_file_types_and_terms(self):
        assert basic_suggestions("do") == ["doc files", "document"]
        assert basic_suggestions("te") == ["text files", "template"]

    def test_longer_queries_add_phrasings(self):
        assert basic_suggestions("rep") == [
            "report",
            "files containing 'rep'",
            "recent rep",
            "shared rep",
        ]

    def test_at_most_five(self):
        assert len(basic_suggestions("p")) <= 5


class TestGenerateSuggestions:
    @pytest.mark.asyncio
    async def test_short_query_has_no_suggestions(self):
        service = AiMetadataService(TextRankingClient(api_key=""))
        assert await service.generate_suggestions("r") == []
        assert await service.generate_suggestions("   ") == []

    @pytest.mark.asyncio
    async def test_without_collaborator_uses_basic_suggestions(self):
        service = AiMetadataService(TextRankingClient(api_key=""))
        assert await service.generate_suggestions("rep") == basic_suggestions("rep")

    @pytest.mark.asyncio
    async def test_few_collaborator_suggestions_are_topped_up(self):
        client = completion_client('```json\n["annual report 2024", "report template"]\n```')
        service = AiMetadataService(client)

        assert await service.generate_suggestions("rep") == [
            "annual report 2024",
            "report template",
            "report",
            "files containing 'rep'",
            "recent rep",
        ]
        await client.close()

    @pytest.mark.asyncio
    async def test_enough_collaborator_suggestions_are_used_alone(self):
        client = completion_client('["q1 invoices", "invoice template", "unpaid invoices"]')
        service = AiMetadataService(client)

        assert await service.generate_suggestions("inv") == ["q1 invoices", "invoice template", "unpaid invoices"]
        await client.close()

    @pytest.mark.asyncio
    async def test_collaborator_failure_falls_back(self):
        client = completion_client(status_code=500)
        service = AiMetadataService(client)

        assert await service.generate_suggestions("rep") == basic_suggestions("rep")
        await client.close()


class TestAnalyzeFile:
    @pytest.mark.asyncio
    async def test_offline_analysis_uses_heuristics(self, test_db, offline_ranking):
        analysis = await SearchInsightsService().analyze_file(
            CALLER, "report.pdf", "application/pdf", BytesIO(b"%PDF-1.4 body")
        )

        assert analysis.file_size == len(b"%PDF-1.4 body")
        assert analysis.ai_summary == basic_summary("report.pdf", "application/pdf")
        assert analysis.suggested_keywords[:3] == ["pdf", "document", "report"]
        assert analysis.suggested_tags == analysis.suggested_keywords[:5]

    @pytest.mark.asyncio
    async def test_analysis_stores_nothing(self, test_db, offline_ranking):
        await SearchInsightsService().analyze_file(CALLER, "notes.txt", "text/plain", BytesIO(b"hello"))
        assert FileRepository.list_by_owner(CALLER.user_id) == []

    @pytest.mark.asyncio
    async def test_empty_content_is_rejected(self, test_db, offline_ranking):
        with pytest.raises(InvalidUploadError):
            await SearchInsightsService().analyze_file(CALLER, "empty.txt", "text/plain", BytesIO(b""))


class TestTrendingSearches:
    @pytest.fixture
    def seeded(self, test_db, offline_ranking, make_record):
        records = [
            make_record(file_id="photo", content_type="image/png", is_public=True,
                        tags=["Travel", "beach"], popularity_score=60.0),
            make_record(file_id="clip", content_type="video/mp4", is_public=True,
                        tags=["travel"], popularity_score=50.0),
            make_record(file_id="paper", content_type="application/pdf", is_public=True,
                        tags=["report"], popularity_score=40.0),
            make_record(file_id="private", content_type="image/png",
                        tags=["travel", "secret"], popularity_score=99.0),
        ]
        for record in records:
            FileRepository.create_file(record)
        return SearchInsightsService()

    def test_counts_tags_and_categories_of_public_files(self, seeded):
        trending = seeded.trending_searches(10)
        counts = {t.term: t.count for t in trending}

        assert counts == {
            "travel": 2, "beach": 1, "images": 1, "videos": 1, "report": 1, "documents": 1,
        }
        assert trending[0].term == "travel"
        assert "secret" not in counts

    def test_ties_keep_first_seen_order_and_limit_applies(self, seeded):
        assert [t.term for t in seeded.trending_searches(3)] == ["travel", "beach", "images"]
        assert seeded.trending_searches(0) == []

    def test_categories(self, seeded):
        by_term = {t.term: t.category for t in seeded.trending_searches(10)}
        assert by_term["images"] == "File Types"
        assert by_term["report"] == "Business"
        assert by_term["travel"] == "General"

    def test_search_category_is_case_insensitive(self):
        assert search_category("Invoice") == "Business"
        assert search_category("backup") == "System"
        assert search_category("anything") == "General"
