"""Pydantic schemas for search helper endpoints."""

from typing import List

from pydantic import BaseModel

from fileservice.services.search_insights_service import FileAnalysis, TrendingSearch


class SearchSuggestionsResponse(BaseModel):
    """Response model for query suggestions."""
    suggestions: List[str]


class FileAnalysisResponse(BaseModel):
    """Summary and proposed keywords for an uploaded file that is not stored."""
    file_name: str
    content_type: str
    file_size: int
    ai_summary: str
    suggested_keywords: List[str]
    suggested_tags: List[str]

    @classmethod
    def from_analysis(cls, analysis: FileAnalysis) -> "FileAnalysisResponse":
        return cls(
            file_name=analysis.file_name,
            content_type=analysis.content_type,
            file_size=analysis.file_size,
            ai_summary=analysis.ai_summary,
            suggested_keywords=analysis.suggested_keywords,
            suggested_tags=analysis.suggested_tags,
        )


class TrendingSearchResponse(BaseModel):
    term: str
    count: int
    category: str

    @classmethod
    def from_trending(cls, trending: TrendingSearch) -> "TrendingSearchResponse":
        return cls(term=trending.term, count=trending.count, category=trending.category)
