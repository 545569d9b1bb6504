"""Search helper API routes."""

from io import BytesIO
from typing import List

from fastapi import APIRouter, Depends, File, Query, UploadFile

from fileservice.auth import get_current_user
from fileservice.schemas.search import (
    FileAnalysisResponse,
    SearchSuggestionsResponse,
    TrendingSearchResponse
)
from fileservice.services.search_insights_service import SearchInsightsService
from fileservice.types import Caller

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("/suggestions", response_model=SearchSuggestionsResponse)
async def get_suggestions(
    query: str = Query(""),
    current_user: Caller = Depends(get_current_user)
):
    """
    Suggest up to five complete search queries for a partial query.

    Parameters:
        - query: Partial query; fewer than two characters yields no suggestions
        - Authorization header: Bearer <api_key> (required)
    """
    suggestions = await SearchInsightsService().suggestions(query)
    return SearchSuggestionsResponse(suggestions=suggestions)


@router.post("/analyze-file", response_model=FileAnalysisResponse)
async def analyze_file(
    file: UploadFile = File(...),
    current_user: Caller = Depends(get_current_user)
):
    """
    Summarize a file and propose keywords and tags without storing it.

    Raises:
        - 400: Empty upload
        - 401: Invalid or missing API Key
    """
    file_content = await file.read()
    analysis = await SearchInsightsService().analyze_file(
        current_user,
        file_name=file.filename,
        content_type=file.content_type,
        file_data=BytesIO(file_content),
    )
    return FileAnalysisResponse.from_analysis(analysis)


@router.get("/trending-searches", response_model=List[TrendingSearchResponse])
async def trending_searches(limit: int = Query(10, ge=0)):
    """
    Most frequent tag and category terms among popular public files. Anonymous.
    """
    trending = SearchInsightsService().trending_searches(limit)
    return [TrendingSearchResponse.from_trending(t) for t in trending]
