"""Pydantic schemas for file operation endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from common.constants import DEFAULT_PAGE_SIZE, DEFAULT_SORT_DIRECTION, DEFAULT_SORT_KEY
from fileservice.types import FileRecord, SearchCriteria


class FileResponse(BaseModel):
    """Response model for file metadata."""
    file_id: str
    file_name: str
    original_file_name: str
    content_type: str
    file_size: int
    owner_id: str
    owner_email: str
    created_date: datetime
    updated_date: datetime
    is_public: bool
    is_shared: bool
    shared_with: List[str]
    tags: List[str]
    description: Optional[str] = None
    download_count: int
    view_count: int
    last_accessed_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    checksum: Optional[str] = None
    is_archived: bool
    ai_summary: Optional[str] = None
    ai_keywords: List[str]
    popularity_score: float

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileResponse":
        return cls(
            file_id=record.file_id,
            file_name=record.file_name,
            original_file_name=record.original_file_name,
            content_type=record.content_type,
            file_size=record.file_size,
            owner_id=record.owner_id,
            owner_email=record.owner_email,
            created_date=record.created_date,
            updated_date=record.updated_date,
            is_public=record.is_public,
            is_shared=record.is_shared,
            shared_with=record.shared_with,
            tags=record.tags,
            description=record.description,
            download_count=record.download_count,
            view_count=record.view_count,
            last_accessed_date=record.last_accessed_date,
            expiration_date=record.expiration_date,
            checksum=record.checksum,
            is_archived=record.is_archived,
            ai_summary=record.ai_summary,
            ai_keywords=record.ai_keywords,
            popularity_score=record.popularity_score,
        )


class ListFilesResponse(BaseModel):
    """Response model for file listing."""
    files: List[FileResponse]


class SearchRequest(BaseModel):
    """Request model for metadata search."""
    query: str = ""
    tags: List[str] = Field(default_factory=list)
    content_type: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_file_size: Optional[int] = None
    max_file_size: Optional[int] = None
    sort_by: str = DEFAULT_SORT_KEY
    sort_direction: str = DEFAULT_SORT_DIRECTION
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    include_public: bool = True
    include_shared: bool = True
    use_ai_search: bool = False
    max_results: int = 10

    def to_criteria(self) -> SearchCriteria:
        return SearchCriteria(
            query=self.query or "",
            tags=self.tags,
            content_type=self.content_type,
            date_from=self.date_from,
            date_to=self.date_to,
            min_file_size=self.min_file_size,
            max_file_size=self.max_file_size,
            sort_by=self.sort_by,
            sort_direction=self.sort_direction,
            page=self.page,
            page_size=self.page_size,
            include_public=self.include_public,
            include_shared=self.include_shared,
        )


class SearchResponse(BaseModel):
    """Response model for search results."""
    files: List[FileResponse]
    total_count: int
    page: int
    page_size: int
    used_ai_search: bool


class ShareRequest(BaseModel):
    """Request model for sharing a file."""
    emails: List[str]
    expiration_date: Optional[datetime] = None


class UpdateFileRequest(BaseModel):
    """Request model for updating owner-editable metadata."""
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False
    expiration_date: Optional[datetime] = None


class FileUrlResponse(BaseModel):
    """Response model for a signed download URL."""
    url: str
    expires_at: datetime
