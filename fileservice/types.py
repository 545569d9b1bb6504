"""Service-level data type definitions."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class FileRecord:
    """
    Metadata for a stored file, owned by the metadata store.
    """
    file_id: str
    owner_id: str
    owner_email: str
    file_name: str
    original_file_name: str
    content_type: str
    file_size: int
    blob_name: str
    container_name: str
    created_date: datetime
    updated_date: datetime
    is_public: bool = False
    is_shared: bool = False
    shared_with: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    description: Optional[str] = None
    download_count: int = 0
    view_count: int = 0
    last_accessed_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    checksum: Optional[str] = None
    is_archived: bool = False
    ai_summary: Optional[str] = None
    ai_keywords: List[str] = field(default_factory=list)
    popularity_score: float = 0.0


@dataclass(frozen=True)
class Caller:
    """
    Identity of the authenticated caller.
    """
    user_id: str
    email: str


@dataclass
class SearchCriteria:
    """
    Ephemeral search request handed to the query builder.
    """
    query: str = ""
    tags: List[str] = field(default_factory=list)
    content_type: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_file_size: Optional[int] = None
    max_file_size: Optional[int] = None
    sort_by: str = "createdDate"
    sort_direction: str = "desc"
    page: int = 1
    page_size: int = 20
    include_public: bool = True
    include_shared: bool = True
