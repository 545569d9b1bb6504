"""Builds the filter, sort and page clauses of a file metadata query."""

from dataclasses import dataclass, field
from typing import Any, List

from common.constants import DEFAULT_SORT_DIRECTION, DEFAULT_SORT_KEY
from common.logging_config import get_logger
from fileservice.config import MAX_PAGE_SIZE
from fileservice.types import SearchCriteria
from fileservice.utils import normalize_email, normalize_tags, to_db_timestamp

logger = get_logger(__name__)

SORT_COLUMNS = {
    "createddate": "f.created_date",
    "filename": "f.file_name",
    "filesize": "f.file_size",
    "downloadcount": "f.download_count",
    "popularityscore": "f.popularity_score",
}


@dataclass
class FilePredicate:
    """
    SQL fragments over the `files f` table alias plus bound parameters.
    """
    where: str
    params: List[Any] = field(default_factory=list)
    sort_column: str = SORT_COLUMNS[DEFAULT_SORT_KEY.lower()]
    sort_direction: str = "DESC"
    limit: int = 20
    offset: int = 0

    @property
    def order_by(self) -> str:
        return f"{self.sort_column} {self.sort_direction}, f.file_id {self.sort_direction}"


def resolve_sort(sort_by: str, sort_direction: str) -> tuple[str, str]:
    """
    Map a client sort key and direction to a column and SQL direction.

    Keys and directions are case-insensitive; unknown keys fall back to the
    creation date and anything but "asc" sorts descending.
    """
    key = (sort_by or DEFAULT_SORT_KEY).lower()
    column = SORT_COLUMNS.get(key)
    if column is None:
        logger.debug(f"Unknown sort key '{sort_by}', falling back to {DEFAULT_SORT_KEY}")
        column = SORT_COLUMNS[DEFAULT_SORT_KEY.lower()]

    direction = "ASC" if (sort_direction or DEFAULT_SORT_DIRECTION).upper() == "ASC" else "DESC"
    return column, direction


def resolve_page(page: int, page_size: int) -> tuple[int, int]:
    """
    Returns:
        Tuple of (limit, offset) for a 1-indexed page
    """
    page = max(1, page or 1)
    limit = min(MAX_PAGE_SIZE, max(1, page_size or 1))
    return limit, (page - 1) * limit


def build_predicate(criteria: SearchCriteria, caller_id: str, caller_email: str) -> FilePredicate:
    conditions = ["f.is_archived = 0"]
    params: List[Any] = []

    access_conditions = []
    if criteria.include_public:
        access_conditions.append("f.is_public = 1")
    if criteria.include_shared:
        access_conditions.append(
            "(f.is_shared = 1 AND EXISTS ("
            "SELECT 1 FROM file_shares s WHERE s.file_id = f.file_id AND s.email = ?))"
        )
        params.append(normalize_email(caller_email))
    # Owners always see their own files
    access_conditions.append("f.owner_id = ?")
    params.append(caller_id)
    conditions.append(f"({' OR '.join(access_conditions)})")

    query = (criteria.query or "").strip()
    if query:
        needle = query.lower()
        conditions.append(
            "(instr(py_lower(f.file_name), ?) > 0"
            " OR instr(py_lower(COALESCE(f.description, '')), ?) > 0"
            " OR instr(py_lower(COALESCE(f.ai_summary, '')), ?) > 0)"
        )
        params.extend([needle, needle, needle])

    if criteria.content_type:
        conditions.append("f.content_type = ?")
        params.append(criteria.content_type)

    if criteria.date_from is not None:
        conditions.append("f.created_date >= ?")
        params.append(to_db_timestamp(criteria.date_from))

    if criteria.date_to is not None:
        conditions.append("f.created_date <= ?")
        params.append(to_db_timestamp(criteria.date_to))

    if criteria.min_file_size is not None:
        conditions.append("f.file_size >= ?")
        params.append(criteria.min_file_size)

    if criteria.max_file_size is not None:
        conditions.append("f.file_size <= ?")
        params.append(criteria.max_file_size)

    tags = normalize_tags(criteria.tags or [])
    if tags:
        placeholders = ','.join('?' for _ in tags)
        conditions.append(
            f"EXISTS (SELECT 1 FROM tags t WHERE t.file_id = f.file_id AND t.tag IN ({placeholders}))"
        )
        params.extend(tags)

    sort_column, sort_direction = resolve_sort(criteria.sort_by, criteria.sort_direction)
    limit, offset = resolve_page(criteria.page, criteria.page_size)

    return FilePredicate(
        where=" AND ".join(conditions),
        params=params,
        sort_column=sort_column,
        sort_direction=sort_direction,
        limit=limit,
        offset=offset,
    )
