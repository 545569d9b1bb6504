"""Project-wide constants shared by the service and its tests."""

API_KEY_PREFIX: str = "sbx_"

STREAM_PIECE_SIZE_BYTES: int = 64 * 1024

# Scoring weights
DOWNLOAD_WEIGHT: float = 40.0
VIEW_WEIGHT: float = 20.0
RECENCY_MAX_BONUS: float = 40.0
RECENCY_DECAY_PER_DAY: float = 2.0
TRENDING_BOOST: float = 2.0
CONTENT_TYPE_MATCH_BONUS: float = 10.0
TAG_MATCH_BONUS: float = 5.0

TOP_CONTENT_TYPES: int = 3
TOP_TAGS: int = 5

DEFAULT_SORT_KEY: str = "createdDate"
DEFAULT_SORT_DIRECTION: str = "desc"
DEFAULT_PAGE_SIZE: int = 20
