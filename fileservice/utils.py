"""Utility helper functions for the file service."""

import uuid
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import quote


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """
    Current UTC time as a naive datetime, the form stored in the database.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Convert an aware datetime to naive UTC; naive values are assumed UTC.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Serialize a datetime with fixed precision so stored values sort lexically.
    """
    if value is None:
        return None
    return to_naive_utc(value).isoformat(timespec="microseconds")


def from_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)


def parse_tags(tags_str: Optional[str]) -> List[str]:
    """
    Parse comma-separated tags string into list.

    Args:
        tags_str: Comma-separated tags (e.g., "tag1,tag2,tag3")

    Returns:
        List of trimmed, de-duplicated tag strings in input order
    """
    if not tags_str:
        return []
    return normalize_tags(tags_str.split(','))


def normalize_tags(tags: List[str]) -> List[str]:
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def normalize_email(email: str) -> str:
    return email.strip().lower()


def content_disposition(file_name: str) -> str:
    """
    Build an attachment Content-Disposition header value.

    Header values must be latin-1, so the plain `filename` parameter carries
    an ASCII-only fallback and the exact name goes in the RFC 5987
    `filename*` parameter.
    """
    fallback = ''.join(
        ch if 32 <= ord(ch) < 127 and ch not in '"\\' else '_'
        for ch in file_name
    ) or 'download'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"
