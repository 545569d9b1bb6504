"""Repository layer for data access."""

from fileservice.repositories.user_repository import UserRepository
from fileservice.repositories.file_repository import FileRepository
from fileservice.repositories.tag_repository import ShareRepository, TagRepository

__all__ = [
    "UserRepository",
    "FileRepository",
    "ShareRepository",
    "TagRepository",
]
