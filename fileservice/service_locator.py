"""Service locator for process-wide collaborators."""

from typing import Optional

from fileservice.blob_store import BlobStore
from fileservice.ranking_client import TextRankingClient

_ranking_client: Optional[TextRankingClient] = None
_blob_store: Optional[BlobStore] = None


def set_ranking_client(client: Optional[TextRankingClient]):
    """Set global text ranking client instance"""
    global _ranking_client
    _ranking_client = client


def get_ranking_client() -> TextRankingClient:
    """Get global text ranking client instance, created from config on first use"""
    global _ranking_client
    if _ranking_client is None:
        _ranking_client = TextRankingClient()
    return _ranking_client


def set_blob_store(store: Optional[BlobStore]):
    """Set global blob store instance"""
    global _blob_store
    _blob_store = store


def get_blob_store() -> BlobStore:
    """Get global blob store instance, created from config on first use"""
    global _blob_store
    if _blob_store is None:
        _blob_store = BlobStore()
    return _blob_store


async def close_all() -> None:
    """Release network resources held by collaborators"""
    if _ranking_client is not None:
        await _ranking_client.close()
