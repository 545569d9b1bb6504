"""Signed blob URL routes."""

from fastapi import APIRouter, Query
from fastapi.responses import FileResponse

from fileservice.service_locator import get_blob_store

router = APIRouter(prefix="/blobs", tags=["Blobs"])


@router.get("/{container}/{blob_name}")
async def get_blob(
    container: str,
    blob_name: str,
    expires: int = Query(...),
    signature: str = Query(...)
):
    """
    Serve a blob through a signed, time-limited URL.

    Raises:
        - 403: Signature invalid or expired
        - 404: Blob not found
    """
    blob_store = get_blob_store()
    blob_store.verify_signature(container, blob_name, expires, signature)
    return FileResponse(blob_store.local_path(container, blob_name))
