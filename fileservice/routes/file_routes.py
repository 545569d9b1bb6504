"""File operation API routes."""

from io import BytesIO
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from fileservice.auth import get_current_user
from fileservice.schemas.files import (
    FileResponse,
    FileUrlResponse,
    ListFilesResponse,
    SearchRequest,
    SearchResponse,
    ShareRequest,
    UpdateFileRequest
)
from fileservice.services.file_service import FileService
from fileservice.types import Caller
from fileservice.utils import content_disposition, parse_tags

router = APIRouter(prefix="/files", tags=["Files"])


def _list_response(records) -> ListFilesResponse:
    return ListFilesResponse(files=[FileResponse.from_record(r) for r in records])


@router.post("", response_model=FileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    is_public: bool = Form(False),
    current_user: Caller = Depends(get_current_user)
):
    """
    Upload a file with optional description and tags.

    Parameters:
        - file: File to upload (multipart/form-data)
        - description: Free-text description
        - tags: Comma-separated list of tags (e.g., "tag1,tag2,tag3")
        - is_public: Whether every user may read the file
        - Authorization header: Bearer <api_key> (required)

    Returns:
        - Metadata of the stored file, including AI summary and keywords

    Raises:
        - 400: Empty upload
        - 401: Invalid or missing API Key
    """
    file_service = FileService()

    file_content = await file.read()
    record = await file_service.upload_file(
        caller=current_user,
        file_name=file.filename,
        content_type=file.content_type,
        file_data=BytesIO(file_content),
        description=description,
        tags=parse_tags(tags),
        is_public=is_public,
    )

    return FileResponse.from_record(record)


@router.get("", response_model=ListFilesResponse)
async def list_own_files(current_user: Caller = Depends(get_current_user)):
    """
    List the caller's non-archived files, newest first.
    """
    return _list_response(FileService().list_own(current_user))


@router.get("/public", response_model=ListFilesResponse)
async def list_public_files(current_user: Caller = Depends(get_current_user)):
    return _list_response(FileService().list_public())


@router.get("/shared", response_model=ListFilesResponse)
async def list_shared_files(current_user: Caller = Depends(get_current_user)):
    """
    List files other users shared with the caller's email.
    """
    return _list_response(FileService().list_shared(current_user))


@router.get("/popular", response_model=ListFilesResponse)
async def list_popular_files(
    limit: int = Query(10, ge=0),
    current_user: Caller = Depends(get_current_user)
):
    return _list_response(FileService().list_popular(limit))


@router.get("/recommendations", response_model=ListFilesResponse)
async def list_recommendations(
    limit: int = Query(10, ge=0),
    current_user: Caller = Depends(get_current_user)
):
    """
    Public files of other users, ranked by popularity boosted by the
    caller's most used content types and tags.
    """
    return _list_response(FileService().list_recommended(current_user, limit))


@router.post("/search", response_model=SearchResponse)
async def search_files(
    request: SearchRequest,
    current_user: Caller = Depends(get_current_user)
):
    """
    Search accessible files.

    Parameters:
        - SearchRequest body; use_ai_search ranks the filtered candidate
          pool with the text ranking collaborator and returns at most
          max_results files (no paging)

    Returns:
        - files: Matching files
        - total_count: Total matches for paged search, result size for AI search

    Raises:
        - 401: Invalid or missing API Key
    """
    file_service = FileService()
    criteria = request.to_criteria()

    if request.use_ai_search and request.query:
        files = await file_service.ai_search(current_user, criteria, request.max_results)
        return SearchResponse(
            files=[FileResponse.from_record(r) for r in files],
            total_count=len(files),
            page=1,
            page_size=len(files),
            used_ai_search=True,
        )

    files, total = file_service.search(current_user, criteria)
    return SearchResponse(
        files=[FileResponse.from_record(r) for r in files],
        total_count=total,
        page=max(1, request.page),
        page_size=len(files),
        used_ai_search=False,
    )


@router.get("/{file_id}", response_model=FileResponse)
async def get_file(file_id: str, current_user: Caller = Depends(get_current_user)):
    """
    Get file metadata. Counts as a view.

    Raises:
        - 401: Invalid or missing API Key
        - 403: Caller may not read this file
        - 404: File not found
    """
    return FileResponse.from_record(FileService().get_file(current_user, file_id))


@router.get("/{file_id}/download")
async def download_file(file_id: str, current_user: Caller = Depends(get_current_user)):
    """
    Download a file by file_id. Counts as a download.

    Returns:
        - StreamingResponse with file data

    Raises:
        - 401: Invalid or missing API Key
        - 403: Caller may not read this file
        - 404: File or blob not found
    """
    file_service = FileService()

    record, stream_generator = file_service.download_file(current_user, file_id)

    return StreamingResponse(
        stream_generator,
        media_type=record.content_type or "application/octet-stream",
        headers={
            "Content-Disposition": content_disposition(record.original_file_name),
            "Content-Length": str(record.file_size),
        }
    )


@router.get("/{file_id}/url", response_model=FileUrlResponse)
async def get_file_url(
    file_id: str,
    expiry_hours: int = Query(1, ge=1, le=168),
    current_user: Caller = Depends(get_current_user)
):
    url, expires_at = FileService().get_file_url(current_user, file_id, expiry_hours)
    return FileUrlResponse(url=url, expires_at=expires_at)


@router.post("/{file_id}/share", response_model=FileResponse)
async def share_file(
    file_id: str,
    request: ShareRequest,
    current_user: Caller = Depends(get_current_user)
):
    """
    Share an owned file with a list of emails.

    Raises:
        - 403: Caller does not own this file
        - 404: File not found
    """
    record = FileService().share_file(current_user, file_id, request.emails, request.expiration_date)
    return FileResponse.from_record(record)


@router.put("/{file_id}", response_model=FileResponse)
async def update_file(
    file_id: str,
    request: UpdateFileRequest,
    current_user: Caller = Depends(get_current_user)
):
    """
    Replace description, tags, visibility and expiration of an owned file.
    """
    record = FileService().update_file(
        current_user,
        file_id,
        description=request.description,
        tags=request.tags,
        is_public=request.is_public,
        expiration_date=request.expiration_date,
    )
    return FileResponse.from_record(record)


@router.post("/{file_id}/archive", response_model=FileResponse)
async def archive_file(file_id: str, current_user: Caller = Depends(get_current_user)):
    return FileResponse.from_record(FileService().archive_file(current_user, file_id))


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(file_id: str, current_user: Caller = Depends(get_current_user)):
    """
    Delete an owned file together with its blob.

    Raises:
        - 403: Caller does not own this file
        - 404: File not found
    """
    FileService().delete_file(current_user, file_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{file_id}/similar", response_model=ListFilesResponse)
async def similar_files(
    file_id: str,
    max_results: int = Query(5, ge=0, le=50),
    current_user: Caller = Depends(get_current_user)
):
    files = await FileService().similar_files(current_user, file_id, max_results)
    return _list_response(files)
