"""Entry point for the ShareBox file service."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from fileservice.config import SERVICE_HOST, SERVICE_PORT
from fileservice.database import get_db_connection, init_database
from fileservice.exceptions import (
    FileServiceError,
    UserAlreadyExistsError,
    InvalidCredentialsError,
    InvalidAPIKeyError,
    FileNotFoundError,
    AccessForbiddenError,
    InvalidUploadError,
    InvalidRequestError,
    BlobNotFoundError,
    InvalidSignatureError
)
from fileservice.routes import auth_router, blob_router, file_router, leaderboard_router, search_router
from fileservice.service_locator import close_all, get_ranking_client

logger = setup_logging('fileservice')

app = FastAPI(
    title="ShareBox File Service",
    description="File sharing service with popularity scoring and AI-assisted search",
    version="1.0.0"
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    logger.info("File service starting up...")

    init_database()
    logger.info("Database initialized")

    if get_ranking_client().configured:
        logger.info("Text ranking collaborator configured, AI search enabled")
    else:
        logger.info("No ranking collaborator configured, using substring search fallback")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("File service shutting down...")
    await close_all()


def _error_response(request: Request, exc: Exception, status_code: int, code: str) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "code": code})


@app.exception_handler(UserAlreadyExistsError)
async def user_already_exists_handler(request: Request, exc: UserAlreadyExistsError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "USER_ALREADY_EXISTS")


@app.exception_handler(InvalidCredentialsError)
async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
    return _error_response(request, exc, status.HTTP_401_UNAUTHORIZED, "INVALID_CREDENTIALS")


@app.exception_handler(InvalidAPIKeyError)
async def invalid_api_key_handler(request: Request, exc: InvalidAPIKeyError):
    return _error_response(request, exc, status.HTTP_401_UNAUTHORIZED, "INVALID_API_KEY")


@app.exception_handler(FileNotFoundError)
async def file_not_found_handler(request: Request, exc: FileNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND")


@app.exception_handler(AccessForbiddenError)
async def access_forbidden_handler(request: Request, exc: AccessForbiddenError):
    return _error_response(request, exc, status.HTTP_403_FORBIDDEN, "ACCESS_FORBIDDEN")


@app.exception_handler(InvalidUploadError)
async def invalid_upload_handler(request: Request, exc: InvalidUploadError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_UPLOAD")


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST")


@app.exception_handler(BlobNotFoundError)
async def blob_not_found_handler(request: Request, exc: BlobNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "BLOB_NOT_FOUND")


@app.exception_handler(InvalidSignatureError)
async def invalid_signature_handler(request: Request, exc: InvalidSignatureError):
    return _error_response(request, exc, status.HTTP_403_FORBIDDEN, "INVALID_SIGNATURE")


@app.exception_handler(FileServiceError)
async def file_service_error_handler(request: Request, exc: FileServiceError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"File service error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "code": "INTERNAL_ERROR"}
    )


app.include_router(auth_router)
app.include_router(file_router)
app.include_router(leaderboard_router)
app.include_router(search_router)
app.include_router(blob_router)


@app.get("/")
async def root():
    return {"message": "ShareBox File Service API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint. Returns 200 if service is alive.
    """
    return {"status": "healthy", "service": "fileservice"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint.
    Verifies database connectivity and reports whether AI search is enabled.
    """
    try:
        with get_db_connection() as conn:
            conn.execute("SELECT 1")
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {str(e)}"

    ready = db_status == "ok"
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={
            "ready": ready,
            "database": db_status,
            "ai_search": get_ranking_client().configured
        }
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "fileservice.main:app",
        host=SERVICE_HOST,
        port=SERVICE_PORT,
    )


if __name__ == "__main__":
    main()
