"""File service for business logic."""

from dataclasses import replace
from datetime import datetime, timezone
from typing import BinaryIO, Iterator, List, Optional, Tuple

from common.logging_config import get_logger
from fileservice import config
from fileservice.exceptions import AccessForbiddenError, FileNotFoundError, InvalidRequestError, InvalidUploadError
from fileservice.query_builder import build_predicate
from fileservice.repositories.file_repository import ACCESS_DOWNLOAD, ACCESS_VIEW, FileRepository
from fileservice.scoring import recommendation_score, score_file, top_content_types, top_tags
from fileservice.service_locator import get_blob_store, get_ranking_client
from fileservice.services.ai_metadata_service import AiMetadataService
from fileservice.services.search_service import SearchAggregator
from fileservice.types import Caller, FileRecord, SearchCriteria
from fileservice.utils import generate_uuid, normalize_email, normalize_tags, to_naive_utc, utcnow

logger = get_logger(__name__)


def can_access(record: FileRecord, caller: Caller) -> bool:
    if record.owner_id == caller.user_id:
        return True
    if record.is_public:
        return True
    return record.is_shared and normalize_email(caller.email) in record.shared_with


class FileService:
    def __init__(self, file_repo=None, blob_store=None, ranking_client=None):
        self.file_repo = file_repo or FileRepository()
        self.blob_store = blob_store or get_blob_store()
        ranking_client = ranking_client or get_ranking_client()
        self.search_aggregator = SearchAggregator(ranking_client)
        self.ai_metadata = AiMetadataService(ranking_client)

    def _get_accessible(self, file_id: str, caller: Caller) -> FileRecord:
        record = self.file_repo.get_by_id(file_id)
        if record is None or (record.is_archived and record.owner_id != caller.user_id):
            raise FileNotFoundError(f"File {file_id} not found")

        if not can_access(record, caller):
            raise AccessForbiddenError(f"User {caller.user_id} cannot access file {file_id}")
        return record

    def _get_owned(self, file_id: str, caller: Caller) -> FileRecord:
        record = self.file_repo.get_by_id(file_id)
        if record is None:
            raise FileNotFoundError(f"File {file_id} not found")

        if record.owner_id != caller.user_id:
            raise AccessForbiddenError(f"User {caller.user_id} does not own file {file_id}")
        return record

    async def upload_file(
        self,
        caller: Caller,
        file_name: str,
        content_type: str,
        file_data: BinaryIO,
        description: Optional[str] = None,
        tags: Optional[List[str]] = None,
        is_public: bool = False,
        expiration_date: Optional[datetime] = None,
    ) -> FileRecord:
        if not file_name:
            raise InvalidUploadError("No file provided")

        container = config.DEFAULT_CONTAINER
        content_type = content_type or "application/octet-stream"
        blob_name = self.blob_store.generate_unique_name(container, file_name)
        stored = self.blob_store.upload(container, blob_name, file_data, content_type)

        if stored.size == 0:
            self.blob_store.delete(container, blob_name)
            raise InvalidUploadError("No file provided")

        try:
            ai_summary = await self.ai_metadata.generate_summary(file_name, content_type)
            ai_keywords = await self.ai_metadata.extract_keywords(file_name, description, content_type)

            now = utcnow()
            record = FileRecord(
                file_id=generate_uuid(),
                owner_id=caller.user_id,
                owner_email=normalize_email(caller.email),
                file_name=file_name,
                original_file_name=file_name,
                content_type=content_type,
                file_size=stored.size,
                blob_name=blob_name,
                container_name=container,
                created_date=now,
                updated_date=now,
                is_public=is_public,
                tags=normalize_tags(tags or []),
                description=description,
                expiration_date=to_naive_utc(expiration_date),
                checksum=stored.checksum,
                ai_summary=ai_summary,
                ai_keywords=ai_keywords,
            )
            record.popularity_score = score_file(record, now)
            self.file_repo.create_file(record)
        except Exception as e:
            logger.error(f"Upload failed for {file_name}, removing blob {blob_name}: {e}")
            self.blob_store.delete(container, blob_name)
            raise

        logger.info(f"File uploaded successfully: {file_name} [file_id={record.file_id}] [user_id={caller.user_id}]")
        return record

    def list_own(self, caller: Caller) -> List[FileRecord]:
        return self.file_repo.list_by_owner(caller.user_id)

    def list_public(self) -> List[FileRecord]:
        return self.file_repo.list_public()

    def list_shared(self, caller: Caller) -> List[FileRecord]:
        return self.file_repo.list_shared_with(normalize_email(caller.email))

    def list_popular(self, limit: int = 10) -> List[FileRecord]:
        return self.file_repo.list_popular(max(0, limit))

    def list_recommended(self, caller: Caller, limit: int = 10) -> List[FileRecord]:
        """
        Public files of other owners, boosted by the caller's most frequent
        content types and tags.
        """
        own_files = self.file_repo.list_by_owner(caller.user_id)
        preferred_types = top_content_types(own_files)
        preferred_tags = top_tags(own_files)

        candidates = self.file_repo.list_recommendation_candidates(caller.user_id)
        ranked = sorted(
            candidates,
            key=lambda record: recommendation_score(record, preferred_types, preferred_tags),
            reverse=True,
        )
        logger.info(
            f"Recommendations for user {caller.user_id}: {min(limit, len(ranked))} of {len(candidates)} candidates"
        )
        return ranked[:max(0, limit)]

    def search(self, caller: Caller, criteria: SearchCriteria) -> Tuple[List[FileRecord], int]:
        """
        Returns:
            Tuple of (page of records, total matching count)
        """
        predicate = build_predicate(criteria, caller.user_id, caller.email)
        files = self.file_repo.search(predicate)
        total = self.file_repo.count(predicate)
        logger.info(f"Search for user {caller.user_id} matched {total} files, returning {len(files)}")
        return files, total

    async def ai_search(self, caller: Caller, criteria: SearchCriteria, max_results: int) -> List[FileRecord]:
        """
        Rank the caller's filtered candidate pool for criteria.query.

        The text clause is left out of the pool query: the query is the
        ranking input, not a filter.
        """
        pool_criteria = replace(criteria, query="", page=1, page_size=config.AI_POOL_SIZE)
        pool = self.file_repo.search(build_predicate(pool_criteria, caller.user_id, caller.email))
        return await self.search_aggregator.search(criteria.query, pool, max_results)

    def get_file(self, caller: Caller, file_id: str) -> FileRecord:
        self._get_accessible(file_id, caller)
        record = self.file_repo.record_access(file_id, ACCESS_VIEW, utcnow())
        if record is None:
            raise FileNotFoundError(f"File {file_id} not found")
        return record

    def download_file(self, caller: Caller, file_id: str) -> Tuple[FileRecord, Iterator[bytes]]:
        record = self._get_accessible(file_id, caller)
        stream = self.blob_store.download(record.container_name, record.blob_name)

        updated = self.file_repo.record_access(file_id, ACCESS_DOWNLOAD, utcnow())
        logger.info(f"File downloaded: {file_id} by user {caller.user_id}")
        return updated or record, stream

    def get_file_url(self, caller: Caller, file_id: str, expiry_hours: int = 1) -> Tuple[str, datetime]:
        record = self._get_accessible(file_id, caller)
        url, expires = self.blob_store.get_signed_url(
            record.container_name,
            record.blob_name,
            expiry_seconds=int(expiry_hours * 3600),
        )
        return url, datetime.fromtimestamp(expires, timezone.utc).replace(tzinfo=None)

    def share_file(
        self,
        caller: Caller,
        file_id: str,
        emails: List[str],
        expiration_date: Optional[datetime] = None,
    ) -> FileRecord:
        self._get_owned(file_id, caller)
        recipients = list(dict.fromkeys(normalize_email(e) for e in emails if e and e.strip()))
        if not recipients:
            raise InvalidRequestError("At least one email is required to share a file")
        record = self.file_repo.share_file(file_id, recipients, to_naive_utc(expiration_date), utcnow())
        if record is None:
            raise FileNotFoundError(f"File {file_id} not found")
        return record

    def update_file(
        self,
        caller: Caller,
        file_id: str,
        description: Optional[str],
        tags: List[str],
        is_public: bool,
        expiration_date: Optional[datetime],
    ) -> FileRecord:
        self._get_owned(file_id, caller)
        record = self.file_repo.update_metadata(
            file_id,
            description=description,
            tags=normalize_tags(tags),
            is_public=is_public,
            expiration_date=to_naive_utc(expiration_date),
            updated_at=utcnow(),
        )
        if record is None:
            raise FileNotFoundError(f"File {file_id} not found")
        return record

    def archive_file(self, caller: Caller, file_id: str) -> FileRecord:
        self._get_owned(file_id, caller)
        record = self.file_repo.set_archived(file_id, True, utcnow())
        if record is None:
            raise FileNotFoundError(f"File {file_id} not found")
        return record

    def delete_file(self, caller: Caller, file_id: str) -> None:
        """
        Owner-scoped hard delete of the blob and its metadata.
        """
        record = self._get_owned(file_id, caller)
        self.blob_store.delete(record.container_name, record.blob_name)
        if not self.file_repo.delete_file(file_id, caller.user_id):
            raise FileNotFoundError(f"File {file_id} not found")
        logger.info(f"File deleted: {file_id} by user {caller.user_id}")

    async def similar_files(self, caller: Caller, file_id: str, max_results: int = 5) -> List[FileRecord]:
        target = self._get_accessible(file_id, caller)

        criteria = SearchCriteria(page_size=config.AI_POOL_SIZE)
        pool = [
            record
            for record in self.file_repo.search(build_predicate(criteria, caller.user_id, caller.email))
            if record.file_id != file_id
        ]
        query = f"files similar to {target.file_name} {target.description or ''} {' '.join(target.tags)}".strip()
        return await self.search_aggregator.search(query, pool, max_results)
