"""File metadata repository for database operations."""

import json
from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger
from fileservice.database import get_db_connection
from fileservice.query_builder import FilePredicate
from fileservice.repositories.tag_repository import ShareRepository, TagRepository
from fileservice.scoring import score_file
from fileservice.types import FileRecord
from fileservice.utils import from_db_timestamp, to_db_timestamp

logger = get_logger(__name__)

ACCESS_DOWNLOAD = "download"
ACCESS_VIEW = "view"

_COLUMNS = """
    f.file_id, f.owner_id, f.owner_email, f.file_name, f.original_file_name,
    f.content_type, f.file_size, f.blob_name, f.container_name, f.is_public,
    f.is_shared, f.description, f.download_count, f.view_count,
    f.last_accessed_date, f.created_date, f.updated_date, f.expiration_date,
    f.checksum, f.is_archived, f.ai_summary, f.ai_keywords, f.popularity_score
"""


def _row_to_record(row, tags: List[str], shared_with: List[str]) -> FileRecord:
    return FileRecord(
        file_id=row["file_id"],
        owner_id=row["owner_id"],
        owner_email=row["owner_email"],
        file_name=row["file_name"],
        original_file_name=row["original_file_name"],
        content_type=row["content_type"],
        file_size=row["file_size"],
        blob_name=row["blob_name"],
        container_name=row["container_name"],
        created_date=from_db_timestamp(row["created_date"]),
        updated_date=from_db_timestamp(row["updated_date"]),
        is_public=bool(row["is_public"]),
        is_shared=bool(row["is_shared"]),
        shared_with=shared_with,
        tags=tags,
        description=row["description"],
        download_count=row["download_count"],
        view_count=row["view_count"],
        last_accessed_date=from_db_timestamp(row["last_accessed_date"]),
        expiration_date=from_db_timestamp(row["expiration_date"]),
        checksum=row["checksum"],
        is_archived=bool(row["is_archived"]),
        ai_summary=row["ai_summary"],
        ai_keywords=json.loads(row["ai_keywords"] or "[]"),
        popularity_score=row["popularity_score"],
    )


def _hydrate(conn, rows) -> List[FileRecord]:
    file_ids = [row["file_id"] for row in rows]
    if not file_ids:
        return []
    tags = TagRepository.get_tags_for_files(file_ids, conn)
    shares = ShareRepository.get_shares_for_files(file_ids, conn)
    return [_row_to_record(row, tags[row["file_id"]], shares[row["file_id"]]) for row in rows]


def _fetch(query: str, params=()) -> List[FileRecord]:
    with get_db_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(query, params)
        return _hydrate(conn, cursor.fetchall())


def _fetch_one(conn, file_id: str) -> Optional[FileRecord]:
    cursor = conn.cursor()
    cursor.execute(f"SELECT {_COLUMNS} FROM files f WHERE f.file_id = ?", (file_id,))
    row = cursor.fetchone()
    if row is None:
        return None
    return _hydrate(conn, [row])[0]


class FileRepository:
    @staticmethod
    def create_file(record: FileRecord, conn=None) -> FileRecord:
        """
        Insert a file record with its tags and share list.

        When no connection is passed in, a new one is opened and the insert
        is committed on it; otherwise the caller owns the transaction.
        """
        if conn is None:
            with get_db_connection() as own_conn:
                FileRepository.create_file(record, conn=own_conn)
                own_conn.commit()
            return record

        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO files (
                    file_id, owner_id, owner_email, file_name, original_file_name,
                    content_type, file_size, blob_name, container_name, is_public,
                    is_shared, description, download_count, view_count,
                    last_accessed_date, created_date, updated_date, expiration_date,
                    checksum, is_archived, ai_summary, ai_keywords, popularity_score
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.file_id, record.owner_id, record.owner_email, record.file_name,
                    record.original_file_name, record.content_type, record.file_size,
                    record.blob_name, record.container_name, int(record.is_public),
                    int(record.is_shared), record.description, record.download_count,
                    record.view_count, to_db_timestamp(record.last_accessed_date),
                    to_db_timestamp(record.created_date), to_db_timestamp(record.updated_date),
                    to_db_timestamp(record.expiration_date), record.checksum,
                    int(record.is_archived), record.ai_summary, json.dumps(record.ai_keywords),
                    record.popularity_score,
                )
            )
            TagRepository.replace_tags(record.file_id, record.tags, conn=conn)
            ShareRepository.add_shares(record.file_id, record.shared_with, conn)
        except Exception as e:
            logger.error(f"Failed to create file metadata for owner {record.owner_id}: {e}", exc_info=True)
            raise

        logger.info(f"File metadata created [file_id={record.file_id}] [owner_id={record.owner_id}]")
        return record

    @staticmethod
    def get_by_id(file_id: str) -> Optional[FileRecord]:
        with get_db_connection() as conn:
            return _fetch_one(conn, file_id)

    @staticmethod
    def list_by_owner(owner_id: str, include_archived: bool = False) -> List[FileRecord]:
        archived_clause = "" if include_archived else "AND f.is_archived = 0"
        return _fetch(
            f"""
            SELECT {_COLUMNS} FROM files f
            WHERE f.owner_id = ? {archived_clause}
            ORDER BY f.created_date DESC
            """,
            (owner_id,)
        )

    @staticmethod
    def list_public() -> List[FileRecord]:
        return _fetch(
            f"""
            SELECT {_COLUMNS} FROM files f
            WHERE f.is_public = 1 AND f.is_archived = 0
            ORDER BY f.popularity_score DESC, f.created_date DESC
            """
        )

    @staticmethod
    def list_shared_with(email: str) -> List[FileRecord]:
        return _fetch(
            f"""
            SELECT {_COLUMNS} FROM files f
            WHERE f.is_shared = 1 AND f.is_archived = 0
            AND EXISTS (SELECT 1 FROM file_shares s WHERE s.file_id = f.file_id AND s.email = ?)
            ORDER BY f.created_date DESC
            """,
            (email,)
        )

    @staticmethod
    def list_popular(limit: int) -> List[FileRecord]:
        return _fetch(
            f"""
            SELECT {_COLUMNS} FROM files f
            WHERE f.is_public = 1 AND f.is_archived = 0
            ORDER BY f.popularity_score DESC, f.download_count DESC
            LIMIT ?
            """,
            (limit,)
        )

    @staticmethod
    def list_recommendation_candidates(user_id: str) -> List[FileRecord]:
        return _fetch(
            f"""
            SELECT {_COLUMNS} FROM files f
            WHERE f.is_public = 1 AND f.is_archived = 0 AND f.owner_id != ?
            ORDER BY f.popularity_score DESC
            """,
            (user_id,)
        )

    @staticmethod
    def search(predicate: FilePredicate) -> List[FileRecord]:
        return _fetch(
            f"""
            SELECT {_COLUMNS} FROM files f
            WHERE {predicate.where}
            ORDER BY {predicate.order_by}
            LIMIT ? OFFSET ?
            """,
            list(predicate.params) + [predicate.limit, predicate.offset]
        )

    @staticmethod
    def count(predicate: FilePredicate) -> int:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT COUNT(*) AS count FROM files f WHERE {predicate.where}",
                predicate.params
            )
            return cursor.fetchone()["count"]

    @staticmethod
    def update_metadata(
        file_id: str,
        description: Optional[str],
        tags: List[str],
        is_public: bool,
        expiration_date: Optional[datetime],
        updated_at: datetime,
    ) -> Optional[FileRecord]:
        """
        Update the owner-editable fields. Counters and score are untouched.
        """
        with get_db_connection() as conn:
            try:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    UPDATE files
                    SET description = ?, is_public = ?, expiration_date = ?, updated_date = ?
                    WHERE file_id = ?
                    """,
                    (description, int(is_public), to_db_timestamp(expiration_date),
                     to_db_timestamp(updated_at), file_id)
                )
                if cursor.rowcount == 0:
                    return None
                TagRepository.replace_tags(file_id, tags, conn=conn)
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Failed to update file metadata [file_id={file_id}]: {e}", exc_info=True)
                raise
            logger.info(f"File metadata updated [file_id={file_id}]")
            return _fetch_one(conn, file_id)

    @staticmethod
    def share_file(
        file_id: str,
        emails: List[str],
        expiration_date: Optional[datetime],
        updated_at: datetime,
    ) -> Optional[FileRecord]:
        with get_db_connection() as conn:
            try:
                cursor = conn.cursor()
                if expiration_date is not None:
                    cursor.execute(
                        "UPDATE files SET is_shared = 1, expiration_date = ?, updated_date = ? WHERE file_id = ?",
                        (to_db_timestamp(expiration_date), to_db_timestamp(updated_at), file_id)
                    )
                else:
                    cursor.execute(
                        "UPDATE files SET is_shared = 1, updated_date = ? WHERE file_id = ?",
                        (to_db_timestamp(updated_at), file_id)
                    )
                if cursor.rowcount == 0:
                    return None
                ShareRepository.add_shares(file_id, emails, conn)
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Failed to share file [file_id={file_id}]: {e}", exc_info=True)
                raise
            logger.info(f"File shared with {len(emails)} recipients [file_id={file_id}]")
            return _fetch_one(conn, file_id)

    @staticmethod
    def set_archived(file_id: str, archived: bool, updated_at: datetime) -> Optional[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE files SET is_archived = ?, updated_date = ? WHERE file_id = ?",
                (int(archived), to_db_timestamp(updated_at), file_id)
            )
            if cursor.rowcount == 0:
                return None
            conn.commit()
            logger.info(f"File archived={archived} [file_id={file_id}]")
            return _fetch_one(conn, file_id)

    @staticmethod
    def delete_file(file_id: str, owner_id: str) -> bool:
        """
        Hard delete a file record together with its tags and shares.
        """
        logger.debug(f"Deleting file [file_id={file_id}] [owner_id={owner_id}]")
        with get_db_connection() as conn:
            try:
                cursor = conn.cursor()
                cursor.execute(
                    "DELETE FROM files WHERE file_id = ? AND owner_id = ?",
                    (file_id, owner_id)
                )
                deleted = cursor.rowcount > 0
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Failed to delete file [file_id={file_id}]: {e}", exc_info=True)
                raise
        if deleted:
            logger.info(f"File deleted successfully [file_id={file_id}]")
        return deleted

    @staticmethod
    def record_access(file_id: str, kind: str, now: datetime) -> Optional[FileRecord]:
        """
        Increment a usage counter and persist the recomputed popularity score.

        Runs as one IMMEDIATE transaction so readers never see a bumped
        counter next to a stale score. Concurrent writers serialize on the
        database lock.

        Args:
            file_id: File to mutate
            kind: ACCESS_DOWNLOAD or ACCESS_VIEW
            now: Access time

        Returns:
            The updated record, or None if it does not exist
        """
        if kind not in (ACCESS_DOWNLOAD, ACCESS_VIEW):
            raise ValueError(f"Unknown access kind: {kind}")

        with get_db_connection() as conn:
            try:
                conn.execute("BEGIN IMMEDIATE")
                record = _fetch_one(conn, file_id)
                if record is None:
                    conn.rollback()
                    return None

                if kind == ACCESS_DOWNLOAD:
                    record.download_count += 1
                else:
                    record.view_count += 1
                record.last_accessed_date = now
                record.popularity_score = score_file(record, now)

                conn.execute(
                    """
                    UPDATE files
                    SET download_count = ?, view_count = ?, last_accessed_date = ?, popularity_score = ?
                    WHERE file_id = ?
                    """,
                    (record.download_count, record.view_count, to_db_timestamp(now),
                     record.popularity_score, file_id)
                )
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Failed to record {kind} [file_id={file_id}]: {e}", exc_info=True)
                raise

        logger.info(
            f"File stats updated [file_id={file_id}]: downloads={record.download_count}, "
            f"views={record.view_count}, score={record.popularity_score:.2f}"
        )
        return record
