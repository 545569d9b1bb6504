"""Tag and share-list repository for database operations."""

from typing import Dict, List

from common.logging_config import get_logger
from fileservice.database import get_db_connection

logger = get_logger(__name__)

# Stay well below SQLite's bound-parameter limit
_BATCH_SIZE = 500


def _batched(items: List[str]):
    for start in range(0, len(items), _BATCH_SIZE):
        yield items[start:start + _BATCH_SIZE]


class TagRepository:
    @staticmethod
    def replace_tags(file_id: str, tags: List[str], conn=None) -> None:
        """
        Replace all tags of a file.
        """
        if conn is None:
            with get_db_connection() as own_conn:
                TagRepository.replace_tags(file_id, tags, conn=own_conn)
                own_conn.commit()
            return

        cursor = conn.cursor()
        cursor.execute("DELETE FROM tags WHERE file_id = ?", (file_id,))
        for tag in tags:
            cursor.execute(
                "INSERT OR IGNORE INTO tags (file_id, tag) VALUES (?, ?)",
                (file_id, tag)
            )

    @staticmethod
    def get_tags_for_files(file_ids: List[str], conn) -> Dict[str, List[str]]:
        result: Dict[str, List[str]] = {file_id: [] for file_id in file_ids}
        cursor = conn.cursor()
        for batch in _batched(file_ids):
            placeholders = ','.join('?' for _ in batch)
            cursor.execute(
                f"SELECT file_id, tag FROM tags WHERE file_id IN ({placeholders}) ORDER BY tag",
                batch
            )
            for row in cursor.fetchall():
                result[row["file_id"]].append(row["tag"])
        return result


class ShareRepository:
    @staticmethod
    def add_shares(file_id: str, emails: List[str], conn) -> None:
        cursor = conn.cursor()
        for email in emails:
            cursor.execute(
                "INSERT OR IGNORE INTO file_shares (file_id, email) VALUES (?, ?)",
                (file_id, email)
            )

    @staticmethod
    def get_shares_for_files(file_ids: List[str], conn) -> Dict[str, List[str]]:
        result: Dict[str, List[str]] = {file_id: [] for file_id in file_ids}
        cursor = conn.cursor()
        for batch in _batched(file_ids):
            placeholders = ','.join('?' for _ in batch)
            cursor.execute(
                f"SELECT file_id, email FROM file_shares WHERE file_id IN ({placeholders}) ORDER BY email",
                batch
            )
            for row in cursor.fetchall():
                result[row["file_id"]].append(row["email"])
        return result
