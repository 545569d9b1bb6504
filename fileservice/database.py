"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from fileservice.config import DATABASE_PATH


def init_database() -> None:
    """
    Initialize database and create tables if they don't exist.
    """
    db_path = Path(DATABASE_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection() as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                user_id TEXT PRIMARY KEY,
                email TEXT UNIQUE NOT NULL,
                display_name TEXT,
                password_hash TEXT NOT NULL,
                api_key TEXT UNIQUE,
                created_at TEXT NOT NULL,
                key_updated_at TEXT
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS files (
                file_id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                owner_email TEXT NOT NULL,
                file_name TEXT NOT NULL,
                original_file_name TEXT NOT NULL,
                content_type TEXT NOT NULL,
                file_size INTEGER NOT NULL,
                blob_name TEXT NOT NULL,
                container_name TEXT NOT NULL,
                is_public INTEGER NOT NULL DEFAULT 0,
                is_shared INTEGER NOT NULL DEFAULT 0,
                description TEXT,
                download_count INTEGER NOT NULL DEFAULT 0,
                view_count INTEGER NOT NULL DEFAULT 0,
                last_accessed_date TEXT,
                created_date TEXT NOT NULL,
                updated_date TEXT NOT NULL,
                expiration_date TEXT,
                checksum TEXT,
                is_archived INTEGER NOT NULL DEFAULT 0,
                ai_summary TEXT,
                ai_keywords TEXT NOT NULL DEFAULT '[]',
                popularity_score REAL NOT NULL DEFAULT 0
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS tags (
                file_id TEXT NOT NULL,
                tag TEXT NOT NULL,
                PRIMARY KEY(file_id, tag),
                FOREIGN KEY(file_id) REFERENCES files(file_id) ON DELETE CASCADE
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS file_shares (
                file_id TEXT NOT NULL,
                email TEXT NOT NULL,
                PRIMARY KEY(file_id, email),
                FOREIGN KEY(file_id) REFERENCES files(file_id) ON DELETE CASCADE
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_files_owner ON files(owner_id, is_archived)
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_files_public_score ON files(is_public, is_archived, popularity_score)
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_tags_tag ON tags(tag)
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_shares_email ON file_shares(email)
        """)

        conn.commit()


def unicode_lower(value):
    """
    Unicode-aware LOWER() for SQL text matching; SQLite's built-in only
    folds ASCII letters.
    """
    if value is None:
        return None
    return str(value).lower()


@contextmanager
def get_db_connection() -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.
    """
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.create_function("py_lower", 1, unicode_lower, deterministic=True)
    try:
        yield conn
    finally:
        conn.close()
