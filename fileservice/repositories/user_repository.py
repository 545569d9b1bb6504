"""User repository for database operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from common.logging_config import get_logger
from fileservice.database import get_db_connection
from fileservice.utils import from_db_timestamp, to_db_timestamp

logger = get_logger(__name__)


@dataclass
class User:
    user_id: str
    email: str
    display_name: Optional[str]
    password_hash: str
    api_key: Optional[str]
    created_at: datetime
    key_updated_at: Optional[datetime]


def _row_to_user(row) -> User:
    return User(
        user_id=row["user_id"],
        email=row["email"],
        display_name=row["display_name"],
        password_hash=row["password_hash"],
        api_key=row["api_key"],
        created_at=from_db_timestamp(row["created_at"]),
        key_updated_at=from_db_timestamp(row["key_updated_at"]),
    )


class UserRepository:
    @staticmethod
    def create_user(
        user_id: str,
        email: str,
        display_name: Optional[str],
        password_hash: str,
        api_key: str,
        created_at: datetime,
    ) -> User:
        logger.debug(f"Creating user: {email} [user_id={user_id}]")

        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO users (user_id, email, display_name, password_hash, api_key,
                                      created_at, key_updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (user_id, email, display_name, password_hash, api_key,
                     to_db_timestamp(created_at), to_db_timestamp(created_at))
                )
                conn.commit()
                logger.info(f"User created successfully: {email} [user_id={user_id}]")
            except Exception as e:
                logger.error(f"Failed to create user {email}: {e}", exc_info=True)
                raise

        return User(
            user_id=user_id,
            email=email,
            display_name=display_name,
            password_hash=password_hash,
            api_key=api_key,
            created_at=created_at,
            key_updated_at=created_at,
        )

    @staticmethod
    def get_by_email(email: str) -> Optional[User]:
        logger.debug(f"Fetching user by email: {email}")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """SELECT user_id, email, display_name, password_hash, api_key, created_at, key_updated_at
                   FROM users WHERE email = ?""",
                (email,)
            )
            row = cursor.fetchone()

            if row is None:
                logger.debug(f"User not found: {email}")
                return None

            return _row_to_user(row)

    @staticmethod
    def get_by_api_key(api_key: str) -> Optional[User]:
        logger.debug("Fetching user by API key")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """SELECT user_id, email, display_name, password_hash, api_key, created_at, key_updated_at
                   FROM users WHERE api_key = ?""",
                (api_key,)
            )
            row = cursor.fetchone()
            return _row_to_user(row) if row else None

    @staticmethod
    def get_by_user_id(user_id: str) -> Optional[User]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """SELECT user_id, email, display_name, password_hash, api_key, created_at, key_updated_at
                   FROM users WHERE user_id = ?""",
                (user_id,)
            )
            row = cursor.fetchone()
            return _row_to_user(row) if row else None

    @staticmethod
    def update_api_key(user_id: str, new_api_key: str, updated_at: datetime) -> None:
        logger.debug(f"Rotating API key [user_id={user_id}]")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE users SET api_key = ?, key_updated_at = ? WHERE user_id = ?",
                (new_api_key, to_db_timestamp(updated_at), user_id)
            )
            conn.commit()
