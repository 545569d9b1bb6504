"""Authentication service for business logic."""

import sqlite3
from typing import Optional, Tuple

from common.logging_config import get_logger
from fileservice.auth import generate_api_key, hash_password, verify_password
from fileservice.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from fileservice.repositories.user_repository import UserRepository
from fileservice.types import Caller
from fileservice.utils import generate_uuid, normalize_email, utcnow

logger = get_logger(__name__)


class AuthService:
    def __init__(self):
        self.user_repo = UserRepository()

    def register_user(self, email: str, password: str, display_name: Optional[str] = None) -> Tuple[str, str]:
        """
        Returns:
            Tuple of (api_key, user_id)
        """
        email = normalize_email(email)
        logger.info(f"Attempting to register user: {email}")
        if self.user_repo.get_by_email(email) is not None:
            logger.warning(f"Registration failed: email '{email}' already exists")
            raise UserAlreadyExistsError(f"Email '{email}' already registered")

        user_id = generate_uuid()
        api_key = generate_api_key()

        try:
            self.user_repo.create_user(
                user_id=user_id,
                email=email,
                display_name=display_name or email.split("@")[0],
                password_hash=hash_password(password),
                api_key=api_key,
                created_at=utcnow(),
            )
        except sqlite3.IntegrityError:
            logger.warning(f"Registration failed due to integrity error: email '{email}'")
            raise UserAlreadyExistsError(f"Email '{email}' already registered")

        logger.info(f"Successfully registered user: {email} [user_id={user_id}]")
        return api_key, user_id

    def login_user(self, email: str, password: str) -> str:
        email = normalize_email(email)
        logger.info(f"Login attempt for user: {email}")
        user = self.user_repo.get_by_email(email)
        if user is None:
            logger.warning(f"Login failed: email '{email}' not found")
            raise InvalidCredentialsError("Invalid email or password")

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: invalid password for '{email}'")
            raise InvalidCredentialsError("Invalid email or password")

        new_api_key = generate_api_key()
        self.user_repo.update_api_key(user.user_id, new_api_key, utcnow())
        logger.info(f"Successfully logged in user: {email} [user_id={user.user_id}]")
        return new_api_key

    def resolve_caller(self, api_key: str) -> Optional[Caller]:
        user = self.user_repo.get_by_api_key(api_key)
        if user is None:
            logger.warning("API key validation failed: invalid key")
            return None
        logger.debug(f"API key validated for user_id={user.user_id}")
        return Caller(user_id=user.user_id, email=user.email)
