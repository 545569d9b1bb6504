"""Authentication and security utilities."""

import uuid
from typing import Optional

import bcrypt
from fastapi import Header

from common.constants import API_KEY_PREFIX
from fileservice.exceptions import InvalidAPIKeyError
from fileservice.types import Caller


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Bcrypt hash of the password
    """
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))


def generate_api_key() -> str:
    """
    Returns:
        API Key string in format: {prefix}{uuid4 hex}
    """
    return f"{API_KEY_PREFIX}{uuid.uuid4().hex}"


def extract_api_key(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise InvalidAPIKeyError("Missing or malformed authorization header")

    api_key = authorization[len("Bearer "):].strip()
    if not api_key.startswith(API_KEY_PREFIX):
        raise InvalidAPIKeyError("Invalid API key")
    return api_key


async def get_current_user(authorization: Optional[str] = Header(None)) -> Caller:
    """
    FastAPI dependency resolving the caller from a bearer API Key.

    Args:
        authorization: Authorization header value (format: "Bearer <api_key>")

    Returns:
        Caller with user_id and email of the authenticated user

    Raises:
        InvalidAPIKeyError: If the header is missing, malformed or the key is unknown
    """
    from fileservice.services.auth_service import AuthService

    api_key = extract_api_key(authorization)
    caller = AuthService().resolve_caller(api_key)
    if caller is None:
        raise InvalidAPIKeyError("Invalid API key")
    return caller
