"""Account registration and API key issuance routes."""

from fastapi import APIRouter, status

from fileservice.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from fileservice.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """
    Create an account keyed by email and issue its first API key.

    The email is compared case-insensitively, so "Bob@Example.com" and
    "bob@example.com" name the same account and the same share recipient.

    Returns:
        - api_key: 'sbx_' API key to send as "Authorization: Bearer <api_key>"
        - user_id: UUID that owns the account's uploads

    Raises:
        - 400: Email already registered (USER_ALREADY_EXISTS)
        - 422: Missing email or password
    """
    api_key, user_id = AuthService().register_user(request.email, request.password, request.display_name)
    return RegisterResponse(api_key=api_key, user_id=user_id)


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """
    Exchange email and password for a new API key.

    Each login rotates the key: the previous key is rejected from now on.

    Raises:
        - 401: Unknown email or wrong password (INVALID_CREDENTIALS)
    """
    api_key = AuthService().login_user(request.email, request.password)
    return LoginResponse(api_key=api_key)
