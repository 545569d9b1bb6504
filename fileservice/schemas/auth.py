"""Pydantic schemas for email/password accounts and API key issuance."""

from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """
    New account. The email is the account identity and the address other
    users share files with; it is stored lower-cased.
    """
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    display_name: Optional[str] = None


class RegisterResponse(BaseModel):
    """First API key of the account and its user id."""
    api_key: str
    user_id: str


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    """Freshly issued API key; earlier keys of the account stop working."""
    api_key: str
