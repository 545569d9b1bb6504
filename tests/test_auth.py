"""Tests for authentication helpers and the auth service."""

import pytest

from fileservice.auth import extract_api_key, generate_api_key, hash_password, verify_password
from fileservice.exceptions import InvalidAPIKeyError, InvalidCredentialsError, UserAlreadyExistsError
from fileservice.services.auth_service import AuthService


class TestPasswordHashing:
    def test_hash_and_verify(self):
        password_hash = hash_password("s3cret")
        assert password_hash != "s3cret"
        assert verify_password("s3cret", password_hash)
        assert not verify_password("wrong", password_hash)


class TestApiKeys:
    def test_generated_keys_have_prefix_and_differ(self):
        first, second = generate_api_key(), generate_api_key()
        assert first.startswith("sbx_")
        assert first != second

    def test_extract_from_bearer_header(self):
        assert extract_api_key("Bearer sbx_abc") == "sbx_abc"

    @pytest.mark.parametrize("header", [None, "", "sbx_abc", "Basic sbx_abc", "Bearer other_abc"])
    def test_malformed_headers(self, header):
        with pytest.raises(InvalidAPIKeyError):
            extract_api_key(header)


class TestAuthService:
    def test_register_then_resolve(self, test_db):
        service = AuthService()
        api_key, user_id = service.register_user(" Alice@Example.com ", "pw", "Alice")

        caller = service.resolve_caller(api_key)
        assert caller.user_id == user_id
        assert caller.email == "alice@example.com"

    def test_duplicate_email_is_rejected_case_insensitively(self, test_db):
        service = AuthService()
        service.register_user("alice@example.com", "pw")
        with pytest.raises(UserAlreadyExistsError):
            service.register_user("ALICE@example.com", "other")

    def test_login_rotates_key(self, test_db):
        service = AuthService()
        old_key, _ = service.register_user("alice@example.com", "pw")

        new_key = service.login_user("alice@example.com", "pw")
        assert new_key != old_key
        assert service.resolve_caller(old_key) is None
        assert service.resolve_caller(new_key) is not None

    def test_login_with_bad_credentials(self, test_db):
        service = AuthService()
        service.register_user("alice@example.com", "pw")
        with pytest.raises(InvalidCredentialsError):
            service.login_user("alice@example.com", "nope")
        with pytest.raises(InvalidCredentialsError):
            service.login_user("bob@example.com", "pw")
