"""
Unit Tests for Security Module
Tests for: password hashing, JWT access tokens
"""
import pytest
from datetime import datetime, timedelta, timezone
from jose import jwt

from app.core.config import settings
from app.core.exceptions import InvalidTokenError, TokenExpiredError
from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_token,
)


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        """Test that hashing returns a different value than input"""
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Test that hashing same password returns different hashes"""
        password = "testpassword123"

        # Bcrypt generates different salts
        assert get_password_hash(password) != get_password_hash(password)

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("wrongpassword", hashed) is False

    def test_hash_long_password_truncated(self):
        """Passwords beyond bcrypt's 72 byte limit verify on their first 72 bytes"""
        long_password = "a" * 100
        hashed = get_password_hash(long_password)

        assert verify_password(long_password, hashed) is True
        assert verify_password("a" * 72, hashed) is True

    def test_verify_against_non_bcrypt_value(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestAccessTokens:
    """Test JWT creation and decoding"""

    def test_token_carries_subject_role_and_type(self):
        token = create_access_token({"sub": "user-id", "role": "admin"})

        payload = decode_token(token)

        assert payload["sub"] == "user-id"
        assert payload["role"] == "admin"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_default_expiry_uses_configured_minutes(self):
        token = create_access_token({"sub": "user-id"})
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        expected = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        assert abs(payload["exp"] - expected.timestamp()) < 60

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-id"}, expires_delta=timedelta(seconds=-10))

        with pytest.raises(TokenExpiredError):
            decode_token(token)

    def test_wrong_signature_rejected(self):
        token = jwt.encode(
            {"sub": "user-id", "type": "access"},
            "another-secret-key-that-is-long-enough-000",
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(InvalidTokenError):
            decode_token(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(InvalidTokenError):
            decode_token("not.a.token")

    def test_non_access_token_rejected(self):
        token = jwt.encode(
            {"sub": "user-id", "type": "refresh"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(InvalidTokenError):
            decode_token(token)

    def test_token_without_subject_rejected(self):
        token = create_access_token({"role": "user"})

        with pytest.raises(InvalidTokenError):
            decode_token(token)

    def test_auth_errors_map_to_401(self):
        assert TokenExpiredError().status_code == 401
        assert InvalidTokenError().status_code == 401
