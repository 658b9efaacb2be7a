"""
Unit tests for core.security module.
Tests password hashing, random token generation and Basic credential decoding.
"""
import base64

from app.core.security import (
    decode_basic_credentials,
    generate_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        """Password hashing should produce different hashes (salt included)."""
        password = "P4ssword"
        assert hash_password(password) != hash_password(password)

    def test_hash_password_produces_valid_hash(self):
        """Hashed password should be a non-empty string."""
        password = "P4ssword"
        hashed = hash_password(password)
        assert isinstance(hashed, str)
        assert len(hashed) > 0
        assert hashed != password  # Should not be plain text

    def test_verify_password_correct_password(self):
        hashed = hash_password("P4ssword")
        assert verify_password("P4ssword", hashed) is True

    def test_verify_password_incorrect_password(self):
        hashed = hash_password("P4ssword")
        assert verify_password("password", hashed) is False


class TestGenerateToken:
    """Tests for random token generation."""

    def test_session_token_length(self):
        token = generate_token(32)
        assert len(token) == 32
        int(token, 16)  # hexadecimal

    def test_odd_length(self):
        assert len(generate_token(15)) == 15

    def test_tokens_are_distinct(self):
        tokens = {generate_token(32) for _ in range(100)}
        assert len(tokens) == 100


class TestBasicCredentials:
    """Tests for decoding the Basic authorization payload."""

    def _encode(self, raw: str) -> str:
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    def test_decodes_email_and_password(self):
        assert decode_basic_credentials(self._encode("user1@mail.com:P4ssword")) == (
            "user1@mail.com",
            "P4ssword",
        )

    def test_password_may_contain_colon(self):
        assert decode_basic_credentials(self._encode("user1@mail.com:P4ss:word")) == (
            "user1@mail.com",
            "P4ss:word",
        )

    def test_missing_separator_is_rejected(self):
        assert decode_basic_credentials(self._encode("user1@mail.com")) is None

    def test_invalid_base64_is_rejected(self):
        assert decode_basic_credentials("not base64!!") is None
