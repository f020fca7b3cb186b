"""Unit tests for the JWT service."""

from datetime import datetime, timedelta, timezone
from unittest import mock

import jwt
import pytest

from cinevault.infrastructure.auth import (
    InvalidSignatureError,
    JWTError,
    JWTService,
    MalformedTokenError,
    TokenExpiredError,
    TokenKind,
    WrongTokenTypeError,
)
from tests.support import ACCESS_SECRET, REFRESH_SECRET, FakeClock


class TestIssue:
    """Tests for token creation."""

    def test_access_token_claims(self, jwt_service, clock):
        token = jwt_service.issue(42, TokenKind.ACCESS)

        decoded = jwt.decode(
            token, ACCESS_SECRET, algorithms=["HS256"], options={"verify_exp": False}
        )
        issued_at = int(clock().timestamp())
        assert decoded == {
            "user_id": 42,
            "type": "access",
            "iat": issued_at,
            "exp": issued_at + 15 * 60,
        }

    def test_refresh_token_uses_refresh_secret_and_lifetime(self, jwt_service, clock):
        token = jwt_service.issue(42, TokenKind.REFRESH)

        decoded = jwt.decode(
            token, REFRESH_SECRET, algorithms=["HS256"], options={"verify_exp": False}
        )
        assert decoded["type"] == "refresh"
        assert decoded["exp"] - decoded["iat"] == 7 * 24 * 60 * 60

    def test_custom_ttl(self, jwt_service):
        token = jwt_service.issue(1, TokenKind.ACCESS, ttl=timedelta(seconds=30))
        decoded = jwt.decode(
            token, ACCESS_SECRET, algorithms=["HS256"], options={"verify_exp": False}
        )
        assert decoded["exp"] - decoded["iat"] == 30

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            JWTService(access_secret="", refresh_secret=REFRESH_SECRET)

    def test_issue_pair(self, jwt_service):
        pair = jwt_service.issue_pair(7)

        assert jwt_service.validate_access_token(pair.access_token) == 7
        assert jwt_service.validate_refresh_token(pair.refresh_token) == 7
        assert pair.expires_in == 15 * 60

    def test_issue_pair_is_all_or_nothing(self, jwt_service):
        """Test that a signing failure on the second token yields no pair."""
        real_encode = jwt.encode
        calls = []

        def failing_encode(payload, key, algorithm):
            calls.append(payload["type"])
            if payload["type"] == "refresh":
                raise RuntimeError("signing failed")
            return real_encode(payload, key, algorithm=algorithm)

        with mock.patch("cinevault.infrastructure.auth.jwt_service.jwt.encode", side_effect=failing_encode):
            with pytest.raises(RuntimeError):
                jwt_service.issue_pair(7)

        assert calls == ["access", "refresh"]


class TestValidate:
    """Tests for token validation."""

    def test_valid_access_token_before_expiry(self, jwt_service, clock):
        token = jwt_service.issue(42, TokenKind.ACCESS)
        clock.advance(minutes=14, seconds=59)

        assert jwt_service.validate(token, TokenKind.ACCESS) == 42

    def test_access_token_expires_at_ttl(self, jwt_service, clock):
        token = jwt_service.issue(42, TokenKind.ACCESS)
        clock.advance(minutes=15)

        with pytest.raises(TokenExpiredError):
            jwt_service.validate(token, TokenKind.ACCESS)

    def test_refresh_token_outlives_access_token(self, jwt_service, clock):
        pair = jwt_service.issue_pair(42)
        clock.advance(days=6)

        with pytest.raises(TokenExpiredError):
            jwt_service.validate_access_token(pair.access_token)
        assert jwt_service.validate_refresh_token(pair.refresh_token) == 42

        clock.advance(days=1)
        with pytest.raises(TokenExpiredError):
            jwt_service.validate_refresh_token(pair.refresh_token)

    def test_access_token_rejected_as_refresh(self, jwt_service):
        token = jwt_service.issue(42, TokenKind.ACCESS)
        with pytest.raises(JWTError):
            jwt_service.validate(token, TokenKind.REFRESH)

    def test_refresh_token_rejected_as_access(self, jwt_service):
        token = jwt_service.issue(42, TokenKind.REFRESH)
        with pytest.raises(JWTError):
            jwt_service.validate(token, TokenKind.ACCESS)

    def test_shared_secret_still_separates_kinds(self):
        """Test that with one secret for both kinds the type claim is what rejects."""
        service = JWTService(access_secret=ACCESS_SECRET, refresh_secret=ACCESS_SECRET)
        token = service.issue(42, TokenKind.REFRESH)

        with pytest.raises(WrongTokenTypeError):
            service.validate(token, TokenKind.ACCESS)

    def test_tampered_signature(self, jwt_service):
        token = jwt_service.issue(42, TokenKind.ACCESS)
        header, payload, signature = token.split(".")
        # Still valid base64url, so decoding succeeds and only the HMAC check fails.
        swapped = "A" if signature[0] != "A" else "B"
        tampered = f"{header}.{payload}.{swapped}{signature[1:]}"

        with pytest.raises(InvalidSignatureError):
            jwt_service.validate(tampered, TokenKind.ACCESS)

    def test_foreign_secret(self, jwt_service, clock):
        now = int(clock().timestamp())
        token = jwt.encode(
            {"user_id": 42, "type": "access", "iat": now, "exp": now + 60},
            "some-other-secret-of-sufficient-length",
            algorithm="HS256",
        )
        with pytest.raises(InvalidSignatureError):
            jwt_service.validate(token, TokenKind.ACCESS)

    def test_alg_none_rejected(self, jwt_service, clock):
        now = int(clock().timestamp())
        token = jwt.encode(
            {"user_id": 42, "type": "access", "iat": now, "exp": now + 60},
            None,
            algorithm="none",
        )
        with pytest.raises(JWTError):
            jwt_service.validate(token, TokenKind.ACCESS)

    def test_other_hmac_algorithm_rejected(self, jwt_service, clock):
        now = int(clock().timestamp())
        token = jwt.encode(
            {"user_id": 42, "type": "access", "iat": now, "exp": now + 60},
            ACCESS_SECRET,
            algorithm="HS512",
        )
        with pytest.raises(InvalidSignatureError):
            jwt_service.validate(token, TokenKind.ACCESS)

    @pytest.mark.parametrize("token", ["", "not.a.token", "garbage"])
    def test_malformed_tokens(self, jwt_service, token):
        with pytest.raises(MalformedTokenError):
            jwt_service.validate(token, TokenKind.ACCESS)

    def test_missing_claim(self, jwt_service, clock):
        now = int(clock().timestamp())
        token = jwt.encode({"user_id": 42, "iat": now, "exp": now + 60}, ACCESS_SECRET, algorithm="HS256")

        with pytest.raises(MalformedTokenError):
            jwt_service.validate(token, TokenKind.ACCESS)

    def test_non_integer_user_id(self, jwt_service, clock):
        now = int(clock().timestamp())
        token = jwt.encode(
            {"user_id": "42", "type": "access", "iat": now, "exp": now + 60},
            ACCESS_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(MalformedTokenError):
            jwt_service.validate(token, TokenKind.ACCESS)

    def test_clock_is_injected(self):
        """Test that expiry uses the service clock, not the wall clock."""
        past = FakeClock(datetime(2001, 1, 1, tzinfo=timezone.utc))
        service = JWTService(ACCESS_SECRET, REFRESH_SECRET, clock=past)
        token = service.issue(1, TokenKind.ACCESS)

        assert service.validate(token, TokenKind.ACCESS) == 1
