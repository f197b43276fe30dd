"""
Unit tests for session token issuance and verification.
"""

import json

import pytest
from jose import jwt
from jose.utils import base64url_decode, base64url_encode

from identity.models import SessionClaim
from identity.tokens import TokenService
from utilities.errors import (
    BadSignatureError, ExpiredTokenError, MalformedTokenError, SigningKeyError
)

TEST_SECRET = "test-signing-secret"
TEST_TTL = 7200


def _segment(data: dict) -> str:
    return base64url_encode(json.dumps(data).encode()).decode()


class TestTokenIssue:
    """Test cases for TokenService.issue."""

    def test_issue_embeds_claim(self, token_service, clock):
        token = token_service.issue("alice")
        claims = jwt.get_unverified_claims(token)

        assert claims["sub"] == "alice"
        assert claims["iat"] == int(clock.now)
        assert claims["exp"] == int(clock.now) + TEST_TTL

    def test_issue_then_verify(self, token_service, clock):
        claim = token_service.verify(token_service.issue("alice"))

        assert claim == SessionClaim(
            username="alice",
            issued_at=int(clock.now),
            expires_at=int(clock.now) + TEST_TTL
        )

    def test_empty_secret_rejected(self):
        with pytest.raises(SigningKeyError):
            TokenService(secret="")


class TestTokenExpiry:
    """A token issued at t with TTL T is valid strictly before t + T."""

    def test_valid_just_before_expiry(self, token_service, clock):
        token = token_service.issue("alice")
        clock.advance(TEST_TTL - 1)
        assert token_service.verify(token).username == "alice"

    def test_expired_at_expiry_instant(self, token_service, clock):
        token = token_service.issue("alice")
        clock.advance(TEST_TTL)
        with pytest.raises(ExpiredTokenError):
            token_service.verify(token)

    def test_expired_long_after(self, token_service, clock):
        token = token_service.issue("alice")
        clock.advance(TEST_TTL * 10)
        with pytest.raises(ExpiredTokenError):
            token_service.verify(token)


class TestTokenRejection:
    """Signature and structure failures."""

    def test_foreign_secret_is_bad_signature(self, token_service, clock):
        forged = TokenService(secret="someone-else", clock=clock).issue("alice")
        with pytest.raises(BadSignatureError):
            token_service.verify(forged)

    def test_tampered_payload_is_bad_signature(self, token_service, clock):
        """Swapping the payload keeps the structure valid but breaks the signature."""
        header, payload, signature = token_service.issue("alice").split(".")
        claims = json.loads(base64url_decode(payload.encode()))
        claims["sub"] = "mallory"
        tampered = ".".join([header, _segment(claims), signature])

        with pytest.raises(BadSignatureError):
            token_service.verify(tampered)

    def test_expired_forgery_reports_signature_first(self, token_service, clock):
        """A forged token is rejected for its signature before its expiry is read."""
        forged = TokenService(secret="someone-else", ttl_seconds=1, clock=clock).issue("alice")
        clock.advance(10)
        with pytest.raises(BadSignatureError):
            token_service.verify(forged)

    @pytest.mark.parametrize("token", [
        "",
        "not-a-token",
        "a.b.c",
        "only.two",
        None,
        12345,
    ])
    def test_garbage_is_malformed(self, token_service, token):
        with pytest.raises(MalformedTokenError):
            token_service.verify(token)

    def test_unsigned_token_is_malformed(self, token_service, clock):
        header = _segment({"alg": "none", "typ": "JWT"})
        payload = _segment({"sub": "alice", "iat": int(clock.now), "exp": int(clock.now) + 60})
        with pytest.raises(MalformedTokenError):
            token_service.verify(f"{header}.{payload}.")

    def test_other_algorithm_is_malformed(self, token_service, clock):
        token = jwt.encode(
            {"sub": "alice", "iat": int(clock.now), "exp": int(clock.now) + 60},
            TEST_SECRET,
            algorithm="HS512"
        )
        with pytest.raises(MalformedTokenError):
            token_service.verify(token)

    def test_signed_payload_without_claim_is_malformed(self, token_service):
        token = jwt.encode({"foo": "bar"}, TEST_SECRET, algorithm="HS256")
        with pytest.raises(MalformedTokenError):
            token_service.verify(token)
