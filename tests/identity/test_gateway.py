"""
Unit tests for the auth gateway.
"""

import pytest

from identity.gateway import AuthGateway
from identity.models import Identity
from identity.tokens import TokenService
from utilities.errors import AuthError, AuthFailure


@pytest.fixture
def gateway(token_service):
    return AuthGateway(token_service)


class TestAuthGateway:
    """Header parsing and token verification."""

    def test_valid_bearer_token(self, gateway, token_service):
        token = token_service.issue("alice")
        assert gateway.authenticate(f"Bearer {token}") == Identity(username="alice")

    def test_scheme_is_case_insensitive(self, gateway, token_service):
        token = token_service.issue("alice")
        assert gateway.authenticate(f"bearer {token}").username == "alice"

    @pytest.mark.parametrize("header", [None, ""])
    def test_missing_header(self, gateway, header):
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(header)
        assert exc_info.value.reason == AuthFailure.MISSING_HEADER
        assert exc_info.value.message == "Authorization header missing"

    @pytest.mark.parametrize("header", ["Bearer", "Bearer   ", "   ", "Basic dXNlcjpwYXNz"])
    def test_missing_token(self, gateway, header):
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(header)
        assert exc_info.value.reason == AuthFailure.MISSING_TOKEN

    def test_extra_segments_rejected(self, gateway, token_service):
        token = token_service.issue("alice")
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(f"Bearer {token} extra")
        assert exc_info.value.reason == AuthFailure.INVALID_TOKEN

    def test_token_defects_are_indistinguishable(self, gateway, token_service, clock):
        """Malformed, forged and expired tokens all produce the same error."""
        forged = TokenService(secret="someone-else", clock=clock).issue("alice")
        expired = token_service.issue("alice")
        clock.advance(token_service.ttl_seconds)

        errors = []
        for token in ["garbage", forged, expired]:
            with pytest.raises(AuthError) as exc_info:
                gateway.authenticate(f"Bearer {token}")
            errors.append((exc_info.value.reason, exc_info.value.message))

        assert errors == [(AuthFailure.INVALID_TOKEN, "Token invalid or expired")] * 3

    def test_token_error_not_chained(self, gateway):
        """The verifier's specific error is not attached to the AuthError."""
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate("Bearer garbage")
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True
