"""
Auth gateway: turns a raw Authorization header into an Identity.
"""

from typing import Optional

from utilities.errors import AuthError, AuthFailure, TokenError
from utilities.logger import AuthEventLogger
from .models import Identity
from .tokens import TokenService

BEARER_SCHEME = "bearer"


class AuthGateway:
    """
    Authenticates requests carrying a bearer token.

    Each call is independent: no header, header without a bearer token,
    or a token that fails verification each end in an AuthError. The
    caller is only told that the token is invalid, never why.
    """

    def __init__(self, token_service: TokenService, audit: Optional[AuthEventLogger] = None):
        self.token_service = token_service
        self.audit = audit or AuthEventLogger("auth_gateway")

    def authenticate(self, authorization: Optional[str]) -> Identity:
        """
        Authenticate a request from its Authorization header.

        Args:
            authorization: Raw header value, None when the header is absent

        Returns:
            Identity of the token's subject

        Raises:
            AuthError: MISSING_HEADER, MISSING_TOKEN or INVALID_TOKEN
        """
        if not authorization:
            self.audit.log_token_rejected(AuthFailure.MISSING_HEADER.value)
            raise AuthError(AuthFailure.MISSING_HEADER)

        token = self._extract_token(authorization)

        try:
            claim = self.token_service.verify(token)
        except TokenError as e:
            self.audit.log_token_rejected(AuthFailure.INVALID_TOKEN.value, defect=e.defect)
            raise AuthError(AuthFailure.INVALID_TOKEN) from None

        return Identity(username=claim.username)

    def _extract_token(self, authorization: str) -> str:
        parts = authorization.split()
        if len(parts) < 2 or parts[0].lower() != BEARER_SCHEME:
            self.audit.log_token_rejected(AuthFailure.MISSING_TOKEN.value)
            raise AuthError(AuthFailure.MISSING_TOKEN)
        if len(parts) > 2:
            self.audit.log_token_rejected(AuthFailure.INVALID_TOKEN.value, defect="extra_segments")
            raise AuthError(AuthFailure.INVALID_TOKEN)
        return parts[1]
