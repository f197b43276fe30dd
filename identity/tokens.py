"""
Session token issuance and verification.

Tokens are HS256 JWTs carrying the username (``sub``), issue time (``iat``)
and expiry (``exp``). Verification parses the structure, then checks the
signature, and only then decodes and trusts the claim fields.
"""

import json
import time
from typing import Callable, Optional

import structlog
from jose import jws, jwt
from jose.exceptions import JWSError
from pydantic import ValidationError as PydanticValidationError

from utilities.errors import (
    BadSignatureError, ExpiredTokenError, MalformedTokenError, SigningKeyError
)
from .models import SessionClaim

logger = structlog.get_logger(__name__)


class TokenService:
    """Issues and verifies signed, time-bounded bearer tokens."""

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 7200,
        algorithm: str = "HS256",
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize the token service.

        Args:
            secret: Process-wide HMAC signing key
            ttl_seconds: Lifetime of every issued token
            algorithm: JWS algorithm used to sign and accepted on verify
            clock: Returns the current UNIX time; defaults to time.time

        Raises:
            SigningKeyError: If the secret is empty
        """
        if not secret:
            logger.error("Token signing key is not configured")
            raise SigningKeyError()
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm
        self._clock = clock or time.time

    def issue(self, username: str) -> str:
        """
        Issue a token for username, valid for ttl_seconds from now.

        Returns:
            Compact JWS string
        """
        issued_at = int(self._clock())
        claim = SessionClaim(
            username=username,
            issued_at=issued_at,
            expires_at=issued_at + self.ttl_seconds
        )
        try:
            return jwt.encode(
                {"sub": claim.username, "iat": claim.issued_at, "exp": claim.expires_at},
                self._secret,
                algorithm=self.algorithm
            )
        except JWSError as e:
            logger.error("Token signing failed", error=str(e))
            raise SigningKeyError("Token signing failed") from e

    def verify(self, token: str) -> SessionClaim:
        """
        Verify a token and return its claim.

        Raises:
            MalformedTokenError: Unparsable structure, unexpected algorithm
                or a payload that is not a valid claim
            BadSignatureError: Signature does not match the secret
            ExpiredTokenError: Current time is at or past the expiry
        """
        if not isinstance(token, str) or not token:
            raise MalformedTokenError()

        try:
            header = jws.get_unverified_header(token)
        except JWSError as e:
            raise MalformedTokenError() from e
        if header.get("alg") != self.algorithm:
            raise MalformedTokenError()

        try:
            payload = jws.verify(token, self._secret, algorithms=[self.algorithm])
        except JWSError as e:
            raise BadSignatureError() from e

        claim = self._decode_claim(payload)
        if claim.is_expired(self._clock()):
            raise ExpiredTokenError()
        return claim

    @staticmethod
    def _decode_claim(payload: bytes) -> SessionClaim:
        """Build a SessionClaim from an already verified payload."""
        try:
            data = json.loads(payload)
            return SessionClaim(
                username=data["sub"],
                issued_at=data["iat"],
                expires_at=data["exp"]
            )
        except (ValueError, TypeError, KeyError, PydanticValidationError) as e:
            raise MalformedTokenError() from e
