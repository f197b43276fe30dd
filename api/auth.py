"""
Authentication dependencies for the FastAPI API.
"""

from typing import Optional

from fastapi import Header, Request

from api.services import BookshopService
from identity.models import Identity


def get_service(request: Request) -> BookshopService:
    """Return the service created at application startup."""
    return request.app.state.service


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None)
) -> Identity:
    """
    Authenticate the request from its Authorization header.

    The returned identity is the only source of the acting username for
    review mutations; request bodies never name the reviewer.

    Raises:
        AuthError: Missing header, missing token or invalid token
    """
    service = get_service(request)
    return service.gateway.authenticate(authorization)
