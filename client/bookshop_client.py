"""
Async HTTP client for the Bookshop Review API.
Covers catalog searches, registration, login and review management.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog

from api.config import config as api_config

logger = structlog.get_logger(__name__)


class BookshopClient:
    """
    Thin async wrapper around the bookshop endpoints.

    Non-2xx responses raise httpx.HTTPStatusError. After login() the
    token is sent on every review change.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, defaults to the configured client_base_url
            http_client: Pre-built httpx client (its base_url is used as is)
            timeout: Request timeout in seconds
        """
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(
            base_url=base_url or api_config.client_base_url,
            timeout=timeout or api_config.client_timeout
        )
        self.token: Optional[str] = None

    async def __aenter__(self) -> "BookshopClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def _request(self, method: str, path: str, authenticated: bool = False, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if authenticated and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = await self.client.request(method, path, headers=headers, **kwargs)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError:
            logger.warning("Request failed", method=method, path=path, status_code=response.status_code)
            raise
        return response.json()

    # Catalog

    async def get_all_books(self) -> List[Dict[str, str]]:
        return await self._request("GET", "/books")

    async def search_by_isbn(self, isbn: str) -> Dict[str, Any]:
        return await self._request("GET", f"/books/isbn/{quote(isbn, safe='')}")

    async def search_by_author(self, author: str) -> List[Dict[str, str]]:
        return await self._request("GET", f"/books/author/{quote(author, safe='')}")

    async def search_by_title(self, title: str) -> List[Dict[str, str]]:
        return await self._request("GET", f"/books/title/{quote(title, safe='')}")

    async def get_reviews(self, isbn: str) -> Dict[str, Any]:
        return await self._request("GET", f"/books/{quote(isbn, safe='')}/review")

    # Identity

    async def register(self, username: str, password: str) -> Dict[str, str]:
        return await self._request("POST", "/register", json={"username": username, "password": password})

    async def login(self, username: str, password: str) -> str:
        """Log in and keep the returned token for later review changes."""
        data = await self._request("POST", "/login", json={"username": username, "password": password})
        self.token = data["token"]
        return self.token

    # Reviews

    async def add_review(self, isbn: str, review: str) -> Dict[str, str]:
        return await self._request(
            "POST", f"/books/{quote(isbn, safe='')}/review", authenticated=True, json={"review": review}
        )

    async def delete_review(self, isbn: str) -> Dict[str, str]:
        return await self._request("DELETE", f"/books/{quote(isbn, safe='')}/review", authenticated=True)
