"""
Service layer for the FastAPI application.
Composes the catalog, credential store, password hasher and token service.
"""

import secrets
from typing import Callable, Dict, List, Optional

import structlog
from fastapi.concurrency import run_in_threadpool

from api.models import (
    BookDetailResponse, BookSummary, ReviewEntry,
    ReviewListResponse, ReviewMutationResponse
)
from catalog.models import Book
from catalog.repository import BookCatalog
from identity.credentials import CredentialStore
from identity.gateway import AuthGateway
from identity.models import Identity, User
from identity.passwords import MAX_PASSWORD_BYTES, PasswordHasher
from identity.tokens import TokenService
from utilities.config import BookshopConfig, config
from utilities.errors import (
    InvalidCredentialsError, ReviewNotFoundError, UsernameTakenError, ValidationError
)
from utilities.logger import AuthEventLogger

logger = structlog.get_logger(__name__)


class BookshopService:
    """Catalog browsing, registration, login and review ownership."""

    def __init__(
        self,
        catalog: BookCatalog,
        credentials: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        audit: Optional[AuthEventLogger] = None
    ):
        self.catalog = catalog
        self.credentials = credentials
        self.hasher = hasher
        self.tokens = tokens
        self.audit = audit or AuthEventLogger("bookshop_service")
        self.gateway = AuthGateway(tokens, self.audit)
        # Verified against for unknown users so both login failures cost the same
        self._dummy_digest = hasher.hash(secrets.token_urlsafe(16))

    # Catalog

    async def list_books(self) -> List[BookSummary]:
        """Get every book in the catalog, without reviews."""
        return [self._summary(b) for b in self.catalog.list_books()]

    async def get_book(self, isbn: str) -> BookDetailResponse:
        """
        Get a book with its reviews.

        Raises:
            BookNotFoundError: If the ISBN is unknown
        """
        book, ledger = self.catalog.entry(isbn)
        reviews = ledger.as_dict()
        return BookDetailResponse(isbn=book.isbn, title=book.title, author=book.author, reviews=reviews)

    async def books_by_author(self, author: str) -> List[BookSummary]:
        return [self._summary(b) for b in self.catalog.find_by_author(author)]

    async def books_by_title(self, title: str) -> List[BookSummary]:
        return [self._summary(b) for b in self.catalog.find_by_title(title)]

    async def get_reviews(self, isbn: str) -> ReviewListResponse:
        """
        Get all reviews of a book.

        Raises:
            BookNotFoundError: If the ISBN is unknown
        """
        book, ledger = self.catalog.entry(isbn)
        reviews = [
            ReviewEntry(username=r.username, review=r.review)
            for r in ledger.list()
        ]
        return ReviewListResponse(isbn=book.isbn, title=book.title, reviews=reviews)

    # Identity

    async def register(self, username: Optional[str], password: Optional[str]) -> User:
        """
        Register a new user.

        The password is hashed in a worker thread before the credential
        store is touched, so the store lock never waits on bcrypt.

        Raises:
            ValidationError: Missing field or password longer than bcrypt accepts
            UsernameTakenError: If the username is already registered
        """
        self._require_credentials(username, password)
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")

        password_hash = await run_in_threadpool(self.hasher.hash, password)
        try:
            user = self.credentials.register(username, password_hash)
        except UsernameTakenError:
            self.audit.log_registration(username, success=False, reason="username_taken")
            raise

        self.audit.log_registration(username, success=True)
        return user

    async def login(self, username: Optional[str], password: Optional[str]) -> str:
        """
        Check credentials and issue a session token.

        Raises:
            ValidationError: Missing field
            InvalidCredentialsError: Unknown user or wrong password
        """
        self._require_credentials(username, password)

        user = self.credentials.lookup(username)
        digest = user.password_hash if user is not None else self._dummy_digest
        matches = await run_in_threadpool(self.hasher.verify, password, digest)

        if user is None or not matches:
            self.audit.log_login(username, success=False)
            raise InvalidCredentialsError()

        self.audit.log_login(username, success=True)
        return self.tokens.issue(username)

    # Reviews

    async def upsert_review(self, identity: Identity, isbn: str, text: Optional[str]) -> ReviewMutationResponse:
        """
        Add or replace the acting user's review of a book.

        Raises:
            ValidationError: Empty review text
            BookNotFoundError: If the ISBN is unknown
        """
        if not text:
            raise ValidationError("review text required")

        book, ledger = self.catalog.entry(isbn)
        ledger.upsert(identity.username, text)
        self.audit.log_review_change("upsert", isbn, identity.username)
        return ReviewMutationResponse(
            message="Review added/updated", isbn=book.isbn, reviewer=identity.username
        )

    async def delete_review(self, identity: Identity, isbn: str) -> ReviewMutationResponse:
        """
        Delete the acting user's review of a book.

        Raises:
            BookNotFoundError: If the ISBN is unknown
            ReviewNotFoundError: If the user has no review on the book
        """
        book, ledger = self.catalog.entry(isbn)
        try:
            ledger.remove(identity.username)
        except ReviewNotFoundError:
            self.audit.log_review_change("remove", isbn, identity.username, success=False)
            raise

        self.audit.log_review_change("remove", isbn, identity.username)
        return ReviewMutationResponse(
            message="Review deleted", isbn=book.isbn, reviewer=identity.username
        )

    async def get_stats(self) -> Dict[str, int]:
        """Get catalog and user counts."""
        return {
            "books": len(self.catalog),
            "users": len(self.credentials),
            "reviews": self.catalog.review_count(),
        }

    @staticmethod
    def _require_credentials(username: Optional[str], password: Optional[str]) -> None:
        if not username or not password:
            raise ValidationError("username and password required")

    @staticmethod
    def _summary(book: Book) -> BookSummary:
        return BookSummary(isbn=book.isbn, title=book.title, author=book.author)


def build_service(
    settings: BookshopConfig = config,
    clock: Optional[Callable[[], float]] = None
) -> BookshopService:
    """
    Wire a BookshopService from configuration.

    Seeds the demo catalog and, when enabled, the sample user.
    """
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    tokens = TokenService(
        secret=settings.jwt_secret,
        ttl_seconds=settings.token_ttl_seconds,
        algorithm=settings.jwt_algorithm,
        clock=clock
    )
    credentials = CredentialStore()

    if settings.seed_sample_user:
        credentials.register(settings.sample_username, hasher.hash(settings.sample_password))
        logger.info("Sample user created", username=settings.sample_username)

    return BookshopService(
        catalog=BookCatalog.with_default_books(),
        credentials=credentials,
        hasher=hasher,
        tokens=tokens
    )
