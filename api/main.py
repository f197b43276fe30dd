"""
FastAPI main application for the Bookshop Review API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable, List, Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.auth import get_current_identity, get_service
from api.config import config as api_config
from api.models import (
    BookDetailResponse, BookSummary, CredentialsRequest, ErrorResponse,
    HealthResponse, MessageResponse, ReviewListResponse,
    ReviewMutationResponse, ReviewRequest, TokenResponse
)
from api.services import BookshopService, build_service
from identity.models import Identity
from utilities.errors import (
    AuthError, AuthFailure, BookshopError, ConflictError,
    InternalError, NotFoundError, ValidationError
)

logger = structlog.get_logger(__name__)

router = APIRouter()


def _error_response(status_code: int, error: str, detail: Optional[str] = None,
                    headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail, status_code=status_code).dict(),
        headers=headers
    )


def status_for(exc: BookshopError) -> int:
    """HTTP status code for a bookshop error."""
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, AuthError):
        if exc.reason == AuthFailure.INVALID_TOKEN:
            return status.HTTP_403_FORBIDDEN
        return status.HTTP_401_UNAUTHORIZED
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# Exception handlers
async def bookshop_exception_handler(request: Request, exc: BookshopError):
    """Convert domain errors into error responses."""
    status_code = status_for(exc)
    if isinstance(exc, InternalError) or status_code >= 500:
        logger.error("Internal error", error=str(exc), path=request.url.path)
        return _error_response(status_code, InternalError.default_message)

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return _error_response(status_code, exc.message, headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON bodies and wrongly typed fields are client faults."""
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request body",
        detail=str(exc.errors()) if api_config.debug else None
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle routing-level HTTP exceptions."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error_response(exc.status_code, "Endpoint not found")
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        detail=str(exc) if api_config.debug else None
    )


# Health check endpoint
@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(service: BookshopService = Depends(get_service)):
    """Health check endpoint."""
    stats = await service.get_stats()
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=api_config.api_version,
        **stats
    )


# Books endpoints
@router.get("/books", response_model=List[BookSummary], tags=["Books"])
async def get_books(service: BookshopService = Depends(get_service)):
    """Get the list of books available in the shop."""
    return await service.list_books()


@router.get("/books/isbn/{isbn}", response_model=BookDetailResponse, tags=["Books"])
async def get_book_by_isbn(isbn: str, service: BookshopService = Depends(get_service)):
    """Get a single book, including its reviews, by ISBN."""
    return await service.get_book(isbn)


@router.get("/books/author/{author}", response_model=List[BookSummary], tags=["Books"])
async def get_books_by_author(author: str, service: BookshopService = Depends(get_service)):
    """Get all books by an author (case-insensitive exact match)."""
    return await service.books_by_author(author)


@router.get("/books/title/{title}", response_model=List[BookSummary], tags=["Books"])
async def get_books_by_title(title: str, service: BookshopService = Depends(get_service)):
    """Get all books whose title contains the given text (case-insensitive)."""
    return await service.books_by_title(title)


# Review endpoints
@router.get("/books/{isbn}/review", response_model=ReviewListResponse, tags=["Reviews"])
async def get_book_reviews(isbn: str, service: BookshopService = Depends(get_service)):
    """Get all reviews of a book."""
    return await service.get_reviews(isbn)


@router.api_route(
    "/books/{isbn}/review",
    methods=["POST", "PUT"],
    response_model=ReviewMutationResponse,
    tags=["Reviews"]
)
async def put_book_review(
    isbn: str,
    payload: Optional[ReviewRequest] = None,
    identity: Identity = Depends(get_current_identity),
    service: BookshopService = Depends(get_service)
):
    """
    Add or modify the authenticated user's review of a book.

    - **review**: Review text (required)
    """
    text = payload.review if payload else None
    return await service.upsert_review(identity, isbn, text)


@router.delete("/books/{isbn}/review", response_model=ReviewMutationResponse, tags=["Reviews"])
async def delete_book_review(
    isbn: str,
    identity: Identity = Depends(get_current_identity),
    service: BookshopService = Depends(get_service)
):
    """Delete the review the authenticated user added to a book."""
    return await service.delete_review(identity, isbn)


# Auth endpoints
@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Auth"]
)
async def register(
    payload: Optional[CredentialsRequest] = None,
    service: BookshopService = Depends(get_service)
):
    """Register a new user."""
    payload = payload or CredentialsRequest()
    await service.register(payload.username, payload.password)
    return MessageResponse(message="User registered")


@router.post("/login", response_model=TokenResponse, tags=["Auth"])
async def login(
    payload: Optional[CredentialsRequest] = None,
    service: BookshopService = Depends(get_service)
):
    """Log in as a registered user and receive a bearer token."""
    payload = payload or CredentialsRequest()
    token = await service.login(payload.username, payload.password)
    return TokenResponse(token=token)


def create_app(
    service: Optional[BookshopService] = None,
    service_factory: Callable[[], BookshopService] = build_service
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Ready-made service; when given, startup does not build one
        service_factory: Builds the service at startup otherwise
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Bookshop API")
        if getattr(app.state, "service", None) is None:
            try:
                app.state.service = service_factory()
            except Exception as e:
                logger.error("Failed to build bookshop service", error=str(e))
                raise
        yield
        logger.info("Shutting down Bookshop API")

    app = FastAPI(
        title=api_config.api_title,
        description=api_config.api_description,
        version=api_config.api_version,
        lifespan=lifespan
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=api_config.cors_allow_credentials,
        allow_methods=api_config.cors_allow_methods,
        allow_headers=api_config.cors_allow_headers,
    )

    app.add_exception_handler(BookshopError, bookshop_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=True,
        log_level="info"
    )
