"""
Tests for the bookshop service layer.
"""

import pytest

from api.services import build_service
from identity.models import Identity
from utilities.config import BookshopConfig
from utilities.errors import (
    AuthFailure, BookNotFoundError, InvalidCredentialsError,
    ReviewNotFoundError, UsernameTakenError, ValidationError
)

ISBN = "9780143127741"


class TestRegistrationAndLogin:
    """Registration and credential checks."""

    @pytest.mark.asyncio
    async def test_register_then_login(self, service):
        user = await service.register("alice", "password123")

        assert user.username == "alice"
        assert user.password_hash != "password123"
        assert service.hasher.verify("password123", user.password_hash)

        token = await service.login("alice", "password123")
        assert service.tokens.verify(token).username == "alice"

    @pytest.mark.asyncio
    async def test_duplicate_registration(self, service):
        await service.register("alice", "password123")
        with pytest.raises(UsernameTakenError):
            await service.register("alice", "different-password")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username,password", [
        (None, "password123"),
        ("alice", None),
        ("", "password123"),
        ("alice", ""),
    ])
    async def test_register_requires_both_fields(self, service, username, password):
        with pytest.raises(ValidationError) as exc_info:
            await service.register(username, password)
        assert exc_info.value.message == "username and password required"

    @pytest.mark.asyncio
    async def test_register_rejects_overlong_password(self, service):
        with pytest.raises(ValidationError):
            await service.register("alice", "x" * 73)
        assert service.credentials.lookup("alice") is None

    @pytest.mark.asyncio
    async def test_login_failures_look_identical(self, service):
        """Wrong password and unknown user fail with the same error."""
        await service.register("alice", "password123")

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await service.login("alice", "wrong")
        with pytest.raises(InvalidCredentialsError) as unknown_user:
            await service.login("nobody", "password123")

        assert type(wrong_password.value) is type(unknown_user.value)
        assert wrong_password.value.message == unknown_user.value.message == "Invalid credentials"
        assert wrong_password.value.reason == unknown_user.value.reason == AuthFailure.INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_login_requires_both_fields(self, service):
        with pytest.raises(ValidationError):
            await service.login("alice", "")


class TestReviews:
    """Review mutations through the service."""

    @pytest.mark.asyncio
    async def test_upsert_and_list(self, service):
        result = await service.upsert_review(Identity(username="alice"), ISBN, "Great read")

        assert result.reviewer == "alice"
        assert result.isbn == ISBN
        reviews = await service.get_reviews(ISBN)
        assert reviews.title == "The Martian"
        assert [(r.username, r.review) for r in reviews.reviews] == [("alice", "Great read")]

    @pytest.mark.asyncio
    async def test_users_only_touch_their_own_review(self, service):
        await service.upsert_review(Identity(username="alice"), ISBN, "Alice's take")
        await service.upsert_review(Identity(username="bob"), ISBN, "Bob's take")

        await service.delete_review(Identity(username="bob"), ISBN)

        book = await service.get_book(ISBN)
        assert book.reviews == {"alice": "Alice's take"}

    @pytest.mark.asyncio
    async def test_upsert_requires_text(self, service):
        with pytest.raises(ValidationError):
            await service.upsert_review(Identity(username="alice"), ISBN, "")

    @pytest.mark.asyncio
    async def test_unknown_book(self, service):
        with pytest.raises(BookNotFoundError):
            await service.upsert_review(Identity(username="alice"), "missing", "text")
        with pytest.raises(BookNotFoundError):
            await service.delete_review(Identity(username="alice"), "missing")
        with pytest.raises(BookNotFoundError):
            await service.get_reviews("missing")

    @pytest.mark.asyncio
    async def test_delete_without_review(self, service):
        with pytest.raises(ReviewNotFoundError):
            await service.delete_review(Identity(username="alice"), ISBN)

    @pytest.mark.asyncio
    async def test_stats(self, service):
        await service.register("alice", "password123")
        await service.upsert_review(Identity(username="alice"), ISBN, "Great read")

        assert await service.get_stats() == {"books": 4, "users": 1, "reviews": 1}


class TestBuildService:
    """Wiring from configuration."""

    @pytest.mark.asyncio
    async def test_sample_user_seeded(self):
        settings = BookshopConfig(jwt_secret="secret", bcrypt_rounds=4, seed_sample_user=True)
        service = build_service(settings)

        token = await service.login("alice", "password123")
        assert service.tokens.verify(token).username == "alice"

    def test_sample_user_disabled(self, test_config):
        service = build_service(test_config)
        assert service.credentials.lookup("alice") is None
        assert len(service.catalog) == 4
