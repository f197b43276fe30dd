"""
In-memory credential store.
Holds username -> User records and enforces username uniqueness.
"""

import threading
from typing import Dict, Optional

import structlog

from utilities.errors import UsernameTakenError
from .models import User

logger = structlog.get_logger(__name__)


class CredentialStore:
    """
    Append-only mapping of usernames to password digests.

    The existence check and the insert in register() run under one lock.
    Callers must hash passwords before calling in, so no slow work
    happens while the lock is held.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._users: Dict[str, User] = {}

    def register(self, username: str, password_hash: str) -> User:
        """
        Register a new user.

        Args:
            username: Case-sensitive username
            password_hash: Digest produced by PasswordHasher.hash

        Returns:
            The stored User

        Raises:
            UsernameTakenError: If the username is already registered
        """
        user = User(username=username, password_hash=password_hash)
        with self._lock:
            if username in self._users:
                raise UsernameTakenError()
            self._users[username] = user
        logger.debug("User stored", username=username)
        return user

    def lookup(self, username: str) -> Optional[User]:
        """Return the user registered under username, or None."""
        with self._lock:
            return self._users.get(username)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
