"""
Per-book review ledger.
"""

import threading
from typing import Dict, List, Optional

from utilities.errors import ReviewNotFoundError
from .models import Review


class ReviewLedger:
    """
    Mapping of username to review text for a single book.

    A username holds at most one review. The ledger trusts the username
    it is given; checking who may act on an entry is the auth gateway's
    job. Listings come back in insertion order, and replacing a review
    keeps its position.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._reviews: Dict[str, str] = {}

    def upsert(self, username: str, text: str) -> None:
        """Insert the user's review, or replace the existing one."""
        with self._lock:
            self._reviews[username] = text

    def remove(self, username: str) -> None:
        """
        Delete the user's review.

        Raises:
            ReviewNotFoundError: If the user has no review on this book
        """
        with self._lock:
            if username not in self._reviews:
                raise ReviewNotFoundError()
            del self._reviews[username]

    def get(self, username: str) -> Optional[str]:
        """The user's review text, or None."""
        with self._lock:
            return self._reviews.get(username)

    def list(self) -> List[Review]:
        """Snapshot of all reviews; empty when nobody has reviewed the book."""
        with self._lock:
            return [Review(username=u, review=t) for u, t in self._reviews.items()]

    def as_dict(self) -> Dict[str, str]:
        """Snapshot as a username -> text mapping."""
        with self._lock:
            return dict(self._reviews)

    def __len__(self) -> int:
        with self._lock:
            return len(self._reviews)
