"""
In-memory book catalog.
Indexes books by ISBN and gives each book its own review ledger.
"""

import threading
from typing import Dict, List, Optional, Tuple

import structlog

from utilities.errors import BookNotFoundError, DuplicateBookError
from .ledger import ReviewLedger
from .models import Book

logger = structlog.get_logger(__name__)


DEFAULT_BOOKS: Tuple[Book, ...] = (
    Book(isbn="9780143127741", title="The Martian", author="Andy Weir"),
    Book(isbn="9780553386790", title="A Game of Thrones", author="George R. R. Martin"),
    Book(isbn="9780061120084", title="To Kill a Mockingbird", author="Harper Lee"),
    Book(isbn="9780307277671", title="Kafka on the Shore", author="Haruki Murakami"),
)


class BookCatalog:
    """
    Book metadata keyed by ISBN, with one ReviewLedger per book.

    Only add() mutates the catalog itself; review changes go through
    the ledger returned by reviews().
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._books: Dict[str, Book] = {}
        self._ledgers: Dict[str, ReviewLedger] = {}

    @classmethod
    def with_default_books(cls) -> "BookCatalog":
        """Create a catalog seeded with the demo books."""
        catalog = cls()
        for book in DEFAULT_BOOKS:
            catalog.add(book)
        logger.info("Catalog seeded", books=len(DEFAULT_BOOKS))
        return catalog

    def add(self, book: Book) -> None:
        """
        Add a book with an empty review ledger.

        Raises:
            DuplicateBookError: If the ISBN is already catalogued
        """
        with self._lock:
            if book.isbn in self._books:
                raise DuplicateBookError(f"Book with ISBN '{book.isbn}' already exists")
            self._books[book.isbn] = book
            self._ledgers[book.isbn] = ReviewLedger()

    def get(self, isbn: str) -> Optional[Book]:
        with self._lock:
            return self._books.get(isbn)

    def require(self, isbn: str) -> Book:
        """
        Get a book that must exist.

        Raises:
            BookNotFoundError: If the ISBN is unknown
        """
        book = self.get(isbn)
        if book is None:
            raise BookNotFoundError()
        return book

    def entry(self, isbn: str) -> Tuple[Book, ReviewLedger]:
        """
        Get a book and its review ledger in one lookup.

        Raises:
            BookNotFoundError: If the ISBN is unknown
        """
        with self._lock:
            book = self._books.get(isbn)
            ledger = self._ledgers.get(isbn)
        if book is None or ledger is None:
            raise BookNotFoundError()
        return book, ledger

    def reviews(self, isbn: str) -> ReviewLedger:
        """
        Get the review ledger of a book.

        Raises:
            BookNotFoundError: If the ISBN is unknown
        """
        return self.entry(isbn)[1]

    def list_books(self) -> List[Book]:
        with self._lock:
            return list(self._books.values())

    def find_by_author(self, author: str) -> List[Book]:
        """Books whose author matches exactly, ignoring case."""
        wanted = author.lower()
        return [b for b in self.list_books() if b.author.lower() == wanted]

    def find_by_title(self, title: str) -> List[Book]:
        """Books whose title contains the search text, ignoring case."""
        search = title.lower()
        return [b for b in self.list_books() if search in b.title.lower()]

    def review_count(self) -> int:
        """Total number of reviews across all books."""
        with self._lock:
            ledgers = list(self._ledgers.values())
        return sum(len(ledger) for ledger in ledgers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)
