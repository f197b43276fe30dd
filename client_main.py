"""
Example run of the bookshop client against a live API server.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

import httpx

from client.bookshop_client import BookshopClient
from utilities.config import config
from utilities.logger import setup_logging, get_logger


async def run_examples(client: BookshopClient) -> None:
    """Exercise the public search endpoints and the sample user's review flow."""
    logger = get_logger(__name__)

    books = await client.get_all_books()
    logger.info("All books", count=len(books), books=books)

    book = await client.search_by_isbn("9780143127741")
    logger.info("Book by ISBN", book=book)

    by_author = await client.search_by_author("Andy Weir")
    logger.info("Books by author", author="Andy Weir", books=by_author)

    by_title = await client.search_by_title("martian")
    logger.info("Books matching title", title="martian", books=by_title)

    if config.seed_sample_user:
        await client.login(config.sample_username, config.sample_password)
        result = await client.add_review("9780143127741", "Great read")
        logger.info("Review added", **result)
        reviews = await client.get_reviews("9780143127741")
        logger.info("Reviews", **reviews)
        result = await client.delete_review("9780143127741")
        logger.info("Review deleted", **result)


async def main():
    """Main function to run the client examples."""
    setup_logging(log_level=config.log_level, log_format="console")
    logger = get_logger(__name__)

    try:
        async with BookshopClient() as client:
            await run_examples(client)
    except httpx.HTTPError as e:
        logger.error("Client example failed", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
