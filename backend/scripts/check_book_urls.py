"""Report active books whose base_url is shared with another active book.

Two active books with the same base_url make /read/<base_url> ambiguous.

Usage:
    PYTHONPATH=backend/src python backend/scripts/check_book_urls.py
    PYTHONPATH=backend/src python backend/scripts/check_book_urls.py --list

Exits with status 1 when duplicates are found.
"""

import argparse
import asyncio
import logging

from core.config import get_settings
from db.session import dispose_engine, get_session_factory
from services import book_service

logger = logging.getLogger(__name__)


async def check(list_books: bool = False) -> int:
    """Run the check and return the number of duplicated base_url values."""
    try:
        async with get_session_factory()() as session:
            if list_books:
                # No role lists active books only
                books = await book_service.list_books(session, role=None)
                logger.info("Found %d active books", len(books))
                for book in books:
                    logger.info("%s  /read/%s  \"%s\"", book.id, book.base_url, book.title)

            duplicates = await book_service.find_duplicate_base_urls(session)
    finally:
        await dispose_engine()

    for duplicate in duplicates:
        logger.error(
            "Duplicate base_url \"%s\" shared by %d active books: %s",
            duplicate.base_url,
            len(duplicate.book_ids),
            ", ".join(str(book_id) for book_id in duplicate.book_ids),
        )
    if not duplicates:
        logger.info("All active base_url values are unique")
    return len(duplicates)


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    get_settings()  # fail fast on missing DATABASE_URL

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--list", action="store_true", help="Also list every active book")
    args = parser.parse_args()

    duplicate_count = asyncio.run(check(list_books=args.list))
    raise SystemExit(1 if duplicate_count else 0)


if __name__ == "__main__":
    main()
