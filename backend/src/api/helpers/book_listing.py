"""Cached book listing shared by the JSON endpoint and the dashboard pages."""
from typing import Any
from uuid import UUID

from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from core.books_cache import BooksCache
from schemas.book import BookResponse
from services import book_service


async def get_book_listing(
    db: AsyncSession,
    cache: BooksCache,
    role: str | None,
    user_id: UUID | None,
) -> list[dict[str, Any]]:
    """
    Get the JSON-ready listing for (role, user_id), from cache when possible.

    Cached values are plain dicts so they don't hold on to ORM objects from a
    closed session.
    """

    async def compute() -> list[dict[str, Any]]:
        books = await book_service.list_books(db, role=role, user_id=user_id)
        return [jsonable_encoder(BookResponse.model_validate(book)) for book in books]

    return await cache.get_or_compute((role, user_id), compute)
