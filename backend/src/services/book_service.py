"""Service layer for book listing queries."""
from collections import defaultdict
from uuid import UUID

from sqlalchemy import ColumnElement, false, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.book import BOOK_STATUS_ACTIVE, BOOK_STATUS_MODERATION, Book
from schemas.book import DuplicateBaseUrl

ROLE_SUPER_ADMIN = "super_admin"
ROLE_MODERATOR = "moderator"
ROLE_AUTHOR = "author"


def role_filter(role: str | None, user_id: UUID | None) -> ColumnElement[bool] | None:
    """
    Build the WHERE clause deciding which books a role may list.

    - super_admin: everything (None = no filter)
    - moderator: books waiting for moderation
    - author: their own books; nothing without a user id
    - school/teacher/student and unknown or missing roles: active books
    """
    if role == ROLE_SUPER_ADMIN:
        return None
    if role == ROLE_MODERATOR:
        return Book.status == BOOK_STATUS_MODERATION
    if role == ROLE_AUTHOR:
        if user_id is None:
            return false()
        return Book.author_id == user_id
    return Book.status == BOOK_STATUS_ACTIVE


async def list_books(
    db: AsyncSession,
    role: str | None = None,
    user_id: UUID | None = None,
) -> list[Book]:
    """
    Get the books visible to a role, newest first.

    Args:
        db: Database session.
        role: Caller's role (see role_filter).
        user_id: Caller's user id, used by the author filter.

    Returns:
        List of Book models ordered by created_at descending.
    """
    query = select(Book)
    condition = role_filter(role, user_id)
    if condition is not None:
        query = query.where(condition)
    result = await db.execute(query.order_by(Book.created_at.desc(), Book.id))
    return list(result.scalars().all())


async def find_duplicate_base_urls(db: AsyncSession) -> list[DuplicateBaseUrl]:
    """
    Find base_url values shared by more than one active book.

    Two active books with the same base_url make /read/<base_url> ambiguous.
    """
    result = await db.execute(
        select(Book.base_url, Book.id)
        .where(Book.status == BOOK_STATUS_ACTIVE)
        .order_by(Book.base_url, Book.created_at),
    )
    ids_by_url: dict[str, list[UUID]] = defaultdict(list)
    for base_url, book_id in result.all():
        ids_by_url[base_url].append(book_id)
    return [
        DuplicateBaseUrl(base_url=base_url, book_ids=book_ids)
        for base_url, book_ids in ids_by_url.items()
        if len(book_ids) > 1
    ]
