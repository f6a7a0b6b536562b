"""Books listing endpoint."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_books_cache
from api.helpers import get_book_listing
from core.books_cache import BooksCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/books", tags=["books"])

FETCH_BOOKS_ERROR = "Failed to fetch books"


@router.get("")
async def list_books(
    role: str | None = Query(default=None),
    user_id: str | None = Query(default=None, alias="userId"),
    clear_cache: str | None = Query(default=None, alias="clearCache"),
    db: AsyncSession = Depends(get_async_session),
    cache: BooksCache = Depends(get_books_cache),
) -> JSONResponse:
    """
    List the books visible to a role.

    `clearCache=true` drops every cached listing before querying. Returns
    `{"data": [...]}`, or `{"error": ...}` with status 500 if the data store
    fails or `userId` is not a user id - never a partial list. Access control
    happens in the page guards, not here.
    """
    if clear_cache == "true":
        cache.invalidate()

    logger.info(
        "Books API called with role=%s user_id=%s clear_cache=%s", role, user_id, clear_cache,
    )

    try:
        listing_user_id = UUID(user_id) if user_id else None
    except ValueError:
        logger.warning("Books API called with malformed user_id=%r", user_id)
        return JSONResponse(status_code=500, content={"error": FETCH_BOOKS_ERROR})

    try:
        books = await get_book_listing(db, cache, role, listing_user_id)
    except Exception:
        logger.exception("Books fetch error")
        await db.rollback()
        return JSONResponse(status_code=500, content={"error": FETCH_BOOKS_ERROR})

    return JSONResponse(content={"data": books})
