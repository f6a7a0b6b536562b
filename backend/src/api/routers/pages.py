"""Server-rendered dashboard pages, gated by the session guards."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_async_session,
    get_books_cache,
    require_anonymous,
    require_role,
    require_session,
)
from api.helpers import get_book_listing
from api.rendering import render_page
from core.books_cache import BooksCache
from schemas.session import Session
from services.book_service import ROLE_MODERATOR, ROLE_SUPER_ADMIN

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"], include_in_schema=False)


def _user_uuid(session: Session) -> UUID | None:
    try:
        return UUID(session.user.id)
    except ValueError:
        return None


async def _books_page(
    heading: str,
    role: str | None,
    session: Session,
    db: AsyncSession,
    cache: BooksCache,
) -> HTMLResponse:
    try:
        books = await get_book_listing(db, cache, role, _user_uuid(session))
    except Exception:
        logger.exception("Books fetch error")
        await db.rollback()
        return render_page(
            "books.html",
            status_code=500,
            heading=heading,
            books=[],
            error="Failed to fetch books",
            user=session.user,
        )
    return render_page("books.html", heading=heading, books=books, error=None, user=session.user)


@router.get("/", response_class=HTMLResponse)
async def landing() -> HTMLResponse:
    """Public landing page."""
    return render_page("landing.html")


@router.get("/login", response_class=HTMLResponse, dependencies=[Depends(require_anonymous)])
async def login_page(error: str | None = None) -> HTMLResponse:
    """Login form; signed-in callers are sent to the dashboard."""
    return render_page("login.html", error=error)


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(session: Session = Depends(require_session)) -> HTMLResponse:
    """Dashboard overview."""
    return render_page("dashboard.html", user=session.user)


@router.get("/dashboard/books", response_class=HTMLResponse)
async def dashboard_books(
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_async_session),
    cache: BooksCache = Depends(get_books_cache),
) -> HTMLResponse:
    """Books visible to the caller's role."""
    return await _books_page("Books", session.user.role, session, db, cache)


@router.get("/dashboard/moderation", response_class=HTMLResponse)
async def dashboard_moderation(
    session: Session = Depends(require_role(ROLE_MODERATOR, ROLE_SUPER_ADMIN)),
    db: AsyncSession = Depends(get_async_session),
    cache: BooksCache = Depends(get_books_cache),
) -> HTMLResponse:
    """Books waiting for moderation."""
    return await _books_page("Moderation queue", ROLE_MODERATOR, session, db, cache)


@router.get("/unauthorized", response_class=HTMLResponse)
async def unauthorized() -> HTMLResponse:
    """Shown when the caller's role can't open a page."""
    return render_page("unauthorized.html", status_code=403)
