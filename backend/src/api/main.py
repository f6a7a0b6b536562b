"""FastAPI application entry point."""
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import auth, books, health, pages, register
from core.auth_client import SupabaseAuthClient, set_auth_client
from core.books_cache import BooksCache, set_books_cache
from core.config import get_settings
from core.cookies import set_session_cookies
from core.guards import RedirectRequired
from db.session import dispose_engine


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()

    # Startup: auth store client and books cache are process-wide
    auth_client = SupabaseAuthClient(app_settings)
    set_auth_client(auth_client)
    set_books_cache(BooksCache(ttl_seconds=app_settings.books_cache_ttl))

    yield

    # Shutdown
    set_books_cache(None)
    set_auth_client(None)
    await auth_client.close()
    await dispose_engine()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking of the dashboard
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if get_settings().is_production:
            # HSTS: enforce HTTPS for 1 year, including subdomains
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """Write refreshed session tokens back to the caller's cookies."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and rewrite session cookies if the resolver refreshed them."""
        response = await call_next(request)

        # Set by SessionResolver when it traded an expired token for a new one
        refreshed = getattr(request.state, "refreshed_session", None)
        if refreshed is not None:
            set_session_cookies(response, refreshed, get_settings())

        return response


app_settings = get_settings()

app = FastAPI(
    title="Edu Books Admin",
    description="Admin dashboard for educational books with invite-key registration.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RedirectRequired)
async def redirect_required_handler(
    _request: Request, exc: RedirectRequired,
) -> RedirectResponse:
    """Turn a guard's decision into a server-side redirect."""
    return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)


# Session cookie middleware (innermost, sees request.state set by the resolver)
app.add_middleware(SessionCookieMiddleware)

# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(books.router)
app.include_router(register.router)
app.include_router(pages.router)
