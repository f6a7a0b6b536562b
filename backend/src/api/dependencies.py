"""FastAPI dependencies for injection."""
from core.auth_client import get_auth_client
from core.books_cache import get_books_cache
from core.config import get_settings
from core.guards import require_anonymous, require_role, require_session
from core.session import get_optional_session
from db.session import get_async_session

__all__ = [
    "get_async_session",
    "get_auth_client",
    "get_books_cache",
    "get_optional_session",
    "get_settings",
    "require_anonymous",
    "require_role",
    "require_session",
]
