"""API helper utilities."""
from api.helpers.book_listing import get_book_listing
from api.helpers.redirects import login_error_path, safe_next_path

__all__ = [
    "get_book_listing",
    "login_error_path",
    "safe_next_path",
]
