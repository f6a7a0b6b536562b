"""Redirect target helpers for the auth handlers."""
from urllib.parse import quote

from core.guards import DASHBOARD_PATH, LOGIN_PATH


def safe_next_path(next_path: str | None) -> str:
    """
    Return next_path if it's a local path, else the dashboard.

    Rejects absolute and protocol-relative URLs ("//evil.example") so the
    callback can't be used as an open redirect.
    """
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return DASHBOARD_PATH
    if "\\" in next_path:
        return DASHBOARD_PATH
    return next_path


def login_error_path(reason: str) -> str:
    """Login page URL carrying a URL-encoded, display-only failure reason."""
    return f"{LOGIN_PATH}?error={quote(reason, safe='')}"
