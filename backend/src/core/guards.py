"""Page guards that redirect based on the caller's session."""
from collections.abc import Awaitable, Callable

from fastapi import Depends

from core.session import get_optional_session
from schemas.session import Session

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"
UNAUTHORIZED_PATH = "/unauthorized"


class RedirectRequired(Exception):  # noqa: N818
    """
    Raised by a guard to stop rendering and send the caller elsewhere.

    Converted into a 303 redirect by the exception handler in api.main.
    """

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(location)


async def require_anonymous(
    session: Session | None = Depends(get_optional_session),
) -> None:
    """Guard for pages only anonymous callers may see (e.g. /login)."""
    if session is not None:
        raise RedirectRequired(DASHBOARD_PATH)


async def require_session(
    session: Session | None = Depends(get_optional_session),
) -> Session:
    """Guard for protected pages; returns the caller's session."""
    if session is None:
        raise RedirectRequired(LOGIN_PATH)
    return session


def require_role(*roles: str) -> Callable[..., Awaitable[Session]]:
    """
    Build a guard that also requires one of the given roles.

    Callers without a session go to /login, callers with another role to
    /unauthorized.
    """
    allowed = frozenset(roles)

    async def guard(session: Session = Depends(require_session)) -> Session:
        if session.user.role not in allowed:
            raise RedirectRequired(UNAUTHORIZED_PATH)
        return session

    return guard
