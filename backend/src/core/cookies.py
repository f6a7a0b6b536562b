"""Session cookie names and helpers shared by the resolver and the auth handlers."""
from datetime import UTC, datetime

from starlette.responses import Response

from core.config import Settings
from schemas.session import Session

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"
CODE_VERIFIER_COOKIE = "sb-code-verifier"

# Every cookie that may carry session material. Sign-out expires exactly this set;
# add new names here rather than scanning request cookies.
SESSION_COOKIE_NAMES = (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    CODE_VERIFIER_COOKIE,
    "supabase-auth-token",
    "supabase.auth.token",
    "auth-token",
)

# Refresh tokens outlive access tokens; the store decides actual validity
REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def set_session_cookies(response: Response, session: Session, settings: Settings) -> None:
    """Write the session's tokens into httpOnly cookies."""
    access_max_age = None
    if session.expires_at is not None:
        access_max_age = max(int(session.expires_at - datetime.now(UTC).timestamp()), 0)
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        session.access_token,
        max_age=access_max_age,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        session.refresh_token,
        max_age=REFRESH_COOKIE_MAX_AGE,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


def expire_session_cookies(response: Response, settings: Settings) -> None:
    """Overwrite every known session cookie with an empty, already-expired value."""
    for name in SESSION_COOKIE_NAMES:
        response.set_cookie(
            name,
            "",
            max_age=0,
            expires=_EPOCH,
            path="/",
            secure=settings.is_production,
            httponly=True,
            samesite="lax",
        )
