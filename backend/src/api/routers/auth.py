"""Authentication endpoints: code-exchange callback, sign-in and sign-out."""
import logging

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import RedirectResponse

from api.dependencies import get_auth_client, get_settings
from api.helpers import login_error_path, safe_next_path
from core.auth_client import AuthStoreError, SupabaseAuthClient
from core.config import Settings
from core.cookies import (
    ACCESS_TOKEN_COOKIE,
    CODE_VERIFIER_COOKIE,
    expire_session_cookies,
    set_session_cookies,
)
from core.guards import DASHBOARD_PATH, LOGIN_PATH

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _redirect(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/callback")
async def auth_callback(
    request: Request,
    code: str | None = None,
    next_path: str | None = Query(default=None, alias="next"),
    settings: Settings = Depends(get_settings),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> RedirectResponse:
    """
    Complete an external sign-in by exchanging a one-time code for a session.

    Without a code, goes straight to /login. A failed exchange (including a
    replayed code) goes to /login?error=<reason>. Never retried.
    """
    if not code:
        return _redirect(LOGIN_PATH)

    code_verifier = request.cookies.get(CODE_VERIFIER_COOKIE)
    try:
        session = await auth_client.exchange_code_for_session(code, code_verifier)
    except AuthStoreError as e:
        logger.warning("Auth callback error: %s", e.message)
        return _redirect(login_error_path(e.message))

    response = _redirect(safe_next_path(next_path))
    set_session_cookies(response, session, settings)
    # The verifier belongs to this one exchange
    response.delete_cookie(CODE_VERIFIER_COOKIE, path="/")
    return response


@router.post("/login")
async def login(
    email: str = Form(default=""),
    password: str = Form(default=""),
    settings: Settings = Depends(get_settings),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> RedirectResponse:
    """Sign in with email and password from the login form."""
    if not email or not password:
        return _redirect(login_error_path("Email and password are required"))

    try:
        session = await auth_client.sign_in_with_password(email, password)
    except AuthStoreError as e:
        logger.info("Sign-in failed: %s", e.message)
        return _redirect(login_error_path(e.message))

    response = _redirect(DASHBOARD_PATH)
    set_session_cookies(response, session, settings)
    return response


@router.post("/signout")
async def sign_out(
    request: Request,
    settings: Settings = Depends(get_settings),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> RedirectResponse:
    """
    Sign out and clear every session cookie.

    The store-side revocation is best-effort: cookies are cleared and the
    caller is sent to / whether or not the store call succeeded.
    """
    access_token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if access_token:
        try:
            await auth_client.sign_out(access_token)
        except AuthStoreError as e:
            logger.warning("Error signing out from auth store: %s", e.message)

    response = _redirect("/")
    expire_session_cookies(response, settings)
    logger.info("Session cookies cleared")
    return response
