"""Resolve the caller's session from request cookies."""
import logging
from uuid import UUID

import jwt
from fastapi import Depends, Request
from jwt import PyJWKClient
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth_client import AuthStoreError, SupabaseAuthClient, get_auth_client
from core.config import Settings, get_settings
from core.cookies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from db.session import get_async_session
from models.user import User
from schemas.session import Session, UserIdentity

logger = logging.getLogger(__name__)

# Supabase issues user tokens with this audience
TOKEN_AUDIENCE = "authenticated"

# Cache for JWKS client (reuse across requests)
_jwks_clients: dict[str, PyJWKClient] = {}


def get_jwks_client(settings: Settings) -> PyJWKClient:
    """Get or create a cached JWKS client for the given settings."""
    if settings.jwks_url not in _jwks_clients:
        _jwks_clients[settings.jwks_url] = PyJWKClient(
            settings.jwks_url,
            cache_jwk_set=True,
            lifespan=3600,  # Cache keys for 1 hour
        )
    return _jwks_clients[settings.jwks_url]


def decode_access_token(token: str, settings: Settings) -> dict:
    """
    Verify an access token and return its claims.

    Uses the HS256 project secret when configured, otherwise the project JWKS.

    Raises:
        jwt.PyJWTError: If the token is invalid or expired, or keys can't be fetched.
    """
    if settings.supabase_jwt_secret:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience=TOKEN_AUDIENCE,
        )
    signing_key = get_jwks_client(settings).get_signing_key_from_jwt(token)
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256", "ES256"],
        audience=TOKEN_AUDIENCE,
    )


class SessionResolver:
    """
    Determine whether the caller is authenticated and what role they hold.

    `resolve()` never raises for a missing or bad session: absence is a normal
    outcome, and store faults are logged and reported as absence so that callers
    fail closed. When an expired access token is refreshed, the new session is
    left on `request.state.refreshed_session` for SessionCookieMiddleware.
    """

    def __init__(
        self,
        settings: Settings,
        auth_client: SupabaseAuthClient,
        db: AsyncSession,
    ) -> None:
        self._settings = settings
        self._auth_client = auth_client
        self._db = db

    async def resolve(self, request: Request) -> Session | None:
        """Return the caller's session, or None if there isn't a valid one."""
        access_token = request.cookies.get(ACCESS_TOKEN_COOKIE)
        refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
        if not access_token and not refresh_token:
            return None

        session = None
        if access_token:
            try:
                claims = decode_access_token(access_token, self._settings)
            except jwt.ExpiredSignatureError:
                logger.debug("Access token expired, attempting refresh")
            except jwt.PyJWTError as e:
                logger.info("Rejected session token: %s", e)
                return None
            else:
                if not claims.get("sub"):
                    logger.info("Rejected session token: missing sub claim")
                    return None
                session = Session(
                    access_token=access_token,
                    refresh_token=refresh_token or "",
                    expires_at=claims.get("exp"),
                    user=UserIdentity(id=claims["sub"], email=claims.get("email")),
                )

        if session is None:
            if not refresh_token:
                return None
            try:
                session = await self._auth_client.refresh_session(refresh_token)
            except AuthStoreError as e:
                logger.warning("Session refresh failed: %s", e.message)
                return None
            request.state.refreshed_session = session

        try:
            session.user.role = await self._load_role(session.user.id)
        except (SQLAlchemyError, OSError):
            logger.exception("Failed to load user profile for session")
            await self._db.rollback()
            return None
        return session

    async def _load_role(self, user_id: str) -> str | None:
        try:
            profile_id = UUID(user_id)
        except ValueError:
            return None
        result = await self._db.execute(select(User.role).where(User.id == profile_id))
        return result.scalar_one_or_none()


async def get_optional_session(
    request: Request,
    settings: Settings = Depends(get_settings),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
    db: AsyncSession = Depends(get_async_session),
) -> Session | None:
    """Dependency returning the caller's session, or None."""
    return await SessionResolver(settings, auth_client, db).resolve(request)
