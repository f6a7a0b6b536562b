"""Helpers shared by tests: token minting and cookie login."""
import os
import time
from typing import Any
from uuid import UUID

import jwt
from httpx import AsyncClient

AUTH_URL = "https://project.supabase.test/auth/v1"


def make_access_token(
    user_id: UUID | str,
    email: str | None = "user@example.com",
    expires_in: int = 3600,
    secret: str | None = None,
) -> str:
    """Mint an HS256 access token shaped like the ones Supabase issues."""
    now = int(time.time())
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now - 10,
        "exp": now + expires_in,
    }
    if email is not None:
        claims["email"] = email
    return jwt.encode(claims, secret or os.environ["SUPABASE_JWT_SECRET"], algorithm="HS256")


def token_response(
    user_id: UUID | str,
    email: str = "user@example.com",
    refresh_token: str = "refresh-token-new",
) -> dict[str, Any]:
    """GoTrue /token success body."""
    return {
        "access_token": make_access_token(user_id, email),
        "token_type": "bearer",
        "expires_in": 3600,
        "expires_at": int(time.time()) + 3600,
        "refresh_token": refresh_token,
        "user": {"id": str(user_id), "email": email},
    }


def login_as(client: AsyncClient, user_id: UUID | str, **token_kwargs: Any) -> str:
    """Put session cookies for user_id into the client's cookie jar."""
    token = make_access_token(user_id, **token_kwargs)
    client.cookies.set("sb-access-token", token)
    client.cookies.set("sb-refresh-token", "refresh-token-old")
    return token


def set_cookie_headers(response: Any, name: str) -> list[str]:
    """All Set-Cookie headers on a response for the given cookie name."""
    return [
        header for header in response.headers.get_list("set-cookie")
        if header.startswith(f"{name}=")
    ]
