"""Session representation shared by the resolver, guards and auth handlers."""
from dataclasses import dataclass
from typing import Any


@dataclass
class UserIdentity:
    """
    Minimal identity of an authenticated caller.

    `role` comes from the `users` profile row and is None until the user has
    registered with an invite key.
    """

    id: str
    email: str | None = None
    role: str | None = None


@dataclass
class Session:
    """
    Access/refresh token pair issued by the auth store.

    The auth store owns the session; the app only carries it in cookies.
    """

    access_token: str
    refresh_token: str
    expires_at: int | None
    user: UserIdentity

    @classmethod
    def from_token_response(cls, payload: dict[str, Any]) -> "Session":
        """
        Build a Session from a GoTrue `/token` response body.

        Raises:
            KeyError: If the body has no access token.
            ValueError: If the body names no user.
        """
        user = payload.get("user") or {}
        if not user.get("id"):
            raise ValueError("token response has no user id")
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token", ""),
            expires_at=payload.get("expires_at"),
            user=UserIdentity(id=str(user["id"]), email=user.get("email")),
        )
