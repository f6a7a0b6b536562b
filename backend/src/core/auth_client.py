"""Async client for the Supabase Auth (GoTrue) REST API."""
import logging
from typing import Any

import httpx

from core.config import Settings
from schemas.session import Session

logger = logging.getLogger(__name__)


class AuthStoreError(Exception):
    """
    Raised when the auth store rejects a request.

    `message` is the store's human-readable reason (e.g. "invalid flow state").
    It never contains tokens or keys, so it is safe to show to the caller.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AuthStoreUnavailableError(AuthStoreError):
    """Raised when the auth store can't be reached or times out."""

    def __init__(self) -> None:
        super().__init__("Authentication service unavailable")


def _error_message(response: httpx.Response) -> str:
    """Extract the reason from a GoTrue error body (its shape varies by version)."""
    try:
        body = response.json()
    except ValueError:
        return f"Authentication failed ({response.status_code})"
    if isinstance(body, dict):
        for field in ("msg", "error_description", "message", "error"):
            value = body.get(field)
            if isinstance(value, str) and value:
                return value
    return f"Authentication failed ({response.status_code})"


class SupabaseAuthClient:
    """
    Thin wrapper over the GoTrue endpoints this app consumes.

    Every failure surfaces as AuthStoreError; transport faults as
    AuthStoreUnavailableError. No retries - timeouts are httpx's defaults.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._client = http_client or httpx.AsyncClient(
            base_url=settings.auth_url,
            headers={"apikey": settings.supabase_anon_key},
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error("Auth store request failed: %s %s: %s", method, path, e)
            raise AuthStoreUnavailableError() from e

        if response.status_code >= 400:
            raise AuthStoreError(_error_message(response), response.status_code)
        return response

    async def _token_grant(self, grant_type: str, body: dict[str, Any]) -> Session:
        response = await self._request(
            "POST", "/token", params={"grant_type": grant_type}, json=body,
        )
        try:
            return Session.from_token_response(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Unexpected /token response for %s grant: %s", grant_type, e)
            raise AuthStoreError(
                "Invalid response from authentication service", response.status_code,
            ) from e

    async def exchange_code_for_session(
        self, code: str, code_verifier: str | None = None,
    ) -> Session:
        """
        Exchange a one-time auth code for a session (PKCE grant).

        Codes are single-use: a replayed code is rejected by the store.
        """
        return await self._token_grant(
            "pkce", {"auth_code": code, "code_verifier": code_verifier or ""},
        )

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """Sign in with email and password."""
        return await self._token_grant("password", {"email": email, "password": password})

    async def refresh_session(self, refresh_token: str) -> Session:
        """Trade a refresh token for a new session."""
        return await self._token_grant("refresh_token", {"refresh_token": refresh_token})

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session server-side."""
        await self._request(
            "POST",
            "/logout",
            headers={"Authorization": f"Bearer {access_token}"},
        )

    async def get_user_by_id(self, user_id: str) -> dict[str, Any] | None:
        """
        Look up an auth user by id using the service role key.

        Returns:
            The user record, or None if no such user exists.
        """
        key = self._settings.supabase_service_role_key
        try:
            response = await self._request(
                "GET",
                f"/admin/users/{user_id}",
                headers={"apikey": key, "Authorization": f"Bearer {key}"},
            )
        except AuthStoreError as e:
            if e.status_code == 404:
                return None
            raise
        return response.json()

    async def health(self) -> bool:
        """Check auth store reachability."""
        try:
            await self._request("GET", "/health")
        except AuthStoreError:
            return False
        return True


# Global auth client state using a container to avoid global statement
class _AuthClientState:
    """Container for the process-wide auth client."""

    client: SupabaseAuthClient | None = None


_state = _AuthClientState()


def get_auth_client() -> SupabaseAuthClient:
    """
    Get the process-wide auth client (FastAPI dependency).

    Raises:
        RuntimeError: If called before the app lifespan created the client.
    """
    if _state.client is None:
        raise RuntimeError("Auth client is not initialized")
    return _state.client


def set_auth_client(client: SupabaseAuthClient | None) -> None:
    """Set the process-wide auth client."""
    _state.client = client
