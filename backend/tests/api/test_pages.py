"""Tests for the dashboard pages and their session guards."""
from collections.abc import Awaitable, Callable
from uuid import uuid4

import httpx
import respx
from httpx import AsyncClient, Response

from models.book import Book
from models.user import User
from tests.helpers import login_as, set_cookie_headers, token_response

REFRESH = {"grant_type": "refresh_token"}


class TestPublicPages:
    """Pages that need no session."""

    async def test__landing(self, client: AsyncClient) -> None:
        response = await client.get("/")
        assert response.status_code == 200
        assert 'href="/login"' in response.text

    async def test__login_page__anonymous(self, client: AsyncClient) -> None:
        response = await client.get("/login")
        assert response.status_code == 200
        assert 'action="/auth/login"' in response.text

    async def test__login_page__shows_error(self, client: AsyncClient) -> None:
        """The error query parameter is rendered, escaped."""
        response = await client.get("/login", params={"error": "Bad <code>"})
        assert "Bad &lt;code&gt;" in response.text

    async def test__unauthorized_page__403(self, client: AsyncClient) -> None:
        response = await client.get("/unauthorized")
        assert response.status_code == 403
        assert "Access denied" in response.text

    async def test__security_headers(self, client: AsyncClient) -> None:
        response = await client.get("/")
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert "strict-transport-security" not in response.headers


class TestRequireAnonymous:
    """The /login guard."""

    async def test__signed_in__redirects_to_dashboard(
        self, client: AsyncClient, test_user: User,
    ) -> None:
        login_as(client, test_user.id)

        response = await client.get("/login")

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"

    async def test__signed_in_without_role__still_redirected(self, client: AsyncClient) -> None:
        """Any session counts, registered or not."""
        login_as(client, uuid4())

        response = await client.get("/login")

        assert response.headers["location"] == "/dashboard"


class TestRequireSession:
    """Protected dashboard pages."""

    async def test__anonymous__redirects_to_login(self, client: AsyncClient) -> None:
        for path in ("/dashboard", "/dashboard/books", "/dashboard/moderation"):
            response = await client.get(path)
            assert response.status_code == 303
            assert response.headers["location"] == "/login"

    async def test__signed_in__renders_dashboard(
        self, client: AsyncClient, test_user: User,
    ) -> None:
        login_as(client, test_user.id, email="author@example.com")

        response = await client.get("/dashboard")

        assert response.status_code == 200
        assert "Signed in as author" in response.text
        assert "author@example.com" in response.text

    async def test__no_profile__dashboard_prompts_registration(self, client: AsyncClient) -> None:
        login_as(client, uuid4())

        response = await client.get("/dashboard")

        assert response.status_code == 200
        assert "invite key" in response.text

    async def test__garbage_cookie__redirects_to_login(self, client: AsyncClient) -> None:
        client.cookies.set("sb-access-token", "not-a-jwt")

        response = await client.get("/dashboard")

        assert response.headers["location"] == "/login"

    async def test__expired_token_and_store_unreachable__redirects_to_login(
        self, client: AsyncClient, mock_auth: respx.MockRouter, test_user: User,
    ) -> None:
        """Failing closed: no session when the refresh can't be checked."""
        mock_auth.post("/token", params=REFRESH).mock(
            side_effect=httpx.ConnectError("connection refused"),
        )
        login_as(client, test_user.id, expires_in=-60)

        response = await client.get("/dashboard")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    async def test__expired_token__refreshed_and_cookies_rewritten(
        self, client: AsyncClient, mock_auth: respx.MockRouter, test_user: User,
    ) -> None:
        """A refreshed session is rendered and its tokens written back to cookies."""
        route = mock_auth.post("/token", params=REFRESH).mock(
            return_value=Response(200, json=token_response(test_user.id, refresh_token="rt-new")),
        )
        login_as(client, test_user.id, expires_in=-60)

        response = await client.get("/dashboard")

        assert response.status_code == 200
        assert route.called
        refresh_headers = set_cookie_headers(response, "sb-refresh-token")
        assert refresh_headers
        assert refresh_headers[0].startswith("sb-refresh-token=rt-new;")
        assert set_cookie_headers(response, "sb-access-token")

    async def test__malformed_refresh_response__redirects_to_login(
        self, client: AsyncClient, mock_auth: respx.MockRouter, test_user: User,
    ) -> None:
        mock_auth.post("/token", params=REFRESH).mock(
            return_value=Response(200, json={"error": "weird"}),
        )
        login_as(client, test_user.id, expires_in=-60)

        response = await client.get("/dashboard")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    async def test__valid_token__no_cookie_rewrite(
        self, client: AsyncClient, test_user: User,
    ) -> None:
        login_as(client, test_user.id)

        response = await client.get("/dashboard")

        assert response.headers.get_list("set-cookie") == []


class TestBooksPages:
    """Books pages list what the caller's role may see."""

    async def test__author_sees_own_books(
        self,
        client: AsyncClient,
        make_book: Callable[..., Awaitable[Book]],
        test_user: User,
    ) -> None:
        await make_book(title="My Draft", status="Draft", author_id=test_user.id)
        await make_book(title="Other Book", status="Active")
        login_as(client, test_user.id)

        response = await client.get("/dashboard/books")

        assert response.status_code == 200
        assert "My Draft" in response.text
        assert "Other Book" not in response.text

    async def test__moderation__wrong_role_redirects_to_unauthorized(
        self, client: AsyncClient, test_user: User,
    ) -> None:
        login_as(client, test_user.id)

        response = await client.get("/dashboard/moderation")

        assert response.status_code == 303
        assert response.headers["location"] == "/unauthorized"

    async def test__moderation__no_role_redirects_to_unauthorized(
        self, client: AsyncClient,
    ) -> None:
        login_as(client, uuid4())

        response = await client.get("/dashboard/moderation")

        assert response.headers["location"] == "/unauthorized"

    async def test__moderation__moderator_sees_queue(
        self,
        client: AsyncClient,
        make_book: Callable[..., Awaitable[Book]],
        moderator: User,
    ) -> None:
        await make_book(title="Waiting Review", status="Moderation")
        await make_book(title="Already Live", status="Active")
        login_as(client, moderator.id)

        response = await client.get("/dashboard/moderation")

        assert response.status_code == 200
        assert "Waiting Review" in response.text
        assert "Already Live" not in response.text
