"""Shared fixtures for API tests."""
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from models.book import Book
from models.registration_key import RegistrationKey
from models.user import User

BASE_TIME = datetime(2024, 9, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_book(db_session: AsyncSession) -> Callable[..., Awaitable[Book]]:
    """
    Factory that inserts books with increasing created_at.

    Timestamps are set explicitly so ordering doesn't depend on the clock
    resolution of the test database.
    """
    counter = {"n": 0}

    async def _make_book(**kwargs: Any) -> Book:
        counter["n"] += 1
        created_at = BASE_TIME + timedelta(minutes=counter["n"])
        fields = {
            "base_url": f"book-{counter['n']}",
            "title": f"Book {counter['n']}",
            "status": "Active",
            "created_at": created_at,
            "updated_at": created_at,
        }
        fields.update(kwargs)
        book = Book(**fields)
        db_session.add(book)
        await db_session.flush()
        return book

    return _make_book


@pytest.fixture
async def moderator(db_session: AsyncSession) -> User:
    """A registered moderator profile."""
    user = User(id=uuid4(), email="mod@example.com", role="moderator", display_name="Mod")
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
async def registration_key(db_session: AsyncSession) -> RegistrationKey:
    """An active single-use teacher key."""
    key = RegistrationKey(key="TEACH-2024", role="teacher", is_active=True, uses=0, max_uses=1)
    db_session.add(key)
    await db_session.flush()
    return key
