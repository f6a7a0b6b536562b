"""Pydantic schemas for book listings."""
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BookResponse(BaseModel):
    """Book as returned by the listing endpoint."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    base_url: str
    title: str
    description: str | None
    grade_level: str | None
    course: str | None
    category: str | None
    status: str
    author_id: UUID | None
    moderator_id: UUID | None
    price: Decimal | None
    cover_image: str | None
    pages_count: int | None
    language: str | None
    created_at: datetime
    updated_at: datetime


class DuplicateBaseUrl(BaseModel):
    """A base_url shared by more than one active book."""

    base_url: str
    book_ids: list[UUID]
