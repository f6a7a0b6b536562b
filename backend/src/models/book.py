"""Book model for paginated reading content."""
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin

BOOK_STATUS_ACTIVE = "Active"
BOOK_STATUS_MODERATION = "Moderation"


class Book(Base, TimestampMixin):
    """
    Book model - content records listed on the dashboard.

    `base_url` is the public routing key (/read/<base_url>). It should be unique
    among active books; the database does not enforce this, see
    book_service.find_duplicate_base_urls.
    """

    __tablename__ = "books"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    base_url: Mapped[str] = mapped_column(String(255), index=True)
    title: Mapped[str] = mapped_column(String(500))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    grade_level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    course: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(50),
        default="Draft",
        index=True,
        comment="Draft, Moderation, Active or Inactive",
    )
    author_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    moderator_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    cover_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    pages_count: Mapped[int | None] = mapped_column(nullable=True)
    language: Mapped[str | None] = mapped_column(String(10), nullable=True)
