"""User profile model, keyed by the auth store's user id."""
from uuid import UUID

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, CreatedAtMixin


class User(Base, CreatedAtMixin):
    """
    Application profile for an auth store user.

    The row is created by invite-key registration; `role` drives what the
    dashboard and the books listing show.
    """

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        comment="Same id as the auth store user (auth.users.id)",
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        comment="super_admin, moderator, author, school, teacher or student",
    )
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    school_id: Mapped[UUID | None] = mapped_column(nullable=True)
    teacher_id: Mapped[UUID | None] = mapped_column(nullable=True)
