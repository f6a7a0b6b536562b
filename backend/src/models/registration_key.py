"""Registration (invite) key model."""
from uuid import UUID, uuid4

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, CreatedAtMixin


class RegistrationKey(Base, CreatedAtMixin):
    """Invite key granting a role to the user who redeems it, up to max_uses times."""

    __tablename__ = "registration_keys"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    key: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    role: Mapped[str] = mapped_column(String(50))
    is_active: Mapped[bool] = mapped_column(default=True)
    uses: Mapped[int] = mapped_column(default=0)
    max_uses: Mapped[int] = mapped_column(default=1)
    school_id: Mapped[UUID | None] = mapped_column(nullable=True)
    teacher_id: Mapped[UUID | None] = mapped_column(nullable=True)
