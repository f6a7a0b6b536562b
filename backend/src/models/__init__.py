"""SQLAlchemy models."""
from models.base import Base, CreatedAtMixin, TimestampMixin
from models.book import Book
from models.registration_key import RegistrationKey
from models.user import User

__all__ = [
    "Base",
    "Book",
    "CreatedAtMixin",
    "RegistrationKey",
    "TimestampMixin",
    "User",
]
