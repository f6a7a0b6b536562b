"""Pydantic schemas for invite-key registration."""
from pydantic import BaseModel


class RegistrationRequest(BaseModel):
    """
    Registration payload sent after the user signed up with the auth store.

    Fields are optional here so that missing fields produce the endpoint's own
    400 response rather than a 422 validation error.
    """

    registration_key: str | None = None
    user_id: str | None = None
    display_name: str | None = None


class RegistrationResult(BaseModel):
    """Outcome of a registration attempt."""

    success: bool
    message: str
    role: str | None = None
