"""Shared exceptions for service layer operations."""


class RegistrationError(Exception):
    """
    Base exception for invite-key registration failures.

    The message is shown to the caller as-is.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidRegistrationKeyError(RegistrationError):
    """Raised when the key doesn't exist or is inactive."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired registration key")


class RegistrationKeyExhaustedError(RegistrationError):
    """Raised when the key has no uses left."""

    def __init__(self) -> None:
        super().__init__("Registration key has been used up")


class AuthUserNotFoundError(RegistrationError):
    """Raised when the user id is unknown to the auth store."""

    def __init__(self) -> None:
        super().__init__("User not found in authentication system")


class UserAlreadyRegisteredError(RegistrationError):
    """Raised when the user already has a complete profile."""

    def __init__(self) -> None:
        super().__init__("User already registered")
