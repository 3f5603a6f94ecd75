"""Exception hierarchy shared by the repository, services and API layer."""

from __future__ import annotations

__all__ = [
    "SnippetBinError",
    "InvalidInput",
    "NotFound",
    "DuplicateId",
    "Forbidden",
    "StorageFailure",
    "AuthError",
    "InvalidCredentials",
    "SecondFactorRequired",
    "SecondFactorInvalid",
    "UsernameTaken",
    "WeakPassword",
]


class SnippetBinError(Exception):
    """Base error for domain failures reported to the caller."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(SnippetBinError):
    """A required field is missing or malformed."""

    default_message = "Invalid input"


class NotFound(SnippetBinError):
    """The referenced record does not exist."""

    default_message = "Not found"


class DuplicateId(SnippetBinError):
    """A record with the same identifier already exists."""

    default_message = "Identifier already exists"


class Forbidden(SnippetBinError):
    """The requester's role does not allow the action."""

    default_message = "Forbidden"


class StorageFailure(SnippetBinError):
    """The underlying database could not complete the operation."""

    default_message = "Storage unavailable"


class AuthError(SnippetBinError):
    """Base error raised by the authenticator."""

    default_message = "Authentication failed"


class InvalidCredentials(AuthError):
    default_message = "Invalid username or password"


class SecondFactorRequired(AuthError):
    default_message = "Second factor code required"


class SecondFactorInvalid(AuthError):
    default_message = "Invalid second factor code"


class UsernameTaken(AuthError):
    default_message = "Username already exists"


class WeakPassword(AuthError):
    default_message = "Password is too weak"
