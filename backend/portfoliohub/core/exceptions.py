"""
Error taxonomy shared by the services and converted to HTTP responses by the routers.
"""
from typing import Optional


class PortfolioHubError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationError(PortfolioHubError):
    """Identity provider rejected the principal (bad credentials, bad token, ...)."""


class EmailAlreadyRegisteredError(AuthenticationError):
    """A password principal already exists for this email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email already registered")


class ValidationError(PortfolioHubError):
    """Input rejected before any write happened. Scoped to a single field."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class UsernameTakenError(ValidationError):
    """The normalized username is owned by another account."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("This username is already taken.", field="username")


class StorageError(PortfolioHubError):
    """The document store failed a read or write."""

    def __init__(self, message: str = "Failed to save profile. Please try again."):
        super().__init__(message)


class NotFoundError(PortfolioHubError):
    """Requested record does not exist."""


class SessionStoreError(PortfolioHubError):
    """Redis (rate limits, revoked tokens) failed a read or write."""

    def __init__(self, message: str = "Service temporarily unavailable. Please try again."):
        super().__init__(message)
