"""
Conversion of service errors into HTTP responses.
"""
import logging

from fastapi import HTTPException, status

from portfoliohub.core.exceptions import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    NotFoundError,
    PortfolioHubError,
    SessionStoreError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def to_http_exception(error: PortfolioHubError) -> HTTPException:
    """
    Map an application error to the HTTPException the client sees.

    Validation errors keep their field so the form can attach the message.
    """
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": error.message, "field": error.field},
        )
    if isinstance(error, EmailAlreadyRegisteredError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)
    if isinstance(error, AuthenticationError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, StorageError):
        logger.error("Storage failure surfaced to client: %s", error.__cause__ or error)
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=error.message,
        )
    if isinstance(error, SessionStoreError):
        logger.error("Session store failure surfaced to client: %s", error.__cause__ or error)
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=error.message,
        )
    logger.error("Unmapped application error: %r", error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred",
    )
