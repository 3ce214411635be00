"""
Dependencies for dependency injection in routes.
"""
from portfoliohub.core.session import SessionContext
from portfoliohub.dependencies.session import CurrentSession, get_session
from portfoliohub.dependencies.services import (
    get_document_store,
    get_identity_provider,
    get_profile_service,
    get_registration_service,
)

__all__ = [
    "CurrentSession",
    "SessionContext",
    "get_session",
    "get_document_store",
    "get_identity_provider",
    "get_profile_service",
    "get_registration_service",
]
