"""
Service layer for business logic.
"""
from portfoliohub.services.document_store import DocumentStore
from portfoliohub.services.identity_provider import IdentityProvider
from portfoliohub.services.username_registry import UsernameRegistry
from portfoliohub.services.profile_initializer import ProfileInitializer
from portfoliohub.services.registration_service import RegistrationService
from portfoliohub.services.profile_service import ProfileService
from portfoliohub.services.username_reconciler import UsernameReconciler

__all__ = [
    "DocumentStore",
    "IdentityProvider",
    "UsernameRegistry",
    "ProfileInitializer",
    "RegistrationService",
    "ProfileService",
    "UsernameReconciler",
]
