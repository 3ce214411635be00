"""
Service factories for dependency injection in routes.
"""
from portfoliohub.database.connections import get_mongo_client
from portfoliohub.database.databases import identity_db, portfolio_db
from portfoliohub.services.document_store import DocumentStore
from portfoliohub.services.identity_provider import IdentityProvider
from portfoliohub.services.profile_service import ProfileService
from portfoliohub.services.registration_service import RegistrationService


async def get_identity_provider() -> IdentityProvider:
    """Dependency to get IdentityProvider instance."""
    client = await get_mongo_client()
    return IdentityProvider(client[identity_db.DB_NAME])


async def get_document_store() -> DocumentStore:
    """Dependency to get the portfolio DocumentStore."""
    client = await get_mongo_client()
    return DocumentStore(client[portfolio_db.DB_NAME])


async def get_registration_service() -> RegistrationService:
    """Dependency to get RegistrationService instance."""
    return RegistrationService(
        identity=await get_identity_provider(),
        store=await get_document_store(),
    )


async def get_profile_service() -> ProfileService:
    """Dependency to get ProfileService instance."""
    return ProfileService(await get_document_store())
