"""
Username availability router.
"""
from fastapi import APIRouter, Depends

from portfoliohub.core.exceptions import PortfolioHubError
from portfoliohub.dependencies.services import get_document_store
from portfoliohub.routers.errors import to_http_exception
from portfoliohub.schemas.auth import UsernameAvailability
from portfoliohub.services.document_store import DocumentStore
from portfoliohub.services.username_registry import UsernameRegistry, normalize

router = APIRouter(prefix="/usernames", tags=["Usernames"])


@router.get(
    "/{username}/availability",
    response_model=UsernameAvailability,
    summary="Check whether a username can be registered",
)
async def check_availability(
    username: str,
    store: DocumentStore = Depends(get_document_store),
):
    """
    Format check plus registry lookup. Read-only; availability can change
    before the username is actually claimed.
    """
    try:
        available = await UsernameRegistry(store).is_available(username)
    except PortfolioHubError as e:
        raise to_http_exception(e)

    return UsernameAvailability(
        username=username,
        normalized=normalize(username),
        available=available,
    )
