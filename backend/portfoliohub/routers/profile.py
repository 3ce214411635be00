"""
Profile router: the owner's editor endpoints and the public portfolio page.
"""
from fastapi import APIRouter, Depends

from portfoliohub.core.exceptions import PortfolioHubError
from portfoliohub.dependencies.services import get_profile_service
from portfoliohub.dependencies.session import CurrentSession
from portfoliohub.routers.errors import to_http_exception
from portfoliohub.schemas.profile import (
    ProfileResponse,
    ProfileUpdate,
    PublicPortfolioResponse,
)
from portfoliohub.services.profile_service import ProfileService

router = APIRouter(tags=["Profile"])


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get my portfolio",
)
async def get_my_profile(
    session: CurrentSession,
    service: ProfileService = Depends(get_profile_service),
):
    """
    Get the portfolio of the signed-in account.

    Requires valid token as query parameter: `?token=xxx`
    """
    try:
        return await service.get_own_profile(session.account_id)
    except PortfolioHubError as e:
        raise to_http_exception(e)


@router.put(
    "/profile",
    response_model=ProfileResponse,
    summary="Save portfolio changes",
)
async def update_my_profile(
    body: ProfileUpdate,
    session: CurrentSession,
    service: ProfileService = Depends(get_profile_service),
):
    """
    Merge the supplied fields into the portfolio.

    Omitted fields keep their stored value; supplied lists replace the
    stored list.
    """
    try:
        return await service.update_profile(session.account_id, body)
    except PortfolioHubError as e:
        raise to_http_exception(e)


@router.get(
    "/portfolio/{username}",
    response_model=PublicPortfolioResponse,
    summary="Public portfolio page data",
)
async def get_public_portfolio(
    username: str,
    service: ProfileService = Depends(get_profile_service),
):
    """Resolve a username (case-insensitive) to its published portfolio."""
    try:
        return await service.get_public_portfolio(username)
    except PortfolioHubError as e:
        raise to_http_exception(e)
