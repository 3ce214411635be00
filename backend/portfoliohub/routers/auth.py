"""
Authentication router: registration, sign-in, session restore, completion, sign-out.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status

from portfoliohub.config import get_settings
from portfoliohub.core.exceptions import PortfolioHubError
from portfoliohub.core.rate_limit import check_rate_limit
from portfoliohub.dependencies.services import get_registration_service
from portfoliohub.dependencies.session import CurrentSession
from portfoliohub.routers.errors import to_http_exception
from portfoliohub.schemas.auth import (
    AuthResponse,
    CompleteProfileRequest,
    FederatedSignInRequest,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
    SessionStatus,
)
from portfoliohub.services.registration_service import RegistrationService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def enforce_rate_limit(request: Request, endpoint: str, limit: int) -> None:
    """Raise 429 once the caller exceeds `limit` requests in the configured window."""
    settings = get_settings()
    client_ip = get_client_ip(request)
    try:
        allowed = await check_rate_limit(
            client_ip, endpoint, limit=limit, window_seconds=settings.rate_limit_window_seconds
        )
    except PortfolioHubError as e:
        raise to_http_exception(e)
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many attempts. Please try again later.",
        )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register with username, email and password",
)
async def register(
    request: Request,
    body: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
):
    """
    Create a password account, reserve the username and seed the portfolio.

    - **username**: 3-20 characters, letters, numbers and underscores; case-insensitive
    - **email**: Valid email address (must be unique)
    - **password**: Password (minimum 6 characters)
    """
    await enforce_rate_limit(request, "/auth/register", get_settings().register_rate_limit_attempts)

    try:
        return await service.register(body)
    except PortfolioHubError as e:
        raise to_http_exception(e)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Sign in with email and password",
)
async def login(
    request: Request,
    body: LoginRequest,
    service: RegistrationService = Depends(get_registration_service),
):
    """
    Authenticate and receive a session token.

    `session.next_step` is `complete-profile` when the account was never
    finished (for example, the username was taken during registration).
    """
    await enforce_rate_limit(request, "/auth/login", get_settings().login_rate_limit_attempts)

    try:
        return await service.sign_in_with_password(body.email, body.password)
    except PortfolioHubError as e:
        raise to_http_exception(e)


@router.post(
    "/federated",
    response_model=AuthResponse,
    summary="Sign in with a federated provider ID token",
)
async def federated_sign_in(
    request: Request,
    body: FederatedSignInRequest,
    service: RegistrationService = Depends(get_registration_service),
):
    """
    Exchange a Google ID token for a session token.

    First-time principals get `session.needs_completion = true` and must call
    `POST /auth/complete` with a username.
    """
    await enforce_rate_limit(request, "/auth/federated", get_settings().login_rate_limit_attempts)

    try:
        return await service.sign_in_with_federated(body.id_token)
    except PortfolioHubError as e:
        raise to_http_exception(e)


@router.get(
    "/session",
    response_model=SessionStatus,
    summary="Restore a session and check whether registration is complete",
)
async def restore_session(
    session: CurrentSession,
    service: RegistrationService = Depends(get_registration_service),
):
    """
    Look the account up for the current token.

    Clients call this on every load: a missing account routes to completion.
    """
    try:
        return await service.resolve_session(session)
    except PortfolioHubError as e:
        raise to_http_exception(e)


@router.post(
    "/complete",
    response_model=SessionStatus,
    summary="Choose a username to finish registration",
)
async def complete_registration(
    request: Request,
    body: CompleteProfileRequest,
    session: CurrentSession,
    service: RegistrationService = Depends(get_registration_service),
):
    """
    Finish an account that has a principal but no Account record.

    The session stays valid when this fails, so the user can retry with
    another username.
    """
    await enforce_rate_limit(request, "/auth/complete", get_settings().register_rate_limit_attempts)

    try:
        return await service.complete(session, body)
    except PortfolioHubError as e:
        raise to_http_exception(e)


@router.post(
    "/logout",
    response_model=LogoutResponse,
    summary="Sign out and revoke the session token",
)
async def logout(
    session: CurrentSession,
    service: RegistrationService = Depends(get_registration_service),
):
    """Revoke the current token; later requests with it get 401."""
    try:
        await service.sign_out(session)
    except PortfolioHubError as e:
        raise to_http_exception(e)
    return LogoutResponse()
