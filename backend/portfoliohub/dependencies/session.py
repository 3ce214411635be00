"""
Session dependency: turns the `token` query parameter into a SessionContext.
"""
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status

from portfoliohub.core.exceptions import AuthenticationError, SessionStoreError
from portfoliohub.core.session import SessionContext
from portfoliohub.dependencies.services import get_identity_provider
from portfoliohub.services.identity_provider import IdentityProvider


async def get_session(
    token: Annotated[str, Query(description="Session token")],
    identity: IdentityProvider = Depends(get_identity_provider),
) -> SessionContext:
    """
    Dependency to build the session context for the current request.

    Token is passed as query parameter: ?token=xxx

    Raises:
        HTTPException 401: If token is invalid, expired, revoked, or its principal is gone
        HTTPException 503: If the revoked-token store is unreachable
    """
    try:
        claims = await identity.verify_session_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    except SessionStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.message,
        )

    principal = await identity.get_principal(claims["sub"])
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return SessionContext(
        account_id=principal.id,
        email=principal.email,
        token=token,
        display_name=principal.display_name,
        photo_url=principal.photo_url,
        claims=claims,
    )


# Type alias for cleaner route signatures
CurrentSession = Annotated[SessionContext, Depends(get_session)]
