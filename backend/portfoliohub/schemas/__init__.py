"""
Request and response schemas for API endpoints.
"""
from portfoliohub.schemas.auth import (
    AuthResponse,
    CompleteProfileRequest,
    FederatedSignInRequest,
    LoginRequest,
    LogoutResponse,
    NextStep,
    RegisterRequest,
    SessionStatus,
    UsernameAvailability,
)
from portfoliohub.schemas.profile import (
    ProfileResponse,
    ProfileUpdate,
    PublicPortfolioResponse,
)

__all__ = [
    # Auth
    "AuthResponse",
    "CompleteProfileRequest",
    "FederatedSignInRequest",
    "LoginRequest",
    "LogoutResponse",
    "NextStep",
    "RegisterRequest",
    "SessionStatus",
    "UsernameAvailability",
    # Profile
    "ProfileResponse",
    "ProfileUpdate",
    "PublicPortfolioResponse",
]
