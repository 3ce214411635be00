"""
Authentication, registration and session request/response schemas.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class NextStep(str, Enum):
    """Where the client should send the user after a session check."""
    DASHBOARD = "dashboard"
    COMPLETE_PROFILE = "complete-profile"


class RegisterRequest(BaseModel):
    """Direct registration body. Username format is checked by the registry."""
    username: str = Field(..., description="Desired public username (3-20 chars, letters, digits, _)")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class LoginRequest(BaseModel):
    """Login request body."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class FederatedSignInRequest(BaseModel):
    """Federated sign-in body: an ID token obtained by the client from the provider."""
    id_token: str = Field(..., min_length=1, description="Provider-issued ID token")


class CompleteProfileRequest(BaseModel):
    """Username chosen after a federated sign-in (or after an orphaned registration)."""
    username: str = Field(..., description="Desired public username")


class SessionStatus(BaseModel):
    """Result of the account lookup done on every session restore."""
    account_id: str = Field(..., description="Authenticated account identifier")
    email: str = Field(..., description="Principal email")
    needs_completion: bool = Field(..., description="True while no Account record exists")
    next_step: NextStep = Field(..., description="Route the client should take")
    username: Optional[str] = Field(None, description="Normalized username once completed")


class AuthResponse(BaseModel):
    """Session token plus where to go next."""
    access_token: str = Field(..., description="Session token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    session: SessionStatus


class UsernameAvailability(BaseModel):
    """Username availability response."""
    username: str = Field(..., description="Username as requested")
    normalized: str = Field(..., description="Registry key")
    available: bool


class LogoutResponse(BaseModel):
    message: str = "Signed out"
