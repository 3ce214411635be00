"""
Principal model for the identity database.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class IdentityProviderKind(str, Enum):
    """How a principal signs in."""
    PASSWORD = "password"
    GOOGLE = "google"


class Principal(BaseModel):
    """
    Principal document model for MongoDB identity_db.principals collection.

    The principal's id is the account identifier used everywhere else.
    """
    id: str = Field(..., alias="_id", description="Stable account identifier")
    email: str = Field(..., description="Verified email address")
    provider: IdentityProviderKind = Field(..., description="Sign-in method")
    provider_subject: str = Field(
        ...,
        description="Federated 'sub' claim, or the lower-cased email for password principals",
    )
    hashed_password: Optional[str] = Field(None, description="Bcrypt hash (password principals)")
    display_name: Optional[str] = Field(None, description="Name reported by the provider")
    photo_url: Optional[str] = Field(None, description="Avatar URL reported by the provider")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        populate_by_name = True
        use_enum_values = True
