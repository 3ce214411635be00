"""
Account and username registry models for the portfolio database.
"""
from datetime import datetime, timezone

from pydantic import BaseModel, Field


class Account(BaseModel):
    """
    Account document model for MongoDB portfolio_db.accounts collection.

    Binds a normalized username to an authenticated principal. Its presence is
    the only signal that a principal has finished registration.
    """
    id: str = Field(..., alias="_id", description="Account identifier (principal id)")
    username: str = Field(..., description="Normalized (lower-case) username")
    email: str = Field(..., description="Email of the principal")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        populate_by_name = True


class UsernameRegistryEntry(BaseModel):
    """
    Registry document model for MongoDB portfolio_db.usernames collection.
    Keyed by the normalized username.
    """
    username: str = Field(..., alias="_id", description="Normalized username")
    account_id: str = Field(..., description="Owning account identifier")
    claimed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the claim was written",
    )

    class Config:
        populate_by_name = True
