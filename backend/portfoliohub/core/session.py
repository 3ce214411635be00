"""
Session context: the authenticated principal, passed explicitly to services.

Constructed by the session dependency once a token has been verified;
invalid once the token is signed out (verification then fails).
"""
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class SessionContext:
    """Authenticated principal for the lifetime of one request."""
    account_id: str
    email: str
    token: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    claims: dict[str, Any] = field(default_factory=dict)
