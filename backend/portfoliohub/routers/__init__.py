"""
API Routers module.
"""
from portfoliohub.routers import auth, health, profile, usernames

__all__ = ["auth", "health", "profile", "usernames"]
