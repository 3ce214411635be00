"""
Profile service: owner reads and editor saves, plus public page resolution.
"""
import logging
from typing import Optional

from portfoliohub.core.exceptions import NotFoundError
from portfoliohub.database.databases import portfolio_db
from portfoliohub.models.account import Account
from portfoliohub.models.profile import ProfileRecord
from portfoliohub.schemas.profile import (
    ProfileResponse,
    ProfileUpdate,
    PublicPortfolioResponse,
)
from portfoliohub.services.document_store import DocumentStore
from portfoliohub.services.username_registry import normalize

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for reading and editing portfolio records."""

    def __init__(self, store: DocumentStore):
        """Initialize with the portfolio document store."""
        self.store = store

    async def _account(self, account_id: str) -> Optional[Account]:
        doc = await self.store.get(portfolio_db.Collections.ACCOUNTS, account_id)
        return Account(**doc) if doc else None

    async def _profile(self, account_id: str) -> Optional[ProfileRecord]:
        doc = await self.store.get(portfolio_db.Collections.PORTFOLIOS, account_id)
        return ProfileRecord(**doc) if doc else None

    async def get_own_profile(self, account_id: str) -> ProfileResponse:
        """
        Get the profile of a completed account.

        Raises:
            NotFoundError: registration not completed yet
        """
        account = await self._account(account_id)
        profile = await self._profile(account_id) if account else None
        if account is None or profile is None:
            raise NotFoundError("Profile not found. Finish creating your account first.")
        return ProfileResponse(username=account.username, profile=profile)

    async def update_profile(self, account_id: str, update: ProfileUpdate) -> ProfileResponse:
        """
        Merge editor changes into the stored profile.

        Never recreates a missing profile: seeding belongs to registration.

        Raises:
            NotFoundError: registration not completed yet
        """
        account = await self._account(account_id)
        if account is None:
            raise NotFoundError("Profile not found. Finish creating your account first.")

        fields = update.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        found = await self.store.update_fields(
            portfolio_db.Collections.PORTFOLIOS, account_id, fields
        )
        if not found:
            raise NotFoundError("Profile not found. Finish creating your account first.")

        logger.info("Profile %s updated (%s)", account_id, ", ".join(sorted(fields)) or "no changes")
        return await self.get_own_profile(account_id)

    async def get_public_portfolio(self, username: str) -> PublicPortfolioResponse:
        """
        Resolve a public username to its portfolio.

        Equality query on the accounts collection; the first match wins.

        Raises:
            NotFoundError: no account or no profile for the username
        """
        key = normalize(username)
        matches = await self.store.find_by(portfolio_db.Collections.ACCOUNTS, "username", key)
        if not matches:
            raise NotFoundError(f"Portfolio not found: {username}")

        account = Account(**matches[0])
        profile = await self._profile(account.id)
        if profile is None:
            raise NotFoundError(f"Portfolio not found: {username}")

        return PublicPortfolioResponse(username=account.username, profile=profile)
