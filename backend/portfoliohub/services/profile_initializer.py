"""
Default portfolio content for brand-new accounts.
"""
import logging

from portfoliohub.database.databases import portfolio_db
from portfoliohub.models.profile import ProfileRecord
from portfoliohub.services.document_store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_FULL_NAME = "Your Name"
DEFAULT_TITLE = "Your Title"
DEFAULT_BIO = "A short bio about yourself."
DEFAULT_THEME = "default"


def default_profile(account_id: str, avatar_url: str = "") -> ProfileRecord:
    """Placeholder profile: fixed texts, no collections, default theme."""
    return ProfileRecord(
        _id=account_id,
        full_name=DEFAULT_FULL_NAME,
        title=DEFAULT_TITLE,
        bio=DEFAULT_BIO,
        profile_picture_url=avatar_url or "",
        website="",
        theme=DEFAULT_THEME,
    )


class ProfileInitializer:
    """Seeds the portfolio record of an account that just finished registration."""

    collection = portfolio_db.Collections.PORTFOLIOS

    def __init__(self, store: DocumentStore):
        self.store = store

    async def seed_default(self, account_id: str, avatar_url: str = "") -> ProfileRecord:
        """
        Write the default profile at `account_id`.

        Full overwrite: any existing record is replaced, nothing is merged.
        Only the registration workflow calls this.
        """
        profile = default_profile(account_id, avatar_url)
        await self.store.put(
            self.collection,
            account_id,
            profile.model_dump(mode="json", exclude={"account_id"}),
        )
        logger.info("Seeded default profile for %s", account_id)
        return profile
