"""
Username registry: global, case-insensitive reservation of public usernames.
"""
import logging
import re
from typing import Optional

from portfoliohub.core.exceptions import UsernameTakenError, ValidationError
from portfoliohub.database.databases import portfolio_db
from portfoliohub.models.account import UsernameRegistryEntry
from portfoliohub.services.document_store import DocumentStore

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def normalize(candidate: str) -> str:
    """Registry key for a username: the validated name, lower-cased."""
    return candidate.lower()


def validate_format(candidate: str) -> None:
    """
    Check a raw username against the format rules. Performs no I/O.

    Raises:
        ValidationError: scoped to the "username" field
    """
    if len(candidate) < USERNAME_MIN_LENGTH:
        raise ValidationError(
            f"Username must be at least {USERNAME_MIN_LENGTH} characters.",
            field="username",
        )
    if len(candidate) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be no more than {USERNAME_MAX_LENGTH} characters.",
            field="username",
        )
    if not USERNAME_PATTERN.fullmatch(candidate):
        raise ValidationError(
            "Username can only contain letters, numbers, and underscores.",
            field="username",
        )


class UsernameRegistry:
    """Maps normalized usernames to owning account identifiers."""

    collection = portfolio_db.Collections.USERNAMES

    def __init__(self, store: DocumentStore):
        self.store = store

    @staticmethod
    def _entry(key: str, account_id: str) -> dict:
        return UsernameRegistryEntry(_id=key, account_id=account_id).model_dump(exclude={"username"})

    async def is_available(self, candidate: str) -> bool:
        """
        Validate and normalize `candidate`, then look the key up.
        True iff no registry entry exists. Never writes.
        """
        validate_format(candidate)
        entry = await self.store.get(self.collection, normalize(candidate))
        return entry is None

    async def is_available_for(self, candidate: str, account_id: str) -> bool:
        """Like is_available, but a key already held by `account_id` counts as available."""
        validate_format(candidate)
        entry = await self.store.get(self.collection, normalize(candidate))
        return entry is None or entry.get("account_id") == account_id

    async def owner_of(self, candidate: str) -> Optional[str]:
        """Account id holding the username, or None."""
        entry = await self.store.get(self.collection, normalize(candidate))
        return entry["account_id"] if entry else None

    async def claim(self, candidate: str, account_id: str) -> None:
        """
        Unconditional claim: overwrite the entry at the normalized key.

        No error if another account already held the key; the last write wins.
        Two registrations that both saw "available" end with the registry
        pointing at whichever claim landed second.
        """
        key = normalize(candidate)
        await self.store.put(self.collection, key, self._entry(key, account_id))
        logger.info("Username %r claimed (overwrite) by %s", key, account_id)

    async def claim_exclusive(self, candidate: str, account_id: str) -> None:
        """
        Create-if-absent claim.

        Re-claiming a key already owned by `account_id` succeeds, so an
        interrupted registration can be retried.

        Raises:
            UsernameTakenError: if another account owns the key
        """
        key = normalize(candidate)
        created = await self.store.create(self.collection, key, self._entry(key, account_id))
        if created:
            logger.info("Username %r claimed by %s", key, account_id)
            return

        owner = await self.owner_of(key)
        if owner == account_id:
            logger.info("Username %r already held by %s, claim is a no-op", key, account_id)
            return

        logger.info("Username %r claim by %s lost to %s", key, account_id, owner)
        raise UsernameTakenError(key)

    async def release(self, candidate: str, account_id: str) -> bool:
        """Drop the entry, but only while `account_id` still owns it."""
        key = normalize(candidate)
        released = await self.store.delete_if(self.collection, key, "account_id", account_id)
        if released:
            logger.info("Username %r released by %s", key, account_id)
        return released
