"""
Releases username claims left behind by registrations that never finished.

A claim is orphaned when its owner has no Account (the workflow died before
the Account write) or when the owner's Account ended up with a different
username (the user retried with another name). Claims younger than the
grace period are skipped so in-flight registrations are not disturbed.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from portfoliohub.database.databases import portfolio_db
from portfoliohub.services.document_store import DocumentStore
from portfoliohub.services.username_registry import UsernameRegistry

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    scanned: int = 0
    released: list[str] = field(default_factory=list)
    skipped_recent: int = 0


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # MongoDB hands datetimes back naive (UTC)
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UsernameReconciler:
    """Scans the registry and releases orphaned claims."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.registry = UsernameRegistry(store)

    async def run(self, grace: timedelta, now: Optional[datetime] = None) -> ReconcileReport:
        now = now or datetime.now(timezone.utc)
        cutoff = now - grace
        report = ReconcileReport()

        entries = await self.store.scan(portfolio_db.Collections.USERNAMES)
        for entry in entries:
            report.scanned += 1
            username = entry["_id"]
            owner = entry.get("account_id")

            claimed_at = _as_utc(entry.get("claimed_at"))
            if claimed_at is not None and claimed_at > cutoff:
                report.skipped_recent += 1
                continue

            account = await self.store.get(portfolio_db.Collections.ACCOUNTS, owner) if owner else None
            if account is not None and account.get("username") == username:
                continue

            if await self.registry.release(username, owner):
                report.released.append(username)

        if report.released:
            logger.info(
                "Released %d orphaned username claim(s): %s",
                len(report.released),
                ", ".join(report.released),
            )
        return report
