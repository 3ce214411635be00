#!/usr/bin/env python3
"""
Username Reconciliation Worker

Periodically releases username claims whose registration never finished:
the owner has no Account, or the owner's Account holds a different username.
Claims younger than the grace period are left alone.

Usage:
    python reconcile_usernames.py [--once]

Environment Variables:
    MONGO_URI: MongoDB connection string
    RECONCILE_GRACE_MINUTES: Minimum claim age before release (default: 30)
    RECONCILE_INTERVAL_MINUTES: Minutes between passes (default: 15)
    LOG_LEVEL: Logging level (default: INFO)
"""
import argparse
import asyncio
import logging
import signal
import sys
from datetime import datetime, timedelta, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from portfoliohub.config import get_settings
from portfoliohub.database.databases import portfolio_db, system_db
from portfoliohub.services.document_store import DocumentStore
from portfoliohub.services.username_reconciler import ReconcileReport, UsernameReconciler

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("username_reconcile")


class UsernameReconcileWorker:
    """Runs UsernameReconciler on a fixed interval."""

    def __init__(
        self,
        grace_minutes: int = settings.reconcile_grace_minutes,
        interval_minutes: int = settings.reconcile_interval_minutes,
    ):
        self.grace = timedelta(minutes=grace_minutes)
        self.interval_minutes = interval_minutes
        self.client: Optional[AsyncIOMotorClient] = None
        self.reconciler: Optional[UsernameReconciler] = None
        self.running = False

    async def connect(self, client: Optional[AsyncIOMotorClient] = None):
        """Connect to MongoDB."""
        self.client = client or AsyncIOMotorClient(settings.mongo_uri)
        store = DocumentStore(self.client[portfolio_db.DB_NAME])
        self.reconciler = UsernameReconciler(store)
        logger.info(f"Connected to MongoDB: {portfolio_db.DB_NAME}")

    async def disconnect(self):
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            self.client = None

    async def run_once(self) -> ReconcileReport:
        """Single reconciliation pass."""
        if self.reconciler is None:
            raise RuntimeError("Worker is not connected")

        started_at = datetime.now(timezone.utc)
        report = await self.reconciler.run(self.grace, now=started_at)
        await self.record_run(started_at, report)
        logger.info(
            f"Reconcile pass: scanned={report.scanned} "
            f"released={len(report.released)} skipped_recent={report.skipped_recent}"
        )
        return report

    async def record_run(self, started_at: datetime, report: ReconcileReport):
        """Append the pass summary to system_db.reconcile_runs."""
        runs = self.client[system_db.DB_NAME][system_db.Collections.RECONCILE_RUNS]
        await runs.insert_one({
            "started_at": started_at,
            "finished_at": datetime.now(timezone.utc),
            "grace_minutes": int(self.grace.total_seconds() // 60),
            "scanned": report.scanned,
            "released": report.released,
            "skipped_recent": report.skipped_recent,
        })

    async def run(self):
        """Main worker loop."""
        self.running = True

        while self.running:
            try:
                await self.run_once()

                logger.info(f"Sleeping {self.interval_minutes} minutes until next pass...")
                await asyncio.sleep(self.interval_minutes * 60)

            except asyncio.CancelledError:
                logger.info("Worker cancelled")
                break
            except Exception as e:
                logger.error(f"Error in reconcile loop: {e}")
                await asyncio.sleep(60)

    def stop(self):
        """Stop the worker gracefully."""
        logger.info("Stopping worker...")
        self.running = False


# ==================== Main Entry Point ====================

async def main(once: bool = False):
    """Main entry point."""
    worker = UsernameReconcileWorker()

    loop = asyncio.get_running_loop()

    def shutdown_handler(sig):
        logger.info(f"Received signal {sig.name}")
        worker.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: shutdown_handler(s))

    try:
        await worker.connect()
        if once:
            await worker.run_once()
        else:
            await worker.run()
    except Exception as e:
        logger.error(f"Worker error: {e}")
        sys.exit(1)
    finally:
        await worker.disconnect()
        logger.info("Worker shutdown complete")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Release orphaned username claims")
    parser.add_argument("--once", action="store_true", help="Run a single pass and exit")
    args = parser.parse_args()

    logger.info("=" * 60)
    logger.info("Username Reconciliation Worker")
    logger.info(f"Grace period: {settings.reconcile_grace_minutes} minutes")
    logger.info(f"Interval: {settings.reconcile_interval_minutes} minutes")
    logger.info("=" * 60)

    asyncio.run(main(once=args.once))
