"""
Database registry management.
Ensures all databases are registered and indexed on startup.
"""
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorClient

from portfoliohub.database.databases import identity_db, portfolio_db, system_db

ALL_DB_MANIFESTS = [
    identity_db.DB_MANIFEST,
    portfolio_db.DB_MANIFEST,
    system_db.DB_MANIFEST,
]


async def sync_registry(client: AsyncIOMotorClient) -> None:
    """
    Synchronize the database registry on application startup.
    Upserts one system_db.db_registry entry per database manifest and
    stamps each database's _metadata document.
    """
    registry_collection = client[system_db.DB_NAME][system_db.Collections.DB_REGISTRY]
    now = datetime.now(timezone.utc)

    for manifest in ALL_DB_MANIFESTS:
        db_name = manifest["db_name"]

        await registry_collection.update_one(
            {"_id": db_name},
            {
                "$set": {
                    "purpose": manifest["purpose"],
                    "collections": manifest["collections"],
                    "access_level": manifest["access_level"],
                    "schema_version": "1.0",
                    "updated_at": now,
                },
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )

        await client[db_name]["_metadata"].update_one(
            {"_id": "db_metadata"},
            {
                "$set": {"db_name": db_name, "last_updated_at": now},
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )


async def create_indexes(client: AsyncIOMotorClient) -> None:
    """Create necessary indexes for all databases."""

    # Identity DB: one principal per (provider, subject). Password principals use
    # the lower-cased email as their subject, so this also makes emails unique.
    principals = client[identity_db.DB_NAME][identity_db.Collections.PRINCIPALS]
    await principals.create_index(
        [("provider", 1), ("provider_subject", 1)],
        unique=True,
    )
    await principals.create_index("email")

    # Portfolio DB: public page lookup resolves accounts by username.
    # Not unique: the registry collection's _id is the uniqueness point.
    portfolio = client[portfolio_db.DB_NAME]
    await portfolio[portfolio_db.Collections.ACCOUNTS].create_index("username")
    await portfolio[portfolio_db.Collections.USERNAMES].create_index("account_id")
