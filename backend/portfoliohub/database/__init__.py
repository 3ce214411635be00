"""
Database module - MongoDB and Redis connections and database definitions.
"""
from portfoliohub.database.connections import (
    get_mongo_client,
    get_redis_client,
    close_connections,
)
from portfoliohub.database.databases import identity_db, portfolio_db, system_db

__all__ = [
    "get_mongo_client",
    "get_redis_client",
    "close_connections",
    "identity_db",
    "portfolio_db",
    "system_db",
]
