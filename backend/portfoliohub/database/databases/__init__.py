"""
Database definitions and collection constants.
"""
from portfoliohub.database.databases import identity_db, portfolio_db, system_db

__all__ = ["identity_db", "portfolio_db", "system_db"]
