"""
Portfolio database configuration.
Accounts, the username registry and the editable portfolio records.
"""

DB_NAME = "portfolio_db"


class Collections:
    """Collection names in portfolio_db."""
    ACCOUNTS = "accounts"
    USERNAMES = "usernames"
    PORTFOLIOS = "portfolios"
    METADATA = "_metadata"


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "Accounts, username registry and portfolio content",
    "collections": [
        Collections.ACCOUNTS,
        Collections.USERNAMES,
        Collections.PORTFOLIOS,
        Collections.METADATA,
    ],
    "access_level": "standard",
}
