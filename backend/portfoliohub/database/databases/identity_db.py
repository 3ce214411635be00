"""
Identity database configuration.
Stores principals owned by the identity provider (credentials, federated links).
"""

DB_NAME = "identity_db"


class Collections:
    """Collection names in identity_db."""
    PRINCIPALS = "principals"
    METADATA = "_metadata"


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "Principals for password and federated sign-in",
    "collections": [Collections.PRINCIPALS, Collections.METADATA],
    "access_level": "restricted",
}
