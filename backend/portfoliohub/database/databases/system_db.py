"""
System database configuration.
Cross-database registry and background job history.
"""

DB_NAME = "system_db"


class Collections:
    """Collection names in system_db."""
    DB_REGISTRY = "db_registry"
    RECONCILE_RUNS = "reconcile_runs"
    METADATA = "_metadata"


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "Database registry and username reconciliation history",
    "collections": [
        Collections.DB_REGISTRY,
        Collections.RECONCILE_RUNS,
        Collections.METADATA,
    ],
    "access_level": "system",
}
