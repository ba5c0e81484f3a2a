"""
Database schema: the settings table, one row per setting key.
All DDL runs as the owner role.
"""

OWNER_ROLE = "settings_owner"

# Advisory lock id taken by every write transaction; serializes writers.
WRITER_LOCK_ID = 0x5E7715


def bootstrap_schema(owner_conn):
    """Create the settings table. Idempotent."""
    owner_conn.autocommit = True
    with owner_conn.cursor() as cur:
        cur.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                key         TEXT PRIMARY KEY,
                value       JSONB NOT NULL,
                updated_at  TIMESTAMPTZ NOT NULL DEFAULT now()
            );
        """)


def truncate(owner_conn):
    """Remove every stored setting. Used to reset test databases."""
    owner_conn.autocommit = True
    with owner_conn.cursor() as cur:
        cur.execute("TRUNCATE settings;")
