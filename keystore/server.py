"""
Embedded PostgreSQL server holding the settings table.
Uses pgserver for pip-installable PostgreSQL binaries.
"""

import logging
import os
import urllib.parse

import psycopg2

import pgserver

from keystore.schema import OWNER_ROLE, bootstrap_schema


logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(
    os.path.dirname(__file__), "..", ".pgdata", "settings"
)

OWNER_PASSWORD = "settings_secret"  # override with SETTINGS_ADMIN_PASSWORD


class SettingsStoreServer:
    """Manages an embedded PostgreSQL instance for the settings store.

    Configuration is taken from the arguments, then from the environment
    (SETTINGS_DATA_DIR, SETTINGS_ADMIN_PASSWORD), then from the module
    defaults.
    """

    def __init__(self, data_dir=None, admin_password=None):
        self.data_dir = os.path.abspath(
            data_dir or os.environ.get("SETTINGS_DATA_DIR") or DEFAULT_DATA_DIR
        )
        self.admin_password = (
            admin_password
            or os.environ.get("SETTINGS_ADMIN_PASSWORD")
            or OWNER_PASSWORD
        )
        self._pg = None

    def start(self):
        """Start the embedded PostgreSQL server and bootstrap if needed."""
        os.makedirs(self.data_dir, exist_ok=True)
        self._pg = pgserver.get_server(self.data_dir)
        self._bootstrap()
        logger.info("Settings store running in %s", self.data_dir)
        return self

    # ── Internal ─────────────────────────────────────────────────────

    def _superuser_conn(self):
        """Get a superuser connection (local socket, trust auth)."""
        return psycopg2.connect(self._pg.get_uri())

    def _bootstrap(self):
        """Create the owner role and the settings table. Idempotent."""
        conn = self._superuser_conn()
        conn.autocommit = True
        with conn.cursor() as cur:
            cur.execute(
                "SELECT 1 FROM pg_roles WHERE rolname = %s", (OWNER_ROLE,)
            )
            if cur.fetchone() is None:
                cur.execute(
                    f"CREATE ROLE {OWNER_ROLE} LOGIN PASSWORD %s "
                    f"NOSUPERUSER NOCREATEDB NOCREATEROLE",
                    (self.admin_password,),
                )
            else:
                cur.execute(
                    f"ALTER ROLE {OWNER_ROLE} PASSWORD %s", (self.admin_password,),
                )
            cur.execute(f"GRANT CREATE, USAGE ON SCHEMA public TO {OWNER_ROLE};")
        conn.close()

        owner_conn = self.admin_conn()
        bootstrap_schema(owner_conn)
        owner_conn.close()

    # ── Public API ───────────────────────────────────────────────────

    def admin_conn(self):
        """Get a connection as the owner role (password auth)."""
        info = self.conn_info()
        return psycopg2.connect(
            host=info["host"],
            port=info["port"],
            dbname=info["dbname"],
            user=OWNER_ROLE,
            password=self.admin_password,
        )

    def client(self):
        """Return a KeyValueStore connected as the owner role."""
        from keystore.client import KeyValueStore
        info = self.conn_info()
        return KeyValueStore(
            user=OWNER_ROLE, password=self.admin_password,
            host=info["host"], port=info["port"], dbname=info["dbname"],
        )

    def conn_info(self):
        """Return connection parameters for this server."""
        uri = self._pg.get_uri()
        parsed = urllib.parse.urlparse(uri)
        params = urllib.parse.parse_qs(parsed.query)

        dbname = parsed.path.lstrip("/") or "postgres"
        host = params.get("host", ["/tmp"])[0]
        port = parsed.port or 5432

        return {
            "host": host,
            "port": port,
            "dbname": dbname,
        }

    def stop(self):
        """Stop the embedded PostgreSQL server."""
        if self._pg:
            self._pg.cleanup()
            self._pg = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        self.stop()
