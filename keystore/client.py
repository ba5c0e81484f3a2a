"""
KeyValueStore: one row per key, JSONB values, all-or-nothing write batches.

Reads run in autocommit mode and only ever see committed state.
Writes go through write_txn(), a scoped transaction that commits on a
clean exit and rolls back on any exception.
"""

import contextlib
import logging

import psycopg2

from keystore.schema import WRITER_LOCK_ID


logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when opening, writing to, committing, or reading the store fails.

    stage is one of "begin", "write", "commit", "read".
    key is the setting key involved, if any.
    """

    def __init__(self, message, key=None, stage=None):
        self.key = key
        self.stage = stage
        super().__init__(message)


class WriteTxn:
    """An open write transaction. Only valid inside KeyValueStore.write_txn()."""

    def __init__(self, conn):
        self._conn = conn
        self._closed = False
        self.keys_written = []

    @property
    def closed(self):
        return self._closed

    def put(self, key, json_text):
        """Insert or replace the value stored under key."""
        self._check_open(key)
        try:
            with self._conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO settings (key, value)
                    VALUES (%s, %s::jsonb)
                    ON CONFLICT (key) DO UPDATE
                        SET value = EXCLUDED.value,
                            updated_at = now()
                    """,
                    (key, json_text),
                )
        except psycopg2.Error as e:
            raise StoreError(
                f"Failed to write setting '{key}': {e}", key=key, stage="write"
            ) from e
        self.keys_written.append(key)

    def get(self, key):
        """Read key as seen from inside this transaction.

        Returns (found, json_text).
        """
        self._check_open(key)
        try:
            return _select(self._conn, key)
        except psycopg2.Error as e:
            raise StoreError(
                f"Failed to read setting '{key}': {e}", key=key, stage="read"
            ) from e

    def _check_open(self, key):
        if self._closed:
            raise StoreError(
                "Write transaction is no longer open", key=key, stage="write"
            )


class KeyValueStore:
    """
    Connects to the settings store.

    Usage:
        store = KeyValueStore(user="settings_owner", password="secret",
                              host="/tmp/pg", port=5432)
        with store.write_txn() as txn:
            txn.put("offline", "true")
            txn.put("max_fps", "30")
        found, text = store.get("offline")
        store.close()
    """

    def __init__(self, user, password, host="localhost", port=5432, dbname="postgres"):
        self.user = user
        self.conn = psycopg2.connect(
            host=host,
            port=port,
            dbname=dbname,
            user=user,
            password=password,
        )
        self.conn.autocommit = True

    # ── Write ─────────────────────────────────────────────────────────

    @contextlib.contextmanager
    def write_txn(self):
        """
        Open a write transaction. Yields a WriteTxn.

        Writers are serialized with a transaction-scoped advisory lock, so
        this blocks while another writer holds the lock. Commits when the
        block exits normally; rolls back and re-raises otherwise. Any
        psycopg2 failure surfaces as StoreError.
        """
        txn = None
        try:
            try:
                self.conn.autocommit = False
                with self.conn.cursor() as cur:
                    cur.execute("SELECT pg_advisory_xact_lock(%s)", (WRITER_LOCK_ID,))
            except psycopg2.Error as e:
                self._rollback()
                raise StoreError(
                    f"Could not open write transaction: {e}", stage="begin"
                ) from e

            txn = WriteTxn(self.conn)
            logger.debug("Write transaction opened")
            try:
                yield txn
            except BaseException:
                self._rollback()
                logger.debug(
                    "Write transaction rolled back after %d writes",
                    len(txn.keys_written),
                )
                raise

            try:
                self.conn.commit()
            except psycopg2.Error as e:
                self._rollback()
                raise StoreError(
                    f"Failed to commit write transaction: {e}", stage="commit"
                ) from e
            logger.debug(
                "Write transaction committed (%d keys)", len(txn.keys_written)
            )
        finally:
            if txn is not None:
                txn._closed = True
            if not self.conn.closed:
                self.conn.autocommit = True

    # ── Read ──────────────────────────────────────────────────────────

    def get(self, key):
        """Read the committed value of key. Returns (found, json_text)."""
        try:
            return _select(self.conn, key)
        except psycopg2.Error as e:
            raise StoreError(
                f"Failed to read setting '{key}': {e}", key=key, stage="read"
            ) from e

    def keys(self):
        """List every stored key, sorted."""
        try:
            with self.conn.cursor() as cur:
                cur.execute("SELECT key FROM settings ORDER BY key")
                return [row[0] for row in cur.fetchall()]
        except psycopg2.Error as e:
            raise StoreError(f"Failed to list settings: {e}", stage="read") from e

    def count(self):
        """Number of stored keys."""
        try:
            with self.conn.cursor() as cur:
                cur.execute("SELECT COUNT(*) FROM settings")
                return cur.fetchone()[0]
        except psycopg2.Error as e:
            raise StoreError(f"Failed to count settings: {e}", stage="read") from e

    # ── Internal helpers ──────────────────────────────────────────────

    def _rollback(self):
        if self.conn.closed:
            return
        try:
            self.conn.rollback()
        except psycopg2.Error:
            logger.exception("Rollback failed")

    def close(self):
        """Close the database connection."""
        if self.conn and not self.conn.closed:
            self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def _select(conn, key):
    with conn.cursor() as cur:
        cur.execute("SELECT value::text FROM settings WHERE key = %s", (key,))
        row = cur.fetchone()
        if row is None:
            return (False, None)
        return (True, row[0])
