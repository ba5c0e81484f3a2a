"""
Transactional key/value store for settings, backed by PostgreSQL JSONB.
"""

from keystore.client import KeyValueStore, StoreError, WriteTxn
from keystore.server import SettingsStoreServer
