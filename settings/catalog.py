"""
SettingsCatalog: typed default/read/write access to every setting key.

Reads never fail: a key that was never written, holds a value that no
longer decodes or fits its definition, or cannot be read at all comes back
as its default. Writes validate the value and go through an open write
transaction; any failure raises StoreError.

Per-key accessors are resolved from the registry:

    catalog.default_max_fps()          # 12
    catalog.read_offline()             # False unless stored
    with catalog.begin_write() as txn:
        catalog.write_offline(True, txn)
"""

import functools
import logging

from keystore.client import StoreError
from settings import codec
from settings.keys import REGISTRY


logger = logging.getLogger(__name__)

_ACCESSOR_PREFIXES = ("default_", "read_", "write_")


class SettingsCatalog:
    """Typed access to the setting keys of a KeyValueStore."""

    def __init__(self, store, registry=None):
        self.store = store
        self.registry = registry if registry is not None else REGISTRY

    def default(self, key):
        """The key's default. Independent of anything stored."""
        return self.registry.default(key)

    def read(self, key, txn=None):
        """The key's persisted value, or its default.

        With txn, reads through that open write transaction.
        """
        setting = self.registry.get(key)
        source = txn if txn is not None else self.store
        try:
            found, text = source.get(key)
        except StoreError as e:
            logger.warning("Reading setting %r failed, using default: %s", key, e)
            return self.default(key)
        if not found:
            return self.default(key)

        try:
            value = codec.decode(text)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Stored value of %r does not decode, using default: %s", key, e)
            return self.default(key)

        errors = self.registry.validate_value(key, value)
        if errors:
            logger.warning(
                "Stored value of %r is invalid, using default: %s",
                key, "; ".join(errors),
            )
            return self.default(key)
        return _coerce(setting, value)

    def write(self, key, value, txn):
        """Write value under key inside txn. Raises StoreError."""
        setting = self.registry.get(key)
        errors = self.registry.validate_value(key, value)
        if errors:
            raise StoreError(
                f"Rejected value for setting '{key}': {'; '.join(errors)}",
                key=key, stage="write",
            )
        txn.put(key, codec.encode(_coerce(setting, value)))

    def begin_write(self):
        """Open a scoped write transaction on the underlying store."""
        return self.store.write_txn()

    def __getattr__(self, name):
        registry = self.__dict__.get("registry")
        if registry is None or name.startswith("_"):
            raise AttributeError(name)
        for prefix in _ACCESSOR_PREFIXES:
            if name.startswith(prefix):
                key = name[len(prefix):]
                if registry.has(key):
                    method = getattr(self, prefix.rstrip("_"))
                    return functools.partial(method, key)
        raise AttributeError(
            f"'{type(self).__name__}' object has no attribute '{name}'"
        )


def _coerce(setting, value):
    # ints are accepted for float settings; store and return them as floats
    if setting.python_type is float and value is not None:
        return float(value)
    return value
