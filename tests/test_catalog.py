"""
Tests for SettingsCatalog and the commit coordinator against an in-memory
store with the same transaction contract as KeyValueStore.

The PostgreSQL-backed equivalents live in test_settings_store.py.
"""

import contextlib
import logging
import pytest

from keystore.client import StoreError
from runstate.state import RunState, RunStateChannel
from settings import codec
from settings.catalog import SettingsCatalog
from settings.commit import save
from settings.keys import REGISTRY
from settings.lifecycle import SaveState
from settings.registry import RegistryError, SettingRegistry
from settings.snapshot import UnsavedSettings
from settings.types import PublicKey


# ── In-memory store ──────────────────────────────────────────────────────────

class MemoryTxn:
    def __init__(self, store):
        self._store = store
        self.pending = {}
        self.closed = False

    def put(self, key, json_text):
        if key in self._store.fail_on:
            raise StoreError(f"forced failure on {key}", key=key, stage="write")
        self.pending[key] = json_text
        self._store.put_calls.append(key)

    def get(self, key):
        if key in self.pending:
            return (True, self.pending[key])
        return self._store.get(key)


class MemoryStore:
    """Committed dict + all-or-nothing write transactions."""

    def __init__(self):
        self.data = {}
        self.fail_on = set()
        self.fail_begin = False
        self.fail_commit = False
        self.put_calls = []
        self.commits = 0

    def get(self, key):
        if key in self.data:
            return (True, self.data[key])
        return (False, None)

    @contextlib.contextmanager
    def write_txn(self):
        if self.fail_begin:
            raise StoreError("cannot open", stage="begin")
        txn = MemoryTxn(self)
        try:
            yield txn
            if self.fail_commit:
                raise StoreError("cannot commit", stage="commit")
            self.data.update(txn.pending)
            self.commits += 1
        finally:
            txn.closed = True


class RecordingRunState:
    """Fake run-state source that records broadcasts."""

    def __init__(self, state, receivers=1):
        self.state = state
        self.receivers = receivers
        self.sent = []

    def current(self):
        return self.state

    def broadcast(self, state):
        self.sent.append(state)
        self.state = state
        return self.receivers


PK = PublicKey(bytes(range(32)))


def _modified(snapshot):
    """Change a spread of fields, covering every value type."""
    s = snapshot.copy()
    s.public_key = PK
    s.log_n = 20
    s.offline = True
    s.max_relays = 20
    s.load_more_count = 2**64 - 1
    s.pow = 8
    s.delegatee_tag = '["delegation","abc"]'
    s.max_fps = 30
    s.theme_variant = "Roundy"
    s.override_dpi = 144
    s.mouse_acceleration = 1.5
    s.fetcher_max_requests_per_host = 5
    s.cache_prune_period_days = 7
    s.blossom_servers = "https://blossom.example"
    return s


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def catalog(store):
    return SettingsCatalog(store)


# ── Catalog ──────────────────────────────────────────────────────────────────

class TestCatalogRead:

    def test_unset_key_reads_default(self, catalog):
        assert catalog.read("max_fps") == 12
        assert catalog.read("public_key") is None

    def test_read_stored_value(self, store, catalog):
        store.data["max_fps"] = "60"
        assert catalog.read("max_fps") == 60

    def test_undecodable_value_falls_back(self, store, catalog, caplog):
        store.data["max_fps"] = "{not json"
        with caplog.at_level(logging.WARNING, logger="settings.catalog"):
            assert catalog.read("max_fps") == 12
        assert "does not decode" in caplog.text

    def test_wrong_type_falls_back(self, store, catalog):
        store.data["offline"] = '"yes"'
        assert catalog.read("offline") is False

    def test_out_of_range_falls_back(self, store, catalog):
        store.data["pow"] = "999"
        assert catalog.read("pow") == 0

    def test_bad_public_key_falls_back(self, store, catalog):
        store.data["public_key"] = '{"__type__": "PublicKey", "value": "abcd"}'
        assert catalog.read("public_key") is None

    def test_store_error_falls_back(self, catalog, monkeypatch):
        def broken(key):
            raise StoreError("gone", key=key, stage="read")
        monkeypatch.setattr(catalog.store, "get", broken)
        assert catalog.read("max_relays") == 50

    def test_int_stored_for_float_reads_as_float(self, store, catalog):
        store.data["mouse_acceleration"] = "2"
        value = catalog.read("mouse_acceleration")
        assert value == 2.0
        assert isinstance(value, float)

    def test_unknown_key(self, catalog):
        from settings.registry import RegistryError
        with pytest.raises(RegistryError):
            catalog.read("no_such_setting")


class TestCatalogWrite:

    def test_write_then_read_in_txn(self, store, catalog):
        with catalog.begin_write() as txn:
            catalog.write("max_fps", 60, txn)
            assert catalog.read("max_fps", txn=txn) == 60
            assert catalog.read("max_fps") == 12
        assert catalog.read("max_fps") == 60

    def test_write_encodes_public_key(self, store, catalog):
        with catalog.begin_write() as txn:
            catalog.write("public_key", PK, txn)
        assert codec.decode(store.data["public_key"]) == PK
        assert catalog.read("public_key") == PK

    def test_rejected_value_raises_store_error(self, catalog):
        with pytest.raises(StoreError) as exc:
            with catalog.begin_write() as txn:
                catalog.write("max_relays", 256, txn)
        assert exc.value.key == "max_relays"
        assert exc.value.stage == "write"

    def test_float_written_for_int_value(self, store, catalog):
        with catalog.begin_write() as txn:
            catalog.write("mouse_acceleration", 2, txn)
        assert store.data["mouse_acceleration"] == "2.0"

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_float_rejected(self, store, catalog, value):
        with pytest.raises(StoreError) as exc:
            with catalog.begin_write() as txn:
                catalog.write("mouse_acceleration", value, txn)
        assert exc.value.key == "mouse_acceleration"
        assert exc.value.stage == "write"
        assert store.data == {}

    def test_stored_nan_reads_as_default(self, store, catalog):
        store.data["mouse_acceleration"] = "NaN"
        assert catalog.read("mouse_acceleration") == 1.0


class TestPerKeyAccessors:

    def test_default_accessor(self, catalog):
        assert catalog.default_max_fps() == 12
        assert catalog.default_cache_prune_period_days() == 30

    def test_read_write_accessors(self, catalog):
        with catalog.begin_write() as txn:
            catalog.write_dark_mode(True, txn)
        assert catalog.read_dark_mode() is True

    def test_unknown_accessor(self, catalog):
        with pytest.raises(AttributeError):
            catalog.read_no_such_setting()
        with pytest.raises(AttributeError):
            catalog.frobnicate

    def test_every_key_has_accessors(self, catalog):
        for name in REGISTRY.names():
            assert callable(getattr(catalog, f"default_{name}"))
            assert callable(getattr(catalog, f"read_{name}"))
            assert callable(getattr(catalog, f"write_{name}"))


# ── Save ─────────────────────────────────────────────────────────────────────

class TestSave:

    def test_roundtrip_defaults(self, catalog):
        original = UnsavedSettings.with_defaults()
        save(original, catalog, RecordingRunState(RunState.OFFLINE))
        assert UnsavedSettings.load(catalog) == original

    def test_roundtrip_modified(self, catalog):
        staged = _modified(UnsavedSettings.with_defaults())
        staged.save(catalog, RecordingRunState(RunState.INITIALIZING))
        assert UnsavedSettings.load(catalog) == staged

    def test_writes_every_key_in_registry_order(self, store, catalog):
        report = save(UnsavedSettings.with_defaults(), catalog,
                      RecordingRunState(RunState.OFFLINE))
        assert store.put_calls == REGISTRY.names()
        assert report.keys_written == len(REGISTRY)
        assert report.state == SaveState.RECONCILED
        assert report.history == [
            SaveState.IDLE, SaveState.TRANSACTION_OPEN,
            SaveState.ALL_FIELDS_WRITTEN, SaveState.COMMITTED,
            SaveState.RECONCILED,
        ]

    def test_idempotent(self, store, catalog):
        staged = _modified(UnsavedSettings.with_defaults())
        rs = RecordingRunState(RunState.OFFLINE)
        save(staged, catalog, rs)
        once = dict(store.data)
        save(staged, catalog, rs)
        assert store.data == once
        assert UnsavedSettings.load(catalog) == staged

    def test_staging_does_not_touch_store(self, store, catalog):
        staged = UnsavedSettings.load(catalog)
        staged.offline = True
        staged.max_fps = 60
        assert store.data == {}
        assert store.put_calls == []

    @pytest.mark.parametrize("failing_key", ["public_key", "max_fps", "blossom_servers"])
    def test_failed_write_leaves_everything_unchanged(self, store, catalog, failing_key):
        before = _modified(UnsavedSettings.with_defaults())
        save(before, catalog, RecordingRunState(RunState.ONLINE))
        committed = dict(store.data)

        staged = UnsavedSettings.with_defaults()
        staged.dark_mode = True
        store.fail_on = {failing_key}
        rs = RecordingRunState(RunState.ONLINE)

        with pytest.raises(StoreError) as exc:
            save(staged, catalog, rs)

        assert exc.value.key == failing_key
        assert store.data == committed
        assert UnsavedSettings.load(catalog) == before
        assert rs.sent == []
        # stops at the first failure
        names = REGISTRY.names()
        assert store.put_calls[len(names):] == names[:names.index(failing_key)]

    def test_invalid_value_aborts_whole_save(self, store, catalog):
        staged = UnsavedSettings.with_defaults()
        staged.offline = True
        staged.fetcher_timeout_sec = -1
        rs = RecordingRunState(RunState.ONLINE)
        with pytest.raises(StoreError, match="fetcher_timeout_sec"):
            save(staged, catalog, rs)
        assert store.data == {}
        assert rs.sent == []
        # the staged snapshot is untouched
        assert staged.fetcher_timeout_sec == -1
        assert staged.offline is True

    def test_any_value_of_the_key_type_round_trips(self, store, catalog):
        staged = UnsavedSettings.with_defaults()
        staged.max_fps = 144
        staged.num_relays_per_person = 6
        staged.log_n = 0
        staged.mouse_acceleration = 25.0
        staged.fetcher_max_requests_per_host = 0
        save(staged, catalog, RecordingRunState(RunState.ONLINE))
        loaded = UnsavedSettings.load(catalog)
        assert loaded.max_fps == 144
        assert loaded.num_relays_per_person == 6
        assert loaded == staged

    def test_nan_aborts_whole_save(self, store, catalog):
        staged = UnsavedSettings.with_defaults()
        staged.mouse_acceleration = float("nan")
        with pytest.raises(StoreError) as exc:
            save(staged, catalog, RecordingRunState(RunState.ONLINE))
        assert exc.value.key == "mouse_acceleration"
        assert exc.value.stage == "write"
        assert store.data == {}

    def test_catalog_with_other_registry_rejected(self, store):
        other = SettingRegistry()
        other.define("offline", bool, description="Offline", default=False)
        catalog = SettingsCatalog(store, other)
        with pytest.raises(RegistryError, match="different setting registries"):
            UnsavedSettings.load(catalog)
        with pytest.raises(RegistryError, match="different setting registries"):
            save(UnsavedSettings.with_defaults(), catalog,
                 RecordingRunState(RunState.ONLINE))
        assert store.put_calls == []

    def test_begin_failure(self, store, catalog):
        store.fail_begin = True
        with pytest.raises(StoreError) as exc:
            save(UnsavedSettings.with_defaults(), catalog,
                 RecordingRunState(RunState.ONLINE))
        assert exc.value.stage == "begin"
        assert store.put_calls == []

    def test_commit_failure_skips_reconcile(self, store, catalog):
        store.fail_commit = True
        staged = UnsavedSettings.with_defaults()
        staged.offline = True
        rs = RecordingRunState(RunState.ONLINE)
        with pytest.raises(StoreError) as exc:
            save(staged, catalog, rs)
        assert exc.value.stage == "commit"
        assert store.data == {}
        assert rs.sent == []


class TestSaveReconcile:

    def test_going_offline(self, catalog):
        staged = UnsavedSettings.with_defaults()
        staged.offline = True
        rs = RecordingRunState(RunState.ONLINE)
        report = save(staged, catalog, rs)
        assert rs.sent == [RunState.OFFLINE]
        assert report.run_state_change == RunState.OFFLINE

    def test_going_online(self, catalog):
        staged = UnsavedSettings.with_defaults()
        staged.offline = False
        rs = RecordingRunState(RunState.OFFLINE)
        report = save(staged, catalog, rs)
        assert rs.sent == [RunState.ONLINE]
        assert report.run_state_change == RunState.ONLINE

    def test_already_consistent(self, catalog):
        staged = UnsavedSettings.with_defaults()
        rs = RecordingRunState(RunState.ONLINE)
        report = save(staged, catalog, rs)
        assert rs.sent == []
        assert report.run_state_change is None

    def test_no_listeners_is_not_an_error(self, catalog):
        staged = UnsavedSettings.with_defaults()
        staged.offline = True
        rs = RecordingRunState(RunState.ONLINE, receivers=0)
        report = save(staged, catalog, rs)
        assert report.state == SaveState.RECONCILED
        assert rs.sent == [RunState.OFFLINE]

    def test_with_real_channel(self, catalog):
        channel = RunStateChannel(RunState.OFFLINE)
        seen = []
        channel.subscribe(seen.append)
        save(UnsavedSettings.with_defaults(), catalog, channel)
        assert channel.current() == RunState.ONLINE
        assert seen == [RunState.ONLINE]
