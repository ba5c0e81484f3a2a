"""
Commit coordinator: writes a whole snapshot back in one transaction.

Either every key moves to the snapshot's value or none does. Only after the
commit is the process run-state reconciled with the `offline` field.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from keystore.client import StoreError
from runstate.reconciler import reconcile_run_state
from runstate.state import RunState
from settings.lifecycle import SaveState, SaveTracker
from settings.registry import RegistryError


logger = logging.getLogger(__name__)


def check_registry(snapshot_cls, catalog):
    """Raise RegistryError unless catalog serves the registry snapshot_cls mirrors."""
    if catalog.registry is not snapshot_cls._registry:
        raise RegistryError(
            f"{snapshot_cls.__name__} and the catalog use different setting registries"
        )


@dataclass
class SaveReport:
    """Outcome of a successful save."""
    state: SaveState
    keys_written: int
    run_state_change: Optional[RunState] = None
    history: list = field(default_factory=list)


def save(snapshot, catalog, run_state) -> SaveReport:
    """
    Persist every field of snapshot through a single write transaction.

    Keys are written in registry order. The first failing write aborts the
    transaction and its StoreError propagates unchanged; nothing is
    committed and run-state is left alone. The snapshot itself is never
    modified.
    """
    check_registry(type(snapshot), catalog)
    tracker = SaveTracker()
    names = catalog.registry.names()
    written = 0

    try:
        with catalog.begin_write() as txn:
            tracker.advance(SaveState.TRANSACTION_OPEN)
            for key in names:
                try:
                    catalog.write(key, getattr(snapshot, key), txn)
                except StoreError:
                    tracker.advance(SaveState.WRITE_FAILED)
                    raise
                written += 1
            tracker.advance(SaveState.ALL_FIELDS_WRITTEN)
    except StoreError as e:
        tracker.advance(SaveState.ABORTED)
        logger.warning(
            "Settings save aborted at stage %s after %d of %d writes: %s",
            e.stage, written, len(names), e,
        )
        raise

    tracker.advance(SaveState.COMMITTED)
    logger.info("Saved %d settings", written)

    change = reconcile_run_state(snapshot.offline, run_state)
    tracker.advance(SaveState.RECONCILED)

    return SaveReport(
        state=tracker.state,
        keys_written=written,
        run_state_change=change,
        history=list(tracker.history),
    )
