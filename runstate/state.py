"""
RunState and the channel that holds and broadcasts it.

The current value lives in a reaktiv Signal so reactive consumers can
derive from it; plain callbacks subscribe to be told about every broadcast.
"""

import logging
import threading
from enum import Enum

from reaktiv import Signal


logger = logging.getLogger(__name__)


class RunState(str, Enum):
    """Phases of the process."""
    INITIALIZING = "Initializing"
    OFFLINE = "Offline"
    ONLINE = "Online"
    SHUTTING_DOWN = "ShuttingDown"


class RunStateChannel:
    """
    Process-wide run-state with change notification.

    Usage:
        channel = RunStateChannel(RunState.ONLINE)
        channel.subscribe(lambda state: print("now", state))
        channel.broadcast(RunState.OFFLINE)
        channel.current()  # RunState.OFFLINE

    Thread-safe for concurrent broadcast/subscribe. Broadcasts are
    serialized: listeners see states in the order current() takes them.
    """

    def __init__(self, initial=RunState.INITIALIZING):
        self.signal = Signal(initial)
        self._listeners = []
        self._lock = threading.Lock()
        # Reentrant so a listener may broadcast
        self._broadcast_lock = threading.RLock()

    def current(self):
        """The current run-state."""
        return self.signal()

    def subscribe(self, callback):
        """Call callback(state) on every broadcast."""
        with self._lock:
            self._listeners.append(callback)

    def unsubscribe(self, callback):
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def broadcast(self, state):
        """Set the run-state and notify subscribers.

        Returns the number of subscribers notified. Zero means nobody is
        listening; the new state is still recorded.
        """
        state = RunState(state)
        with self._broadcast_lock:
            self.signal.set(state)
            with self._lock:
                listeners = list(self._listeners)

            for cb in listeners:
                try:
                    cb(state)
                except Exception:
                    logger.exception(
                        "Run-state listener %r failed on %s", cb, state.value
                    )
        return len(listeners)
