"""
Declarative state machine for the save path.

    Idle → TransactionOpen → AllFieldsWritten → Committed → Reconciled
                    └──────→ WriteFailed → Aborted

Reconciled and Aborted are terminal. A failure to open the transaction goes
straight from Idle to Aborted.

    tracker = SaveTracker()
    tracker.advance(SaveState.TRANSACTION_OPEN)
    ...
    tracker.state  # SaveState.RECONCILED
"""

from dataclasses import dataclass
from enum import Enum


class SaveState(str, Enum):
    """Possible states of one save() call."""
    IDLE = "Idle"
    TRANSACTION_OPEN = "TransactionOpen"
    ALL_FIELDS_WRITTEN = "AllFieldsWritten"
    COMMITTED = "Committed"
    RECONCILED = "Reconciled"
    WRITE_FAILED = "WriteFailed"
    ABORTED = "Aborted"


@dataclass(frozen=True)
class Transition:
    """A single state machine edge."""
    from_state: SaveState
    to_state: SaveState


class InvalidTransition(Exception):
    """Raised when the transition edge does not exist."""

    def __init__(self, from_state, to_state, allowed):
        self.from_state = from_state
        self.to_state = to_state
        self.allowed = allowed
        super().__init__(
            f"Cannot transition from '{from_state.value}' to '{to_state.value}'. "
            f"Allowed: {[s.value for s in allowed]}"
        )


class SaveLifecycle:
    """The legal transitions of a save."""

    initial = SaveState.IDLE
    terminal = (SaveState.RECONCILED, SaveState.ABORTED)
    transitions = [
        Transition(SaveState.IDLE, SaveState.TRANSACTION_OPEN),
        Transition(SaveState.IDLE, SaveState.ABORTED),
        Transition(SaveState.TRANSACTION_OPEN, SaveState.ALL_FIELDS_WRITTEN),
        Transition(SaveState.TRANSACTION_OPEN, SaveState.WRITE_FAILED),
        Transition(SaveState.TRANSACTION_OPEN, SaveState.ABORTED),
        Transition(SaveState.ALL_FIELDS_WRITTEN, SaveState.COMMITTED),
        Transition(SaveState.ALL_FIELDS_WRITTEN, SaveState.ABORTED),
        Transition(SaveState.COMMITTED, SaveState.RECONCILED),
        Transition(SaveState.WRITE_FAILED, SaveState.ABORTED),
    ]

    @classmethod
    def get_transition(cls, from_state, to_state):
        """Return the Transition object for this edge, or None."""
        for t in cls.transitions:
            if t.from_state == from_state and t.to_state == to_state:
                return t
        return None

    @classmethod
    def validate_transition(cls, from_state, to_state):
        """Return the Transition for this edge. Raises InvalidTransition."""
        t = cls.get_transition(from_state, to_state)
        if t is None:
            raise InvalidTransition(
                from_state, to_state, cls.allowed_transitions(from_state)
            )
        return t

    @classmethod
    def allowed_transitions(cls, from_state):
        """Return list of valid next states from from_state."""
        return [t.to_state for t in cls.transitions if t.from_state == from_state]


class SaveTracker:
    """Walks one save through SaveLifecycle, recording the path taken."""

    def __init__(self):
        self.state = SaveLifecycle.initial
        self.history = [self.state]

    def advance(self, to_state):
        SaveLifecycle.validate_transition(self.state, to_state)
        self.state = to_state
        self.history.append(to_state)

    @property
    def finished(self):
        return self.state in SaveLifecycle.terminal
