"""
Process run-state: the current phase of the process and a broadcast channel
for changes to it.
"""

from runstate.state import RunState, RunStateChannel
from runstate.reconciler import reconcile_run_state

__all__ = ["RunState", "RunStateChannel", "reconcile_run_state"]
