"""
Keep the process run-state in line with the committed `offline` setting.
"""

import logging

from runstate.state import RunState


logger = logging.getLogger(__name__)


def reconcile_run_state(offline, run_state):
    """
    Broadcast Offline or Online if it disagrees with `offline`.

    run_state is anything with current() and broadcast(state), usually a
    RunStateChannel. Only the Online/Offline pair is ever switched; during
    Initializing or ShuttingDown nothing is sent. Having no listeners is not
    an error.

    Returns the RunState broadcast, or None.
    """
    current = run_state.current()
    if offline and current == RunState.ONLINE:
        target = RunState.OFFLINE
    elif not offline and current == RunState.OFFLINE:
        target = RunState.ONLINE
    else:
        return None

    receivers = run_state.broadcast(target)
    if not receivers:
        logger.debug("Run-state %s broadcast with no listeners", target.value)
    logger.info("Run-state %s -> %s", current.value, target.value)
    return target
