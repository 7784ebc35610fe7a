from __future__ import annotations

from typing import Dict, Set

from relaynet.enums import RelayState


ALLOWED_TRANSITIONS: Dict[RelayState, Set[RelayState]] = {
    RelayState.PENDING: {RelayState.ATTEMPTING},
    RelayState.ATTEMPTING: {
        RelayState.ATTEMPTING,
        RelayState.SUCCEEDED,
        RelayState.EXHAUSTED,
        RelayState.CANCELLED,
    },
    RelayState.SUCCEEDED: set(),
    RelayState.EXHAUSTED: set(),
    RelayState.CANCELLED: set(),
}

TERMINAL_STATES = frozenset(state for state, targets in ALLOWED_TRANSITIONS.items() if not targets)


def validate_transition(current: RelayState, target: RelayState) -> None:
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition {current} -> {target}")
