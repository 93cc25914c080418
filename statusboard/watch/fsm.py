"""Watch state machine using transitions library.

Tracks the low-level watch for one status file:

    unwatched  - no watch handle (not subscribed yet, or lost it)
    watching   - handle live, nothing pending
    debouncing - handle live, a reload is waiting for the burst to settle

A watch handle is a renewable resource: replacement of the file or a watcher
error drops it, and the watcher subscribes again after a delay.
"""

import logging
from typing import Callable

from transitions import Machine

logger = logging.getLogger(__name__)


STATES = [
    "unwatched",
    "watching",
    "debouncing",
]

# dest=None marks an internal transition (state unchanged, no callbacks)
TRANSITIONS = [
    # Establishing the watch; resume debouncing if a reload is still pending
    {"trigger": "subscribe", "source": "unwatched", "dest": "debouncing", "conditions": "has_pending"},
    {"trigger": "subscribe", "source": "unwatched", "dest": "watching"},

    # Raw change notification arms (or re-arms) the debounce timer
    {"trigger": "notify", "source": "watching", "dest": "debouncing"},
    {"trigger": "notify", "source": "debouncing", "dest": "debouncing"},
    {"trigger": "notify", "source": "unwatched", "dest": None},

    # Debounce timer fired and the reload ran
    {"trigger": "settle", "source": "debouncing", "dest": "watching"},
    {"trigger": "settle", "source": "watching", "dest": None},
    {"trigger": "settle", "source": "unwatched", "dest": None},

    # Handle torn down (replace, error, path switch, close)
    {"trigger": "drop", "source": "watching", "dest": "unwatched"},
    {"trigger": "drop", "source": "debouncing", "dest": "unwatched"},
    {"trigger": "drop", "source": "unwatched", "dest": None},
]


class WatchFSM:
    """State machine for one status file watch.

    Wraps the transitions library:
    - Only explicit triggers (no auto to_<state> methods)
    - Logs every state change
    """

    def __init__(self, has_pending: Callable[[], bool], label: str = "watch"):
        """Initialize FSM.

        Args:
            has_pending: Returns True while a debounced reload is scheduled
            label: Name used in log lines
        """
        self._has_pending = has_pending
        self.label = label

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="unwatched",
            auto_transitions=False,
            send_event=True,
            after_state_change="on_state_change",
        )

    def has_pending(self, event) -> bool:
        return self._has_pending()

    def on_state_change(self, event) -> None:
        from_state = event.transition.source
        to_state = event.transition.dest
        if to_state is not None and from_state != to_state:
            logger.debug(f"[FSM] {self.label}: {from_state} -> {to_state} ({event.event.name})")

    def can(self, trigger: str) -> bool:
        """Check if a trigger can be executed in current state."""
        return trigger in self.machine.get_triggers(self.state)
