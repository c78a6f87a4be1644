"""Edit session gate: at most one option may be open for editing."""
import logging

logger = logging.getLogger(__name__)


class EditSessionGate:
    """Two-state machine, Idle or Editing(option_id).

    Listeners are called with the new editing option id (or None) on every
    transition, never on a rejected one.
    """

    def __init__(self):
        self.editing_id = None
        self._listeners = []

    @property
    def is_editing(self):
        return self.editing_id is not None

    def subscribe(self, listener):
        self._listeners.append(listener)

    def open(self, option_id):
        """Idle -> Editing(option_id). Re-opening the current option is a no-op success."""
        if self.editing_id == option_id:
            return True
        if self.editing_id is not None:
            logger.debug(
                "Edit session already open on %s, refusing %s",
                self.editing_id,
                option_id,
            )
            return False
        self.editing_id = option_id
        self._notify()
        return True

    def close(self, option_id):
        """Editing(option_id) -> Idle."""
        if self.editing_id is None or self.editing_id != option_id:
            return False
        self.editing_id = None
        self._notify()
        return True

    def _notify(self):
        for listener in self._listeners:
            listener(self.editing_id)
