"""Versioned state holder with write-through persistence."""
import logging
import threading
from typing import Optional

from coopbook.models.state import LedgerState
from coopbook.services.errors import InvalidStateError
from coopbook.services.persistence import StatePort, InMemoryStatePort
from coopbook.services.snapshot import state_from_document, state_to_document

logger = logging.getLogger(__name__)


class StateStore:
    """Holds the current LedgerState revision.

    Components read ``current``, build the next revision with
    ``model_copy(update=...)`` and call ``commit``. The document is saved to
    the port before the swap, so a failed save leaves the old revision in
    place.
    """

    def __init__(self, port: Optional[StatePort] = None, snapshot_version: str = "1.0"):
        self.port = port or InMemoryStatePort()
        self.snapshot_version = snapshot_version
        self._lock = threading.Lock()

        document = self.port.load()
        if document:
            revision = int(document.get("revision", 0))
            self._state = state_from_document(document, revision=revision)
            logger.info(f"Loaded society state at revision {revision}")
        else:
            self._state = LedgerState()

    @property
    def current(self) -> LedgerState:
        return self._state

    def to_document(self, state: Optional[LedgerState] = None) -> dict:
        return state_to_document(state or self._state, self.snapshot_version)

    def commit(self, new_state: LedgerState, action: str) -> LedgerState:
        """Swap in ``new_state`` as the next revision and persist it."""
        with self._lock:
            if new_state.revision != self._state.revision:
                raise InvalidStateError(
                    f"Stale revision {new_state.revision}, current is {self._state.revision}"
                )
            committed = new_state.model_copy(update={"revision": self._state.revision + 1})
            document = self.to_document(committed)
            document["revision"] = committed.revision
            self.port.save(document)
            self._state = committed

        logger.debug(f"Committed revision {committed.revision}: {action}")
        return committed
