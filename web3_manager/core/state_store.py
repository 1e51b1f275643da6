"""Single-writer store holding the current :class:`ConnectionState`."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .actions import Action, reduce_state
from .connection_state import INITIAL_STATE, ConnectionState
from .transition_history import TransitionHistory


LOGGER = logging.getLogger(__name__)

StateListener = Callable[[Action, ConnectionState], None]


class StateStore:
    """Apply actions through :func:`reduce_state` and notify listeners.

    Dispatch is synchronous: by the time :meth:`dispatch` returns the new
    snapshot is visible and every listener has run.
    """

    def __init__(
        self,
        *,
        initial_state: ConnectionState = INITIAL_STATE,
        history: Optional[TransitionHistory] = None,
    ) -> None:
        self._state = initial_state
        self._history = history
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> ConnectionState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable removing it again."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, action: Action) -> ConnectionState:
        state = reduce_state(self._state, action)
        self._state = state
        LOGGER.debug("Applied %s -> %s", action.type, state.to_payload())

        if self._history is not None:
            self._history.record(action.type, state.to_payload())

        for listener in list(self._listeners):
            listener(action, state)

        return state
