"""Counters that let callers force recomputation of derived values.

The triggers are deliberately unrelated to the state store: bumping the
network counter says "something network related changed outside the store"
and leaves account-derived consumers alone, and vice versa.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .event_dispatcher import EventDispatcher


LOGGER = logging.getLogger(__name__)

RenderCallback = Callable[[int], None]


class RenderTrigger:
    """Monotonic counter with callback registration."""

    def __init__(
        self,
        name: str,
        *,
        dispatcher: Optional[EventDispatcher] = None,
    ) -> None:
        self.name = name
        self._value = 0
        self._callbacks: List[RenderCallback] = []
        self._dispatcher = dispatcher

    @property
    def value(self) -> int:
        return self._value

    def subscribe(self, callback: RenderCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def _unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _unsubscribe

    def force(self) -> None:
        self._value += 1
        LOGGER.debug("Forced %s re-render (%d)", self.name, self._value)

        for callback in list(self._callbacks):
            callback(self._value)

        if self._dispatcher is not None:
            self._dispatcher.publish(f"{self.name}_rerender", {"value": self._value})


class ReRenderers:
    """The network and account triggers exposed by the manager."""

    def __init__(self, *, dispatcher: Optional[EventDispatcher] = None) -> None:
        self.network = RenderTrigger("network", dispatcher=dispatcher)
        self.account = RenderTrigger("account", dispatcher=dispatcher)

    @property
    def network_rerenderer(self) -> int:
        return self.network.value

    @property
    def account_rerenderer(self) -> int:
        return self.account.value

    def force_network_rerender(self) -> None:
        self.network.force()

    def force_account_rerender(self) -> None:
        self.account.force()
