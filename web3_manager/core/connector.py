"""Capability interface implemented by every wallet integration.

The manager never talks to a wallet provider directly.  It drives a
:class:`Connector` through its lifecycle hooks and listens to the change
notifications the connector emits on its own listener surface.  Concrete
connectors receive whatever provider object they need at construction time.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List, Optional


LOGGER = logging.getLogger(__name__)

NETWORK_CHANGED = "networkChanged"
ACCOUNTS_CHANGED = "accountsChanged"
DEACTIVATED = "deactivated"

Listener = Callable[..., None]


class Connector(ABC):
    """Base class for wallet integrations.

    Subclasses may override the three configuration flags either as class
    attributes or per instance through the constructor.
    """

    activate_account_immediately: bool = True
    listen_for_network_changes: bool = True
    listen_for_account_changes: bool = True

    def __init__(
        self,
        *,
        activate_account_immediately: Optional[bool] = None,
        listen_for_network_changes: Optional[bool] = None,
        listen_for_account_changes: Optional[bool] = None,
    ) -> None:
        if activate_account_immediately is not None:
            self.activate_account_immediately = activate_account_immediately
        if listen_for_network_changes is not None:
            self.listen_for_network_changes = listen_for_network_changes
        if listen_for_account_changes is not None:
            self.listen_for_account_changes = listen_for_account_changes
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def on_activation(self) -> None:
        """Prepare the wallet before the library and values are requested."""

    def on_deactivation(self) -> None:
        """Release provider resources.  Called once per activation cycle."""

    @abstractmethod
    async def get_library(self, library_name: str) -> Any:
        ...

    @abstractmethod
    async def get_network_id(self, library: Any) -> int:
        ...

    @abstractmethod
    async def get_account(self, library: Any) -> Optional[str]:
        ...

    # ------------------------------------------------------------------
    # Notification surface
    # ------------------------------------------------------------------
    def add_listener(self, event_name: str, listener: Listener) -> None:
        if listener not in self._listeners[event_name]:
            self._listeners[event_name].append(listener)

    def remove_listener(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(event_name, ()))

    def emit(self, event_name: str, *args: Any) -> None:
        listeners = list(self._listeners.get(event_name, ()))
        if not listeners:
            LOGGER.debug("%s: no listeners for '%s'", type(self).__name__, event_name)
            return

        for listener in listeners:
            listener(*args)
