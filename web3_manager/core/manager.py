"""Connection manager driving connector activation and listener lifecycles.

:class:`Web3Manager` owns the :class:`StateStore` and is its only writer.
Public operations validate their preconditions, await the connector, and
commit complete snapshots.  After every committed transition the manager
re-binds the active connector (deactivating the previous one) and
reconciles the change listeners for the ``(initialized, connector)`` pair.
"""

from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .actions import (
    Action,
    Reset,
    UpdateAccount,
    UpdateConnectorValues,
    UpdateError,
    UpdateErrorWithName,
    UpdateNetworkId,
)
from .connection_state import UNSET, ConnectionState, is_initialized
from .connector import ACCOUNTS_CHANGED, DEACTIVATED, NETWORK_CHANGED, Connector
from .errors import is_cancellation
from .event_dispatcher import EventDispatcher
from .rerender import ReRenderers
from .state_store import StateStore
from .transition_history import TransitionHistory


LOGGER = logging.getLogger(__name__)

# How an ``accountsChanged`` notification carrying no accounts is handled.
# "head" commits ``accounts[0]`` of an empty list, i.e. an undetermined
# account, which drops the manager out of the initialized region.
# "deactivate" treats the empty list as a disconnect and resets the state.
EMPTY_ACCOUNTS_HEAD = "head"
EMPTY_ACCOUNTS_DEACTIVATE = "deactivate"
EMPTY_ACCOUNTS_POLICIES = frozenset({EMPTY_ACCOUNTS_HEAD, EMPTY_ACCOUNTS_DEACTIVATE})

_Subscription = Tuple[str, Callable[..., None]]


async def _no_account() -> None:
    return None


class Web3Manager:
    """Select, activate and monitor one connector out of a fixed registry."""

    def __init__(
        self,
        connectors: Mapping[str, Connector],
        library_name: str = "web3",
        *,
        empty_accounts_policy: str = EMPTY_ACCOUNTS_HEAD,
        dispatcher: Optional[EventDispatcher] = None,
        history: Optional[TransitionHistory] = None,
    ) -> None:
        if empty_accounts_policy not in EMPTY_ACCOUNTS_POLICIES:
            raise ValueError(
                "empty_accounts_policy must be one of "
                f"{sorted(EMPTY_ACCOUNTS_POLICIES)}"
            )

        self._connectors: Mapping[str, Connector] = MappingProxyType(dict(connectors))
        self._library_name = library_name
        self._empty_accounts_policy = empty_accounts_policy
        self._dispatcher = dispatcher
        self._store = StateStore(history=history)
        self._store.subscribe(self._on_transition)

        self._active_connector: Optional[Connector] = None
        self._subscription_key: Tuple[bool, Optional[Connector]] = (False, None)
        self._subscriptions: List[_Subscription] = []
        self._closed = False

        self.rerenderers = ReRenderers(dispatcher=dispatcher)

    # ------------------------------------------------------------------
    # Read-only snapshot
    # ------------------------------------------------------------------
    @property
    def state(self) -> ConnectionState:
        return self._store.state

    @property
    def initialized(self) -> bool:
        return is_initialized(self._store.state)

    @property
    def connectors(self) -> Mapping[str, Connector]:
        return self._connectors

    @property
    def active_connector(self) -> Optional[Connector]:
        return self._active_connector

    @property
    def library_name(self) -> str:
        return self._library_name

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    async def set_connector(
        self, connector_name: str, suppress_global_error: bool = True
    ) -> None:
        """Activate ``connector_name`` and commit its values.

        Unknown names and the currently set name are reported and ignored.
        """

        if connector_name not in self._connectors:
            LOGGER.error(
                "The passed connector name %r is not recognized. Valid values are: %s",
                connector_name,
                ", ".join(self._connectors),
            )
            return

        if connector_name == self.state.connector_name:
            LOGGER.error("The %s connector is already set.", connector_name)
            return

        await self._initialize_connector_values(connector_name, suppress_global_error)

    def unset_connector(self) -> None:
        self._store.dispatch(Reset())

    async def activate_account(self, suppress_global_error: bool = True) -> None:
        """Fetch the account of a connector activated without one."""

        if not self.initialized:
            LOGGER.error("Calling activate_account in an uninitialized state is a no-op.")
            return

        state = self.state
        if state.account is not None:
            LOGGER.error("Calling activate_account while an account is active is a no-op.")
            return

        connector = self._active_connector
        if connector is None or state.library is None:
            LOGGER.error("activate_account found no active connector or library.")
            return

        try:
            account = await connector.get_account(state.library)
        except Exception as exc:
            if suppress_global_error:
                raise
            if self.process_error(exc) is not None:
                raise
            return

        self._store.dispatch(UpdateAccount(account))

    def process_error(
        self, error: BaseException, connector_name: Optional[str] = None
    ) -> Optional[BaseException]:
        """Commit ``error`` to the shared state and hand it back for raising.

        The WalletConnect timeout is swallowed and yields ``None``.
        """

        if is_cancellation(error):
            LOGGER.info("Ignoring cancelled connector request: %s", error)
            return None

        if connector_name:
            self._store.dispatch(UpdateErrorWithName(error, connector_name))
        else:
            self._store.dispatch(UpdateError(error))
        return error

    def close(self) -> None:
        """Tear down listeners and deactivate the current connector."""

        if self._closed:
            return

        self._closed = True
        self._remove_subscriptions()
        self._subscription_key = (False, None)
        previous, self._active_connector = self._active_connector, None
        if previous is not None:
            self._deactivate(previous)

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------
    async def _initialize_connector_values(
        self, connector_name: str, suppress_global_error: bool
    ) -> None:
        connector = self._connectors[connector_name]
        LOGGER.info("Activating connector %s", connector_name)

        try:
            await connector.on_activation()
            library = await connector.get_library(self._library_name)

            if connector.activate_account_immediately:
                account_request = connector.get_account(library)
            else:
                account_request = _no_account()

            network_id, account = await asyncio.gather(
                connector.get_network_id(library), account_request
            )
        except Exception as exc:
            if suppress_global_error:
                raise
            if self.process_error(exc, connector_name) is not None:
                raise
            return

        self._store.dispatch(
            UpdateConnectorValues(
                connector_name=connector_name,
                library=library,
                network_id=network_id,
                account=account,
            )
        )

    # ------------------------------------------------------------------
    # Transition bookkeeping
    # ------------------------------------------------------------------
    def _on_transition(self, action: Action, state: ConnectionState) -> None:
        if self._closed:
            LOGGER.warning("Transition %s applied after the manager was closed", action.type)
            return

        self._bind_active_connector(state)
        self._reconcile_subscriptions(state)

        if self._dispatcher is not None:
            self._dispatcher.publish(
                "state_changed",
                {
                    "action": action.type,
                    "state": state.to_payload(),
                    "initialized": is_initialized(state),
                },
            )

    def _bind_active_connector(self, state: ConnectionState) -> None:
        connector = self._connectors.get(state.connector_name) if state.connector_name else None
        if connector is self._active_connector:
            return

        # listeners of the outgoing connector go before it is deactivated
        self._remove_subscriptions()
        self._subscription_key = (False, None)

        previous, self._active_connector = self._active_connector, connector
        if previous is not None:
            self._deactivate(previous)

    def _deactivate(self, connector: Connector) -> None:
        LOGGER.info("Deactivating connector %s", type(connector).__name__)
        try:
            connector.on_deactivation()
        except Exception:
            LOGGER.exception("Connector %s failed to deactivate", type(connector).__name__)

    def _reconcile_subscriptions(self, state: ConnectionState) -> None:
        key = (is_initialized(state), self._active_connector)
        if key == self._subscription_key:
            return

        self._remove_subscriptions()
        self._subscription_key = key

        initialized, connector = key
        if not initialized or connector is None:
            return

        if connector.listen_for_network_changes:
            self._add_subscription(connector, NETWORK_CHANGED, self._handle_network_changed)
        if connector.listen_for_account_changes:
            self._add_subscription(connector, ACCOUNTS_CHANGED, self._handle_accounts_changed)
        self._add_subscription(connector, DEACTIVATED, self._handle_deactivated)

    def _add_subscription(
        self, connector: Connector, event_name: str, handler: Callable[..., None]
    ) -> None:
        connector.add_listener(event_name, handler)
        self._subscriptions.append((event_name, handler))
        LOGGER.debug("Listening for '%s' on %s", event_name, type(connector).__name__)

    def _remove_subscriptions(self) -> None:
        _, connector = self._subscription_key
        if connector is not None:
            for event_name, handler in self._subscriptions:
                connector.remove_listener(event_name, handler)
                LOGGER.debug("Stopped listening for '%s' on %s", event_name, type(connector).__name__)
        self._subscriptions.clear()

    # ------------------------------------------------------------------
    # Change listeners
    # ------------------------------------------------------------------
    def _handle_network_changed(self, network_id: Any) -> None:
        self._store.dispatch(UpdateNetworkId(network_id))

    def _handle_accounts_changed(self, accounts: List[str]) -> None:
        if accounts:
            self._store.dispatch(UpdateAccount(accounts[0]))
            return

        if self._empty_accounts_policy == EMPTY_ACCOUNTS_DEACTIVATE:
            LOGGER.info("Connector reported no accounts, disconnecting")
            self._store.dispatch(Reset())
        else:
            self._store.dispatch(UpdateAccount(UNSET))

    def _handle_deactivated(self, *details: Any) -> None:
        LOGGER.info("Connector reported a provider-side disconnect %s", details)
        self._store.dispatch(Reset())
