"""Core runtime components for the web3 connection manager."""

from .actions import (
    Action,
    Reset,
    UpdateAccount,
    UpdateConnectorValues,
    UpdateError,
    UpdateErrorWithName,
    UpdateNetworkId,
    reduce_state,
)
from .connection_state import INITIAL_STATE, UNSET, ConnectionState, is_initialized
from .connector import ACCOUNTS_CHANGED, DEACTIVATED, NETWORK_CHANGED, Connector
from .connectors import InjectedConnector, ProviderLibrary
from .errors import (
    WALLETCONNECT_TIMEOUT,
    ConnectorError,
    NoEthereumProviderError,
    UnknownActionError,
    UnsupportedLibraryError,
    UserRejectedRequestError,
    Web3ManagerError,
)
from .event_dispatcher import EventDispatcher
from .manager import EMPTY_ACCOUNTS_DEACTIVATE, EMPTY_ACCOUNTS_HEAD, Web3Manager
from .rerender import ReRenderers, RenderTrigger
from .settings import ManagerSettings
from .simulated_provider import SimulatedProvider
from .state_store import StateStore
from .transition_history import TransitionHistory

__all__ = [
    "ACCOUNTS_CHANGED",
    "Action",
    "ConnectionState",
    "Connector",
    "ConnectorError",
    "EMPTY_ACCOUNTS_DEACTIVATE",
    "EMPTY_ACCOUNTS_HEAD",
    "EventDispatcher",
    "INITIAL_STATE",
    "InjectedConnector",
    "ManagerSettings",
    "DEACTIVATED",
    "NETWORK_CHANGED",
    "NoEthereumProviderError",
    "ProviderLibrary",
    "ReRenderers",
    "RenderTrigger",
    "Reset",
    "SimulatedProvider",
    "StateStore",
    "TransitionHistory",
    "UNSET",
    "UnknownActionError",
    "UnsupportedLibraryError",
    "UpdateAccount",
    "UpdateConnectorValues",
    "UpdateError",
    "UpdateErrorWithName",
    "UpdateNetworkId",
    "UserRejectedRequestError",
    "WALLETCONNECT_TIMEOUT",
    "Web3Manager",
    "Web3ManagerError",
    "is_initialized",
    "reduce_state",
]
