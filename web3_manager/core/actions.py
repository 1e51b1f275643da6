"""Tagged state transitions and the reducer that applies them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, ClassVar, Optional, Union

from .connection_state import INITIAL_STATE, AccountValue, ConnectionState
from .errors import UnknownActionError


__all__ = [
    "Action",
    "Reset",
    "UpdateAccount",
    "UpdateConnectorValues",
    "UpdateError",
    "UpdateErrorWithName",
    "UpdateNetworkId",
    "reduce_state",
]


@dataclass(frozen=True, slots=True)
class UpdateConnectorValues:
    type: ClassVar[str] = "UPDATE_CONNECTOR_VALUES"

    connector_name: str
    library: Any
    network_id: int
    account: AccountValue


@dataclass(frozen=True, slots=True)
class UpdateNetworkId:
    type: ClassVar[str] = "UPDATE_NETWORK_ID"

    network_id: Optional[int]


@dataclass(frozen=True, slots=True)
class UpdateAccount:
    type: ClassVar[str] = "UPDATE_ACCOUNT"

    account: AccountValue


@dataclass(frozen=True, slots=True)
class UpdateError:
    type: ClassVar[str] = "UPDATE_ERROR"

    error: BaseException


@dataclass(frozen=True, slots=True)
class UpdateErrorWithName:
    type: ClassVar[str] = "UPDATE_ERROR_WITH_NAME"

    error: BaseException
    connector_name: str


@dataclass(frozen=True, slots=True)
class Reset:
    type: ClassVar[str] = "RESET"


Action = Union[
    UpdateConnectorValues,
    UpdateNetworkId,
    UpdateAccount,
    UpdateError,
    UpdateErrorWithName,
    Reset,
]


def reduce_state(state: ConnectionState, action: Action) -> ConnectionState:
    """Return the snapshot produced by applying ``action`` to ``state``.

    The function is pure: it performs no I/O and never mutates ``state``.
    Anything that is not one of the six actions raises
    :class:`UnknownActionError`.
    """

    if isinstance(action, UpdateConnectorValues):
        return ConnectionState(
            connector_name=action.connector_name,
            library=action.library,
            network_id=action.network_id,
            account=action.account,
            error=None,
        )
    if isinstance(action, UpdateNetworkId):
        return replace(state, network_id=action.network_id)
    if isinstance(action, UpdateAccount):
        return replace(state, account=action.account)
    if isinstance(action, UpdateError):
        return replace(state, error=action.error)
    if isinstance(action, UpdateErrorWithName):
        return replace(state, error=action.error, connector_name=action.connector_name)
    if isinstance(action, Reset):
        return INITIAL_STATE

    raise UnknownActionError(f"Unrecognized action: {action!r}")
