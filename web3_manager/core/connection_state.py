"""Immutable connection snapshot shared by every consumer of the manager.

The manager never mutates a :class:`ConnectionState` in place.  Each reducer
transition returns a fresh instance so readers always observe a complete
snapshot.  ``to_payload`` collapses a snapshot into a plain ``dict`` for the
event dispatcher and the transition history.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


__all__ = ["AccountValue", "ConnectionState", "INITIAL_STATE", "UNSET", "is_initialized"]


class _Unset:
    """Marker for an account that has not been determined yet.

    ``None`` already carries meaning for accounts (connector active, no account
    selected), so a separate sentinel is needed for "not fetched".
    """

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Unset":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Unset":
        return self

    def __reduce__(self) -> str:
        return "UNSET"


UNSET = _Unset()

AccountValue = Union[str, None, _Unset]


@dataclass(frozen=True, slots=True)
class ConnectionState:
    connector_name: Optional[str] = None
    library: Optional[Any] = None
    network_id: Optional[int] = None
    account: AccountValue = UNSET
    error: Optional[BaseException] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "connector_name": self.connector_name,
            "network_id": self.network_id,
            "has_library": self.library is not None,
        }
        # keep "no account selected" (None) distinguishable from "unknown"
        if self.account is not UNSET:
            payload["account"] = self.account
        if self.error is not None:
            payload["error"] = repr(self.error)
        return payload


INITIAL_STATE = ConnectionState()


def is_initialized(state: ConnectionState) -> bool:
    """Whether ``state`` describes a fully activated, error free connector."""

    return bool(
        state.connector_name
        and state.library is not None
        and state.network_id
        and state.account is not UNSET
        and state.error is None
    )
