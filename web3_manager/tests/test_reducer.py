import pytest

from web3_manager.core.actions import (
    Reset,
    UpdateAccount,
    UpdateConnectorValues,
    UpdateError,
    UpdateErrorWithName,
    UpdateNetworkId,
    reduce_state,
)
from web3_manager.core.connection_state import INITIAL_STATE, UNSET, ConnectionState, is_initialized
from web3_manager.core.errors import UnknownActionError


LIBRARY = object()


def _connected() -> ConnectionState:
    return reduce_state(
        INITIAL_STATE,
        UpdateConnectorValues(
            connector_name="injected", library=LIBRARY, network_id=1, account="0xabc"
        ),
    )


def test_initial_state_is_empty() -> None:
    assert INITIAL_STATE.connector_name is None
    assert INITIAL_STATE.library is None
    assert INITIAL_STATE.network_id is None
    assert INITIAL_STATE.account is UNSET
    assert INITIAL_STATE.error is None
    assert not is_initialized(INITIAL_STATE)


def test_update_connector_values_replaces_snapshot_and_clears_error() -> None:
    errored = reduce_state(INITIAL_STATE, UpdateError(RuntimeError("boom")))

    state = reduce_state(
        errored,
        UpdateConnectorValues(
            connector_name="injected", library=LIBRARY, network_id=1, account="0xabc"
        ),
    )

    assert state == ConnectionState("injected", LIBRARY, 1, "0xabc", None)
    assert is_initialized(state)


def test_null_account_still_counts_as_initialized() -> None:
    state = reduce_state(
        INITIAL_STATE,
        UpdateConnectorValues(connector_name="injected", library=LIBRARY, network_id=1, account=None),
    )

    assert state.account is None
    assert is_initialized(state)


def test_field_updates_preserve_other_fields() -> None:
    state = _connected()

    network = reduce_state(state, UpdateNetworkId(5))
    assert network.network_id == 5
    assert network.account == "0xabc"
    assert network.connector_name == "injected"

    account = reduce_state(network, UpdateAccount("0xdef"))
    assert account.account == "0xdef"
    assert account.network_id == 5

    # the previous snapshot is never mutated
    assert state.network_id == 1
    assert state.account == "0xabc"


def test_error_updates() -> None:
    error = RuntimeError("boom")
    state = _connected()

    global_error = reduce_state(state, UpdateError(error))
    assert global_error.error is error
    assert global_error.connector_name == "injected"
    assert not is_initialized(global_error)

    scoped = reduce_state(INITIAL_STATE, UpdateErrorWithName(error, "walletconnect"))
    assert scoped.error is error
    assert scoped.connector_name == "walletconnect"
    assert scoped.library is None


def test_reset_returns_initial_snapshot() -> None:
    assert reduce_state(_connected(), Reset()) == INITIAL_STATE


def test_unknown_action_fails_fast() -> None:
    with pytest.raises(UnknownActionError):
        reduce_state(INITIAL_STATE, {"type": "UPDATE_NETWORK_ID", "payload": 1})  # type: ignore[arg-type]


def test_zero_network_id_is_not_initialized() -> None:
    state = reduce_state(_connected(), UpdateNetworkId(0))
    assert not is_initialized(state)


def test_to_payload_distinguishes_unset_and_null_accounts() -> None:
    assert "account" not in INITIAL_STATE.to_payload()

    payload = reduce_state(_connected(), UpdateAccount(None)).to_payload()
    assert payload["account"] is None
    assert payload["has_library"] is True
