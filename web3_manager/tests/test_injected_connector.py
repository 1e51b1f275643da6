import asyncio

import pytest

from web3_manager.core.connection_state import INITIAL_STATE
from web3_manager.core.connectors.injected import InjectedConnector, ProviderLibrary, parse_network_id
from web3_manager.core.errors import NoEthereumProviderError, UnsupportedLibraryError, UserRejectedRequestError
from web3_manager.core.manager import Web3Manager
from web3_manager.core.simulated_provider import SimulatedProvider


def test_injected_scenario_initializes_manager() -> None:
    asyncio.run(_test_injected_scenario_initializes_manager())


async def _test_injected_scenario_initializes_manager() -> None:
    provider = SimulatedProvider(accounts=["0xabc"], chain_id=1)
    manager = Web3Manager({"injected": InjectedConnector(provider)})

    await manager.set_connector("injected")

    state = manager.state
    assert state.connector_name == "injected"
    assert state.network_id == 1
    assert state.account == "0xabc"
    assert state.error is None
    assert isinstance(state.library, ProviderLibrary)
    assert state.library.name == "web3"
    assert manager.initialized is True
    assert provider.requests[0] == "eth_requestAccounts"


def test_provider_events_reach_manager() -> None:
    asyncio.run(_test_provider_events_reach_manager())


async def _test_provider_events_reach_manager() -> None:
    provider = SimulatedProvider(accounts=["0xabc"], chain_id=1)
    connector = InjectedConnector(provider)
    manager = Web3Manager({"injected": connector})
    await manager.set_connector("injected")

    provider.simulate_network_changed(137)
    provider.simulate_accounts_changed(["0xdef"])

    assert manager.state.network_id == 137
    assert manager.state.account == "0xdef"

    manager.unset_connector()

    assert provider.listener_count("accountsChanged") == 0
    assert provider.listener_count("chainChanged") == 0
    provider.simulate_network_changed(5)
    assert manager.state.network_id is None


def test_user_rejection_is_translated() -> None:
    asyncio.run(_test_user_rejection_is_translated())


async def _test_user_rejection_is_translated() -> None:
    provider = SimulatedProvider(accounts=["0xabc"], reject_code=4001)
    manager = Web3Manager({"injected": InjectedConnector(provider)})

    with pytest.raises(UserRejectedRequestError):
        await manager.set_connector("injected", suppress_global_error=False)

    assert isinstance(manager.state.error, UserRejectedRequestError)
    assert manager.state.connector_name == "injected"


def test_missing_provider_fails_activation() -> None:
    asyncio.run(_test_missing_provider_fails_activation())


async def _test_missing_provider_fails_activation() -> None:
    connector = InjectedConnector(None)

    with pytest.raises(NoEthereumProviderError):
        await connector.on_activation()
    assert await connector.is_authorized() is False


def test_request_accounts_falls_back_to_enable() -> None:
    asyncio.run(_test_request_accounts_falls_back_to_enable())


async def _test_request_accounts_falls_back_to_enable() -> None:
    provider = SimulatedProvider(accounts=["0xabc"], failing_methods={"eth_requestAccounts"})
    connector = InjectedConnector(provider)

    await connector.on_activation()

    assert provider.requests == ["eth_requestAccounts", "enable"]


def test_network_id_fallback_chain() -> None:
    asyncio.run(_test_network_id_fallback_chain())


async def _test_network_id_fallback_chain() -> None:
    provider = SimulatedProvider(chain_id=5, failing_methods={"eth_chainId"})
    connector = InjectedConnector(provider)
    library = await connector.get_library("ethers")

    assert await connector.get_network_id(library) == 5
    assert provider.requests == ["eth_chainId", "net_version"]

    provider.failing_methods.add("net_version")
    assert await connector.get_network_id(library) == 5


def test_account_falls_back_to_enable() -> None:
    asyncio.run(_test_account_falls_back_to_enable())


async def _test_account_falls_back_to_enable() -> None:
    provider = SimulatedProvider(accounts=["0xabc"], failing_methods={"eth_accounts"})
    connector = InjectedConnector(provider)
    library = await connector.get_library("web3")

    assert await connector.get_account(library) == "0xabc"
    assert await connector.is_authorized() is False


def test_unsupported_library_is_rejected() -> None:
    asyncio.run(_test_unsupported_library_is_rejected())


async def _test_unsupported_library_is_rejected() -> None:
    connector = InjectedConnector(SimulatedProvider())

    with pytest.raises(UnsupportedLibraryError):
        await connector.get_library("viem")


def test_meta_mask_auto_refresh_disabled() -> None:
    asyncio.run(_test_meta_mask_auto_refresh_disabled())


async def _test_meta_mask_auto_refresh_disabled() -> None:
    provider = SimulatedProvider(accounts=["0xabc"], is_meta_mask=True)

    await InjectedConnector(provider).on_activation()

    assert provider.auto_refresh_on_network_change is False


def test_is_authorized_tracks_provider_accounts() -> None:
    asyncio.run(_test_is_authorized_tracks_provider_accounts())


async def _test_is_authorized_tracks_provider_accounts() -> None:
    provider = SimulatedProvider(accounts=[])
    connector = InjectedConnector(provider)

    assert await connector.is_authorized() is False
    provider.accounts.append("0xabc")
    assert await connector.is_authorized() is True


def test_parse_network_id() -> None:
    assert parse_network_id("0x89") == 137
    assert parse_network_id("42") == 42
    assert parse_network_id(3) == 3


def test_provider_close_resets_manager() -> None:
    asyncio.run(_test_provider_close_resets_manager())


async def _test_provider_close_resets_manager() -> None:
    provider = SimulatedProvider(accounts=["0xabc"], chain_id=1)
    manager = Web3Manager({"injected": InjectedConnector(provider)})
    await manager.set_connector("injected")

    provider.simulate_close()

    assert manager.state == INITIAL_STATE
    assert manager.active_connector is None
    assert provider.listener_count("close") == 0
    assert provider.listener_count("accountsChanged") == 0


def test_rejected_activation_leaves_no_provider_handlers() -> None:
    asyncio.run(_test_rejected_activation_leaves_no_provider_handlers())


async def _test_rejected_activation_leaves_no_provider_handlers() -> None:
    provider = SimulatedProvider(accounts=["0xabc"], reject_code=4001)
    manager = Web3Manager({"injected": InjectedConnector(provider)})

    with pytest.raises(UserRejectedRequestError):
        await manager.set_connector("injected")

    assert manager.active_connector is None
    assert manager.state == INITIAL_STATE
    for event in ("chainChanged", "networkChanged", "accountsChanged", "close"):
        assert provider.listener_count(event) == 0
