"""Connector for an EIP-1193 style provider handed in at construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from ..connector import ACCOUNTS_CHANGED, DEACTIVATED, NETWORK_CHANGED, Connector
from ..errors import NoEthereumProviderError, UnsupportedLibraryError, UserRejectedRequestError


LOGGER = logging.getLogger(__name__)

SUPPORTED_LIBRARIES = frozenset({"web3", "ethers"})

_USER_REJECTED_CODE = 4001
_STATIC_NETWORK_ATTRIBUTES = ("chainId", "netVersion", "networkVersion", "_chainId")


def parse_send_return(send_return: Any) -> Any:
    if isinstance(send_return, dict) and "result" in send_return:
        return send_return["result"]
    return send_return


def parse_network_id(value: Union[int, str]) -> int:
    """Normalise hex chain ids and decimal network versions to ``int``."""

    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text)


def _first(accounts: Any) -> Optional[str]:
    return accounts[0] if accounts else None


@dataclass(frozen=True)
class ProviderLibrary:
    """Minimal library handle: the provider plus the flavour requested."""

    name: str
    provider: Any

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        return parse_send_return(await self.provider.send(method, params))


class InjectedConnector(Connector):
    """Talk to a wallet extension through its injected provider object."""

    def __init__(self, provider: Any = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._provider = provider
        self._provider_listeners_bound = False

    @property
    def provider(self) -> Any:
        return self._provider

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def on_activation(self) -> None:
        provider = self._require_provider()

        if getattr(provider, "is_meta_mask", False):
            provider.auto_refresh_on_network_change = False

        try:
            accounts = parse_send_return(await provider.send("eth_requestAccounts"))
        except Exception as exc:
            if getattr(exc, "code", None) == _USER_REJECTED_CODE:
                raise UserRejectedRequestError() from exc
            LOGGER.warning("eth_requestAccounts was unsuccessful, falling back to enable")
            accounts = parse_send_return(await provider.enable())

        LOGGER.debug("Injected provider authorised account %s", _first(accounts))

        # only an authorised provider gets handlers, a failed activation
        # never reaches on_deactivation
        if hasattr(provider, "on") and not self._provider_listeners_bound:
            provider.on("chainChanged", self._handle_chain_changed)
            provider.on("networkChanged", self._handle_chain_changed)
            provider.on("accountsChanged", self._handle_accounts_changed)
            provider.on("close", self._handle_close)
            self._provider_listeners_bound = True

    def on_deactivation(self) -> None:
        provider = self._provider
        if provider is None or not self._provider_listeners_bound:
            return

        if hasattr(provider, "remove_listener"):
            provider.remove_listener("chainChanged", self._handle_chain_changed)
            provider.remove_listener("networkChanged", self._handle_chain_changed)
            provider.remove_listener("accountsChanged", self._handle_accounts_changed)
            provider.remove_listener("close", self._handle_close)
        self._provider_listeners_bound = False

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------
    async def get_library(self, library_name: str) -> ProviderLibrary:
        if library_name not in SUPPORTED_LIBRARIES:
            raise UnsupportedLibraryError(library_name, SUPPORTED_LIBRARIES)
        return ProviderLibrary(name=library_name, provider=self._require_provider())

    async def get_network_id(self, library: ProviderLibrary) -> int:
        self._require_provider()

        try:
            return parse_network_id(await library.request("eth_chainId"))
        except Exception:
            LOGGER.warning("eth_chainId was unsuccessful, falling back to net_version")

        try:
            return parse_network_id(await library.request("net_version"))
        except Exception:
            LOGGER.warning("net_version was unsuccessful, falling back to static properties")

        for attribute in _STATIC_NETWORK_ATTRIBUTES:
            value = getattr(library.provider, attribute, None)
            if value:
                return parse_network_id(value)

        raise NoEthereumProviderError()

    async def get_account(self, library: ProviderLibrary) -> Optional[str]:
        self._require_provider()

        try:
            return _first(await library.request("eth_accounts"))
        except Exception:
            LOGGER.warning("eth_accounts was unsuccessful, falling back to enable")
            return _first(parse_send_return(await library.provider.enable()))

    async def is_authorized(self) -> bool:
        if self._provider is None:
            return False

        try:
            accounts = parse_send_return(await self._provider.send("eth_accounts"))
        except Exception:
            return False
        return bool(accounts)

    # ------------------------------------------------------------------
    # Provider events
    # ------------------------------------------------------------------
    def _handle_chain_changed(self, chain_id: Union[int, str]) -> None:
        LOGGER.debug("Handling 'chainChanged' event with payload %s", chain_id)
        self.emit(NETWORK_CHANGED, parse_network_id(chain_id))

    def _handle_accounts_changed(self, accounts: List[str]) -> None:
        LOGGER.debug("Handling 'accountsChanged' event with payload %s", accounts)
        self.emit(ACCOUNTS_CHANGED, list(accounts))

    def _handle_close(self, code: int, reason: str) -> None:
        LOGGER.info("Injected provider closed (code=%s reason=%s)", code, reason)
        self.emit(DEACTIVATED, code, reason)

    def _require_provider(self) -> Any:
        if self._provider is None:
            raise NoEthereumProviderError()
        return self._provider
