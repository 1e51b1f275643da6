"""In-memory stand-in for a browser-injected Ethereum provider.

The simulated provider answers the handful of requests the bundled
connectors make (``eth_requestAccounts``, ``eth_accounts``, ``eth_chainId``,
``net_version``) and lets callers push provider events such as
``accountsChanged`` the way a wallet extension would.  It powers the demo
entry point and the test-suite, so every behaviour is configurable: methods
can be made to fail and account requests can be rejected with a code.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict, Dict, Iterable, List, Optional, Sequence, Set


LOGGER = logging.getLogger(__name__)


class ProviderRPCError(Exception):
    """Error returned by the provider, mirroring EIP-1193 error objects."""

    def __init__(self, message: str, *, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass
class SimulatedProvider:
    accounts: List[str] = field(default_factory=list)
    chain_id: int = 1
    is_meta_mask: bool = False
    failing_methods: Set[str] = field(default_factory=set)
    reject_code: Optional[int] = None
    requests: List[str] = field(default_factory=list)
    auto_refresh_on_network_change: bool = True
    _handlers: DefaultDict[str, List[Callable[..., None]]] = field(
        default_factory=lambda: defaultdict(list)
    )

    @property
    def networkVersion(self) -> str:  # noqa: N802 - mirrors the injected attribute
        return str(self.chain_id)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    async def send(self, method: str, params: Optional[Sequence[Any]] = None) -> Dict[str, Any]:
        self.requests.append(method)

        if method in self.failing_methods:
            raise ProviderRPCError(f"{method} is unavailable", code=-32601)

        if method == "eth_requestAccounts":
            if self.reject_code is not None:
                raise ProviderRPCError("Request rejected", code=self.reject_code)
            return {"id": len(self.requests), "result": list(self.accounts)}
        if method == "eth_accounts":
            return {"id": len(self.requests), "result": list(self.accounts)}
        if method == "eth_chainId":
            return {"id": len(self.requests), "result": hex(self.chain_id)}
        if method == "net_version":
            return {"id": len(self.requests), "result": str(self.chain_id)}

        raise ProviderRPCError(f"Method {method} not supported", code=-32601)

    async def enable(self) -> List[str]:
        self.requests.append("enable")
        if "enable" in self.failing_methods:
            raise ProviderRPCError("enable is unavailable", code=-32601)
        return list(self.accounts)

    # ------------------------------------------------------------------
    # Event surface
    # ------------------------------------------------------------------
    def on(self, event_name: str, handler: Callable[..., None]) -> None:
        self._handlers[event_name].append(handler)

    def remove_listener(self, event_name: str, handler: Callable[..., None]) -> None:
        handlers = self._handlers.get(event_name)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event_name: str) -> int:
        return len(self._handlers.get(event_name, ()))

    def _fire(self, event_name: str, *args: Any) -> None:
        LOGGER.debug("Simulated provider firing '%s' with %s", event_name, args)
        for handler in list(self._handlers.get(event_name, ())):
            handler(*args)

    # ------------------------------------------------------------------
    # Simulation helpers
    # ------------------------------------------------------------------
    def simulate_accounts_changed(self, accounts: Iterable[str]) -> None:
        self.accounts = list(accounts)
        self._fire("accountsChanged", list(self.accounts))

    def simulate_network_changed(self, chain_id: int) -> None:
        self.chain_id = chain_id
        self._fire("chainChanged", hex(chain_id))

    def simulate_close(self, code: int = 1000, reason: str = "closed") -> None:
        self._fire("close", code, reason)
