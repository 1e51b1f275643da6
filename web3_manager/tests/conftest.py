"""Shared fakes for the web3 manager test-suite."""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional

import pytest

from web3_manager.core.connector import Connector


class RecordingConnector(Connector):
    """Connector returning canned values and recording every call."""

    def __init__(
        self,
        *,
        network_id: int = 1,
        account: Optional[str] = "0xabc",
        library: Any = None,
        activation_error: Optional[BaseException] = None,
        network_error: Optional[BaseException] = None,
        account_error: Optional[BaseException] = None,
        delay: float = 0.0,
        **flags: Any,
    ) -> None:
        super().__init__(**flags)
        self.network_id = network_id
        self.account = account
        self.library = library if library is not None else object()
        self.activation_error = activation_error
        self.network_error = network_error
        self.account_error = account_error
        self.delay = delay
        self.calls: List[str] = []
        self.deactivations = 0

    async def on_activation(self) -> None:
        self.calls.append("on_activation")
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.activation_error is not None:
            raise self.activation_error

    def on_deactivation(self) -> None:
        self.calls.append("on_deactivation")
        self.deactivations += 1

    async def get_library(self, library_name: str) -> Any:
        self.calls.append(f"get_library:{library_name}")
        return self.library

    async def get_network_id(self, library: Any) -> int:
        self.calls.append("get_network_id")
        if self.network_error is not None:
            raise self.network_error
        return self.network_id

    async def get_account(self, library: Any) -> Optional[str]:
        self.calls.append("get_account")
        if self.account_error is not None:
            raise self.account_error
        return self.account


@pytest.fixture
def make_connector():
    return RecordingConnector
