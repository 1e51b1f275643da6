"""Exception taxonomy shared by the manager and the bundled connectors."""

from __future__ import annotations

from typing import Any, Optional


__all__ = [
    "ConnectorError",
    "NoEthereumProviderError",
    "UnknownActionError",
    "UnsupportedLibraryError",
    "UserRejectedRequestError",
    "Web3ManagerError",
    "WALLETCONNECT_TIMEOUT",
    "is_cancellation",
]


# Raised by WalletConnect style connectors when the user never answers the
# pairing request.  The manager swallows it instead of recording an error.
WALLETCONNECT_TIMEOUT = "WALLETCONNECT_TIMEOUT"


class Web3ManagerError(RuntimeError):
    """Base class for errors raised by the package."""


class UnknownActionError(Web3ManagerError, TypeError):
    """Raised when the reducer receives something that is not an action."""


class ConnectorError(Web3ManagerError):
    """Failure reported by a connector, optionally tagged with an error code."""

    def __init__(self, message: str = "", *, code: Optional[Any] = None) -> None:
        super().__init__(message)
        self.code = code


class NoEthereumProviderError(ConnectorError):
    def __init__(self) -> None:
        super().__init__("No Ethereum provider was injected into the connector.")


class UserRejectedRequestError(ConnectorError):
    def __init__(self) -> None:
        super().__init__("The user rejected the request.", code=4001)


class UnsupportedLibraryError(ConnectorError):
    def __init__(self, library_name: str, supported: Any) -> None:
        super().__init__(
            f"Library {library_name!r} is not supported. "
            f"Valid values are: {', '.join(sorted(supported))}"
        )
        self.library_name = library_name


def is_cancellation(error: BaseException) -> bool:
    """Return ``True`` for the single recoverable cancellation condition."""

    return getattr(error, "code", None) == WALLETCONNECT_TIMEOUT
