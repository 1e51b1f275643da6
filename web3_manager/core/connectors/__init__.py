"""Connectors bundled with the manager."""

from .injected import InjectedConnector, ProviderLibrary, SUPPORTED_LIBRARIES

__all__ = ["InjectedConnector", "ProviderLibrary", "SUPPORTED_LIBRARIES"]
