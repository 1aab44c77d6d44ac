"""Wallet service clients and session state."""

from .client import WalletClient, WalletClientError, InMemoryWalletClient, HttpWalletClient
from .session import WalletSession

__all__ = [
    "WalletClient",
    "WalletClientError",
    "InMemoryWalletClient",
    "HttpWalletClient",
    "WalletSession",
]
