"""Dual-network context: the L1 and L2 connections plus the wallet bound to both."""

import logging
from typing import Optional

from .config import DeployConfig
from .exceptions import ConfigurationError
from .providers import JsonRpcProvider, ZkSyncProvider, resolve_l1_provider, resolve_l2_provider
from .wallet import EthWallet, Wallet

log = logging.getLogger(__name__)


class NetworkContext:
    """
    Owns the L1 and L2 connections of a deploying session.

    The wallet is bound to both networks at construction and cannot be
    swapped; create a new context to target different networks.
    """

    def __init__(self, wallet: Wallet, l1_provider: JsonRpcProvider, l2_provider: ZkSyncProvider):
        """
        Initialize the context.

        Args:
            wallet: Wallet holding the signing key (its current binding is ignored)
            l1_provider: Ethereum connection
            l2_provider: zkSync connection
        """
        self._l1_provider = l1_provider
        self._l2_provider = l2_provider
        self._wallet = wallet.connect(l2_provider).connect_to_l1(l1_provider)
        self._eth_wallet = self._wallet.eth_wallet()
        self._closed = False

    @classmethod
    def from_config(
        cls,
        config: DeployConfig,
        private_key: Optional[str] = None,
        wallet: Optional[Wallet] = None,
    ) -> "NetworkContext":
        """
        Build a context from network configuration.

        Exactly one of private_key and wallet must be given.

        Raises:
            ConfigurationError: If neither or both signing sources are given,
                                or a network identifier cannot be resolved
        """
        if (private_key is None) == (wallet is None):
            raise ConfigurationError("Provide exactly one of private_key or wallet")
        if wallet is None:
            wallet = Wallet.from_private_key(private_key)

        l1_provider = resolve_l1_provider(config.eth_network)
        l2_provider = resolve_l2_provider(config.zksync_network)
        log.debug("Context for %s: L1 %r, L2 %r", wallet.address, l1_provider, l2_provider)
        return cls(wallet, l1_provider, l2_provider)

    @property
    def l1_provider(self) -> JsonRpcProvider:
        return self._l1_provider

    @property
    def l2_provider(self) -> ZkSyncProvider:
        return self._l2_provider

    @property
    def wallet(self) -> Wallet:
        return self._wallet

    @property
    def eth_wallet(self) -> EthWallet:
        return self._eth_wallet

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close both network connections."""
        if self._closed:
            return
        self._l1_provider.close()
        self._l2_provider.close()
        self._closed = True

    def __enter__(self) -> "NetworkContext":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
