"""Unit tests for the dual-network context."""

import pytest

from tests.fakes import TEST_PRIVATE_KEY, FakeL1Provider, FakeZkSyncProvider
from zksync_deploy.config import DeployConfig
from zksync_deploy.context import NetworkContext
from zksync_deploy.exceptions import ConfigurationError
from zksync_deploy.providers import JsonRpcProvider, ZkSyncProvider
from zksync_deploy.wallet import Wallet


class TestConstruction:
    """Test building a context."""

    def test_binds_wallet_to_both_networks(self, wallet: Wallet):
        l1 = FakeL1Provider()
        l2 = FakeZkSyncProvider()

        context = NetworkContext(wallet, l1, l2)

        assert context.l1_provider is l1
        assert context.l2_provider is l2
        assert context.wallet.provider is l2
        assert context.wallet.eth_provider is l1
        assert context.eth_wallet.provider is l1
        assert context.eth_wallet.address == wallet.address

    def test_wallet_cannot_be_swapped(self, context: NetworkContext, wallet: Wallet):
        with pytest.raises(AttributeError):
            context.wallet = wallet

    def test_from_config_with_private_key(self, monkeypatch):
        monkeypatch.delenv("GOERLI_RPC_URL", raising=False)
        config = DeployConfig(zksync_network="http://127.0.0.1:3050", eth_network="goerli")

        context = NetworkContext.from_config(config, private_key=TEST_PRIVATE_KEY)

        assert isinstance(context.l2_provider, ZkSyncProvider)
        assert context.l2_provider.rpc_url == "http://127.0.0.1:3050"
        assert type(context.l1_provider) is JsonRpcProvider
        assert context.l1_provider.rpc_url == "https://rpc.ankr.com/eth_goerli"
        assert context.wallet.address == Wallet.from_private_key(TEST_PRIVATE_KEY).address

    def test_from_config_with_wallet(self, wallet: Wallet):
        config = DeployConfig(zksync_network="http://zk", eth_network="http://eth")

        context = NetworkContext.from_config(config, wallet=wallet)

        assert context.wallet.address == wallet.address
        assert context.l1_provider.rpc_url == "http://eth"

    def test_from_config_requires_one_signer(self, wallet: Wallet):
        config = DeployConfig(zksync_network="http://zk", eth_network="http://eth")

        with pytest.raises(ConfigurationError, match="exactly one of private_key or wallet"):
            NetworkContext.from_config(config)
        with pytest.raises(ConfigurationError, match="exactly one of private_key or wallet"):
            NetworkContext.from_config(config, private_key=TEST_PRIVATE_KEY, wallet=wallet)


class TestTeardown:
    """Test closing connections."""

    def test_close_closes_both_providers(self, context: NetworkContext):
        context.close()

        assert context.closed
        assert context.l1_provider.closed
        assert context.l2_provider.closed

    def test_close_is_idempotent(self, context: NetworkContext):
        context.close()
        context.close()

        assert context.closed

    def test_context_manager(self, wallet: Wallet):
        l1 = FakeL1Provider()
        l2 = FakeZkSyncProvider()

        with NetworkContext(wallet, l1, l2) as context:
            assert not context.closed

        assert l1.closed
        assert l2.closed
