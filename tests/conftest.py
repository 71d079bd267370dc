"""Shared pytest fixtures for zksync-deploy tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
from eth_account import Account

from zksync_deploy.artifacts import ArtifactStore
from zksync_deploy.context import NetworkContext
from zksync_deploy.deployer import Deployer
from zksync_deploy.wallet import Wallet
from tests.fakes import TEST_PRIVATE_KEY, FakeL1Provider, FakeZkSyncProvider


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def artifacts_dir(fixtures_dir: Path) -> Path:
    """Return the sample artifacts-zk tree."""
    return fixtures_dir / "artifacts-zk"


@pytest.fixture
def artifact_store(artifacts_dir: Path) -> ArtifactStore:
    return ArtifactStore(artifacts_dir)


@pytest.fixture
def write_artifact(tmp_path: Path) -> Callable[..., Path]:
    """Write an artifact JSON file into a temporary artifacts tree."""
    root = tmp_path / "artifacts-zk"

    def _write(source_name: str, contract_name: str, data: Dict[str, Any]) -> Path:
        path = root / source_name / f"{contract_name}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        return path

    _write.root = root
    return _write


@pytest.fixture
def wallet() -> Wallet:
    return Wallet.from_private_key(TEST_PRIVATE_KEY)


@pytest.fixture
def l1_provider() -> FakeL1Provider:
    return FakeL1Provider()


@pytest.fixture
def l2_provider() -> FakeZkSyncProvider:
    return FakeZkSyncProvider()


@pytest.fixture
def context(wallet: Wallet, l1_provider: FakeL1Provider, l2_provider: FakeZkSyncProvider) -> NetworkContext:
    return NetworkContext(wallet, l1_provider, l2_provider)


@pytest.fixture
def deployer(context: NetworkContext, artifact_store: ArtifactStore) -> Deployer:
    return Deployer(context, artifact_store, confirmation_timeout=1, poll_interval=0)


@pytest.fixture
def test_account():
    return Account.from_key(TEST_PRIVATE_KEY)
