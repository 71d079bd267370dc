"""
zksync-deploy: Python library for deploying zksolc-compiled contracts to zkSync
"""

from importlib.metadata import PackageNotFoundError, version

from .artifacts import ArtifactStore
from .config import DeployConfig
from .context import NetworkContext
from .deployer import Deployer
from .exceptions import (
    AmbiguousIdentifier,
    ArtifactNotFoundError,
    ConfigurationError,
    ConstructorArgumentsError,
    ContractCallError,
    DependencyResolutionFailure,
    DeployerError,
    DeploymentFailure,
    EstimationFailure,
    IncompatibleCompiler,
    InvalidArtifactError,
    InvalidBytecodeError,
    RpcError,
    TransactionTimeoutError,
)
from .providers import JsonRpcProvider, ZkSyncProvider
from .types import ContractHandle, DeployTransaction, ZkSyncArtifact
from .wallet import EthWallet, Wallet

try:
    __version__ = version("zksync-deploy")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "Deployer",
    "NetworkContext",
    "DeployConfig",
    "ArtifactStore",
    "JsonRpcProvider",
    "ZkSyncProvider",
    "Wallet",
    "EthWallet",
    "ZkSyncArtifact",
    "DeployTransaction",
    "ContractHandle",
    "DeployerError",
    "ArtifactNotFoundError",
    "AmbiguousIdentifier",
    "IncompatibleCompiler",
    "DependencyResolutionFailure",
    "EstimationFailure",
    "DeploymentFailure",
    "RpcError",
    "TransactionTimeoutError",
    "ConstructorArgumentsError",
    "InvalidBytecodeError",
    "InvalidArtifactError",
    "ContractCallError",
    "ConfigurationError",
]
