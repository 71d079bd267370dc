"""Network configuration for zksync-deploy library."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import DEFAULT_CONFIRMATION_TIMEOUT, DEFAULT_POLL_INTERVAL
from .exceptions import ConfigurationError

ENV_ZKSYNC_NETWORK = "ZKSYNC_NETWORK"
ENV_ETH_NETWORK = "ETH_NETWORK"
ENV_ARTIFACTS_DIR = "ZKSYNC_ARTIFACTS_DIR"


@dataclass(frozen=True)
class DeployConfig:
    """
    Where to deploy.

    zksync_network is the zkSync RPC URL (e.g. "http://127.0.0.1:3050").
    eth_network is either an RPC URL or a named network ("mainnet", "goerli", ...).
    """

    zksync_network: str
    eth_network: str
    artifacts_dir: Optional[str] = None
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeployConfig":
        """
        Build configuration from a mapping.

        Accepts the hardhat plugin keys (zkSyncNetwork, ethNetwork) and
        their snake_case equivalents, optionally nested under "zkSyncDeploy".

        Raises:
            ConfigurationError: If either network is missing
        """
        if "zkSyncDeploy" in data:
            data = data["zkSyncDeploy"]

        zksync_network = data.get("zkSyncNetwork", data.get("zksync_network"))
        eth_network = data.get("ethNetwork", data.get("eth_network"))
        if not zksync_network:
            raise ConfigurationError("zkSyncNetwork is not configured")
        if not eth_network:
            raise ConfigurationError("ethNetwork is not configured")

        return cls(
            zksync_network=zksync_network,
            eth_network=eth_network,
            artifacts_dir=data.get("artifactsDir", data.get("artifacts_dir")),
            confirmation_timeout=float(
                data.get("confirmationTimeout", DEFAULT_CONFIRMATION_TIMEOUT)
            ),
            poll_interval=float(data.get("pollInterval", DEFAULT_POLL_INTERVAL)),
        )

    @classmethod
    def from_file(cls, path: Union[Path, str]) -> "DeployConfig":
        """
        Load configuration from a JSON file.

        Raises:
            ConfigurationError: If the file is missing, malformed or incomplete
        """
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Config file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "DeployConfig":
        """
        Load configuration from $ZKSYNC_NETWORK, $ETH_NETWORK and $ZKSYNC_ARTIFACTS_DIR.

        Raises:
            ConfigurationError: If either network variable is unset
        """
        zksync_network = os.environ.get(ENV_ZKSYNC_NETWORK)
        eth_network = os.environ.get(ENV_ETH_NETWORK)
        if zksync_network is None or eth_network is None:
            raise ConfigurationError(
                f"Network required: set ${ENV_ZKSYNC_NETWORK} and ${ENV_ETH_NETWORK} "
                "environment variables"
            )
        return cls(
            zksync_network=zksync_network,
            eth_network=eth_network,
            artifacts_dir=os.environ.get(ENV_ARTIFACTS_DIR),
        )
