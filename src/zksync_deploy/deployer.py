"""Main API for zksync-deploy library."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from eth_account.signers.local import LocalAccount
from eth_utils import keccak, to_checksum_address

from .artifacts import ArtifactStore, parse_artifact
from .config import DeployConfig
from .constants import (
    ARTIFACT_FORMAT_VERSION,
    CONTRACT_DEPLOYED_EVENT,
    CONTRACT_DEPLOYER_ADDRESS,
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    ETH_ADDRESS,
)
from .context import NetworkContext
from .encoding import encode_constructor_arguments, encode_create_calldata, hash_bytecode
from .exceptions import (
    DependencyResolutionFailure,
    DeployerError,
    DeploymentFailure,
    EstimationFailure,
    IncompatibleCompiler,
    RpcError,
)
from .types import ContractHandle, DeployTransaction, ZkSyncArtifact
from .wallet import EthWallet, Wallet

log = logging.getLogger(__name__)

CONTRACT_DEPLOYED_TOPIC = "0x" + keccak(text=CONTRACT_DEPLOYED_EVENT).hex()


def _deployed_address(receipt: Dict[str, Any], bytecode_hash: bytes) -> Optional[str]:
    """
    Find the address of the deployed contract in a receipt.

    Looks for the ContractDeployed event the contract deployer emits for
    this bytecode hash, falling back to receipt.contractAddress.
    """
    hash_topic = "0x" + bytecode_hash.hex()
    for entry in receipt.get("logs") or []:
        topics = [topic.lower() for topic in entry.get("topics", [])]
        if (
            entry.get("address", "").lower() == CONTRACT_DEPLOYER_ADDRESS
            and len(topics) == 4
            and topics[0] == CONTRACT_DEPLOYED_TOPIC
            and topics[2] == hash_topic
        ):
            return to_checksum_address("0x" + topics[3][-40:])

    address = receipt.get("contractAddress")
    return to_checksum_address(address) if address else None


def _reverted(receipt: Dict[str, Any]) -> bool:
    status = receipt.get("status")
    if status is None:
        return False
    return (int(status, 16) if isinstance(status, str) else status) != 1


class Deployer:
    """Deploys zksolc-compiled contracts to the zkSync network."""

    def __init__(
        self,
        context: NetworkContext,
        artifact_store: Optional[ArtifactStore] = None,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        """
        Initialize the deployer.

        Args:
            context: Network context owning both connections and the wallet
            artifact_store: Where artifacts are read from
                            If None, uses ./artifacts-zk
            confirmation_timeout: Seconds to wait for a deploy receipt
            poll_interval: Seconds between receipt queries
        """
        self.context = context
        self.artifact_store = artifact_store or ArtifactStore()
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval

    @classmethod
    def from_config(
        cls,
        config: DeployConfig,
        private_key: Optional[str] = None,
        wallet: Optional[Wallet] = None,
        artifacts_dir: Optional[Union[Path, str]] = None,
    ) -> "Deployer":
        """
        Create a deployer from network configuration and a signing key or wallet.

        Args:
            config: Network configuration
            private_key: Hex private key (exclusive with wallet)
            wallet: Existing wallet (exclusive with private_key)
            artifacts_dir: Overrides config.artifacts_dir

        Returns:
            Deployer owning a fresh NetworkContext
        """
        context = NetworkContext.from_config(config, private_key=private_key, wallet=wallet)
        return cls(
            context,
            ArtifactStore(artifacts_dir or config.artifacts_dir),
            confirmation_timeout=config.confirmation_timeout,
            poll_interval=config.poll_interval,
        )

    @classmethod
    def from_private_key(
        cls,
        config: DeployConfig,
        private_key: str,
        artifacts_dir: Optional[Union[Path, str]] = None,
    ) -> "Deployer":
        """Create a deployer that signs with a hex private key."""
        return cls.from_config(config, private_key=private_key, artifacts_dir=artifacts_dir)

    @classmethod
    def from_eth_wallet(
        cls,
        config: DeployConfig,
        eth_account: LocalAccount,
        artifacts_dir: Optional[Union[Path, str]] = None,
    ) -> "Deployer":
        """Create a deployer that signs with the key of an Ethereum account."""
        return cls.from_config(config, wallet=Wallet(eth_account), artifacts_dir=artifacts_dir)

    @property
    def zk_wallet(self) -> Wallet:
        return self.context.wallet

    @property
    def eth_wallet(self) -> EthWallet:
        return self.context.eth_wallet

    def close(self) -> None:
        self.context.close()

    def load_artifact(self, contract_name_or_fully_qualified_name: str) -> ZkSyncArtifact:
        """
        Load an artifact and verify that it was compiled by zksolc.

        Args:
            contract_name_or_fully_qualified_name: A bare contract name
                (e.g. "Token") if it is unique in the project, or a fully
                qualified name (e.g. "contracts/Token.sol:Token") otherwise

        Returns:
            Verified artifact

        Raises:
            AmbiguousIdentifier: If a bare name matches several contracts,
                                 listing the fully qualified names to use instead
            ArtifactNotFoundError: If no contract matches
            IncompatibleCompiler: If the artifact was built by solc, vyper or
                                  any toolchain other than zksolc
            InvalidArtifactError: If the artifact file cannot be decoded
        """
        identifier = contract_name_or_fully_qualified_name
        data = self.artifact_store.read_artifact_data(identifier)

        # The tag is checked on the raw record, before any zksolc field is required
        found_format = data.get("_format")
        if found_format != ARTIFACT_FORMAT_VERSION:
            raise IncompatibleCompiler(identifier, found_format)

        return parse_artifact(data, identifier)

    def extract_factory_deps(self, artifact: ZkSyncArtifact) -> List[str]:
        """
        Extract factory dependencies from an artifact.

        Only the dependencies declared on the artifact itself are resolved;
        dependencies of dependencies are not followed.

        Args:
            artifact: Artifact to extract dependencies from

        Returns:
            Dependency bytecodes, in declaration order

        Raises:
            DependencyResolutionFailure: If any dependency cannot be loaded or
                                         its bytecode cannot be hashed;
                                         the original error is the __cause__
        """
        factory_deps: List[str] = []
        for dependency_hash, dependency_contract in artifact.factory_deps.items():
            log.debug(
                "Resolving factory dependency %s (%s) of %s",
                dependency_contract,
                dependency_hash,
                artifact.contract_name,
            )
            try:
                dependency = self.load_artifact(dependency_contract)
                hash_bytecode(dependency.bytecode)
            except (DeployerError, OSError, KeyError, ValueError) as e:
                raise DependencyResolutionFailure(
                    artifact.fully_qualified_name, dependency_contract, str(e)
                ) from e
            factory_deps.append(dependency.bytecode)

        return factory_deps

    def _build_deploy_transaction(
        self,
        artifact: ZkSyncArtifact,
        constructor_arguments: Sequence[Any],
        fee_token: Optional[str],
    ) -> DeployTransaction:
        factory_deps = self.extract_factory_deps(artifact)
        constructor_calldata = encode_constructor_arguments(artifact.abi, constructor_arguments)
        data = encode_create_calldata(hash_bytecode(artifact.bytecode), constructor_calldata)

        return DeployTransaction(
            from_address=self.zk_wallet.address,
            data=data,
            # The network publishes the deployed bytecode from the deps list
            factory_deps=[*factory_deps, artifact.bytecode],
            fee_token=fee_token if fee_token is not None else ETH_ADDRESS,
        )

    def estimate_deploy_fee(
        self,
        artifact: ZkSyncArtifact,
        constructor_arguments: Sequence[Any],
        fee_token: Optional[str] = None,
    ) -> int:
        """
        Estimate the price of a deploy transaction in a certain fee token.

        Nothing is broadcast.

        Args:
            artifact: Previously loaded artifact
            constructor_arguments: Arguments passed to the contract constructor
            fee_token: Address of the token to pay fees in (defaults to ETH)

        Returns:
            Fee in the smallest denomination of the fee token

        Raises:
            DependencyResolutionFailure: If a factory dependency cannot be loaded
            ConstructorArgumentsError: If arguments do not match the ABI
            EstimationFailure: If the gas or gas price query fails
        """
        deploy_tx = self._build_deploy_transaction(artifact, constructor_arguments, fee_token)

        try:
            gas = self.zk_wallet.estimate_gas(deploy_tx)
            gas_price = self.zk_wallet.get_gas_price()
        except RpcError as e:
            raise EstimationFailure(artifact.fully_qualified_name, str(e)) from e

        log.debug("Estimated %s gas at %s for %s", gas, gas_price, artifact.contract_name)
        return gas * gas_price

    def deploy(
        self,
        artifact: ZkSyncArtifact,
        constructor_arguments: Sequence[Any],
        fee_token: Optional[str] = None,
    ) -> ContractHandle:
        """
        Send a deploy transaction to the zkSync network and wait for it.

        The fee amount is requested from the zkSync server.

        Args:
            artifact: Previously loaded artifact
            constructor_arguments: Arguments passed to the contract constructor
            fee_token: Address of the token to pay fees in (defaults to ETH)

        Returns:
            Handle to the confirmed contract

        Raises:
            DependencyResolutionFailure: If a factory dependency cannot be loaded
            ConstructorArgumentsError: If arguments do not match the ABI
            DeploymentFailure: If broadcast or confirmation fails, or the
                               deployment reverts
        """
        deploy_tx = self._build_deploy_transaction(artifact, constructor_arguments, fee_token)
        identifier = artifact.fully_qualified_name

        try:
            tx_hash = self.zk_wallet.send_transaction(deploy_tx)
            log.info("Deploying %s in transaction %s", identifier, tx_hash)
            receipt = self.context.l2_provider.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.confirmation_timeout,
                poll_interval=self.poll_interval,
            )
        except RpcError as e:
            raise DeploymentFailure(identifier, str(e)) from e

        if _reverted(receipt):
            raise DeploymentFailure(identifier, f"transaction {tx_hash} reverted", receipt=receipt)

        address = _deployed_address(receipt, hash_bytecode(artifact.bytecode))
        if address is None:
            raise DeploymentFailure(
                identifier, f"no contract address in receipt of {tx_hash}", receipt=receipt
            )

        log.info("Deployed %s at %s", identifier, address)
        return ContractHandle(
            address=address,
            abi=artifact.abi,
            contract_name=artifact.contract_name,
            transaction_hash=tx_hash,
            receipt=receipt,
            provider=self.context.l2_provider,
        )
